# -*- coding: utf-8 -*-
"""
Step validation service for entity creation wizards.

Validates draft data for each step without UI coupling.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from models.draft import Draft
from models.wizard import WizardDefinition
from services.validation import ValidationFactory, ValidationStrategy
from utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_STEP_KEY = "step"


@dataclass(frozen=True)
class StepValidationResult:
    """Result of step validation."""
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def valid(cls) -> "StepValidationResult":
        return cls(is_valid=True, errors={})

    @classmethod
    def invalid(cls, errors: Dict[str, str]) -> "StepValidationResult":
        return cls(is_valid=False, errors=dict(errors))

    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0


class StepValidator:
    """
    Validates wizard step data based on the draft.

    Strategies are built once per step from the wizard definition; a
    validation call reads only the fields its step owns.
    """

    def __init__(self, definition: WizardDefinition, factory: Optional[ValidationFactory] = None):
        self.definition = definition
        factory = factory or ValidationFactory()
        self._strategies: Dict[int, ValidationStrategy] = {
            step.index: factory.create_for_step(step) for step in definition.steps
        }

    def validate(self, step_index: int, draft: Draft) -> StepValidationResult:
        """
        Validate step data from the draft.

        Args:
            step_index: Step to validate
            draft: Current draft (not modified)

        Returns:
            StepValidationResult with a field path -> message map
        """
        strategy = self._strategies.get(step_index)
        if strategy is None:
            logger.warning(f"Validation requested for unknown step {step_index}")
            return StepValidationResult.invalid(
                {UNKNOWN_STEP_KEY: f"Unknown wizard step: {step_index}"}
            )

        record = {name: draft.get(name) for name in strategy.fields()}
        errors = strategy.validate(record)
        if errors:
            logger.debug(f"Step {step_index} invalid: {errors}")
            return StepValidationResult.invalid(errors)
        return StepValidationResult.valid()

    def get_step_name(self, step_index: int) -> str:
        """Get display label for step."""
        step = self.definition.get_step(step_index)
        return step.label if step else ""
