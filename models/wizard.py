# -*- coding: utf-8 -*-
"""
Wizard models - step definitions and navigation state.

Provides:
- StepDefinition / WizardDefinition: the fixed, ordered description of a wizard
- ImageSlot: a file field that is uploaded on submit and resolved to a media id
- WizardState: current step, completed steps and per-step error maps
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set, Tuple, Type

from pydantic import BaseModel


class StepRequirement(Enum):
    """Validation requirement of a wizard step."""
    NONE = "none"
    REQUIRED_SCHEMA = "required-schema"


@dataclass(frozen=True)
class StepDefinition:
    """One screen of a wizard."""

    index: int
    key: str
    label: str
    requirement: StepRequirement = StepRequirement.NONE
    schema: Optional[Type[BaseModel]] = None

    def __post_init__(self):
        if self.requirement is StepRequirement.REQUIRED_SCHEMA and self.schema is None:
            raise ValueError(f"Step {self.index} ({self.key}) requires a schema")

    @property
    def is_required(self) -> bool:
        return self.requirement is StepRequirement.REQUIRED_SCHEMA


@dataclass(frozen=True)
class ImageSlot:
    """
    An image chosen during the wizard and uploaded on submit.

    ``file_field`` holds the transient MediaFile, ``id_field`` the persisted
    media identifier returned by the upload.
    """

    file_field: str
    id_field: str
    label: str = ""
    folder: Optional[str] = None


@dataclass(frozen=True)
class WizardDefinition:
    """
    Ordered, immutable description of an entity-creation wizard.

    Step 0 is always the entry/selection step and never validates.
    """

    entity_type: str
    steps: Tuple[StepDefinition, ...]
    image_slots: Tuple[ImageSlot, ...] = ()
    date_fields: Tuple[str, ...] = ()
    storage_key: str = ""

    def __post_init__(self):
        if not self.steps:
            raise ValueError("A wizard needs at least one step")
        for position, step in enumerate(self.steps):
            if step.index != position:
                raise ValueError(
                    f"Step '{step.key}' has index {step.index}, expected {position}"
                )
        if self.steps[0].requirement is not StepRequirement.NONE:
            raise ValueError("The entry step (index 0) cannot require validation")
        if not self.storage_key:
            object.__setattr__(self, "storage_key", f"{self.entity_type}-create-form-draft")

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1

    @property
    def required_steps(self) -> Tuple[StepDefinition, ...]:
        return tuple(step for step in self.steps if step.is_required)

    @property
    def transient_fields(self) -> frozenset:
        return frozenset(slot.file_field for slot in self.image_slots)

    def get_step(self, index: int) -> Optional[StepDefinition]:
        if 0 <= index < len(self.steps):
            return self.steps[index]
        return None

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.steps)


@dataclass
class WizardState:
    """
    Navigation state of one wizard session.

    Not persisted: only the draft survives a reload.
    """

    current_step: int = 0
    completed_steps: Set[int] = field(default_factory=set)
    step_errors: Dict[int, Dict[str, str]] = field(default_factory=dict)

    def mark_step_completed(self, step_index: int):
        """Mark a step as completed."""
        self.completed_steps.add(step_index)

    def is_step_completed(self, step_index: int) -> bool:
        """Check if a step is completed."""
        return step_index in self.completed_steps

    def set_errors(self, step_index: int, errors: Dict[str, str]):
        if errors:
            self.step_errors[step_index] = dict(errors)
        else:
            self.step_errors.pop(step_index, None)

    def clear_errors(self, step_index: int):
        self.step_errors.pop(step_index, None)

    def errors_for(self, step_index: int) -> Dict[str, str]:
        return dict(self.step_errors.get(step_index, {}))

    def snapshot(self) -> "WizardState":
        """Independent copy for consumers that must not mutate the live state."""
        return WizardState(
            current_step=self.current_step,
            completed_steps=set(self.completed_steps),
            step_errors={step: dict(errors) for step, errors in self.step_errors.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_step": self.current_step,
            "completed_steps": sorted(self.completed_steps),
            "step_errors": {step: dict(errors) for step, errors in self.step_errors.items()},
        }
