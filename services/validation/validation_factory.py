# -*- coding: utf-8 -*-
"""
Validation Factory - Creates the validation strategy of each wizard step.

Adding a step is a data change: the step's requirement selects the
strategy, the step's schema parameterises it.
"""

from typing import Callable, Dict

from models.wizard import StepDefinition, StepRequirement
from .validation_strategy import ValidationStrategy, NoValidationStrategy, SchemaValidationStrategy

StrategyBuilder = Callable[[StepDefinition], ValidationStrategy]


class ValidationFactory:
    """
    Registry of strategy builders keyed by step requirement.
    """

    def __init__(self):
        """Initialize the validation factory."""
        self._builders: Dict[StepRequirement, StrategyBuilder] = {}
        self._register_default_builders()

    def _register_default_builders(self):
        """Register built-in builders for each requirement."""
        self.register_builder(StepRequirement.NONE, lambda step: NoValidationStrategy())
        self.register_builder(
            StepRequirement.REQUIRED_SCHEMA,
            lambda step: SchemaValidationStrategy(step.schema),
        )

    def register_builder(self, requirement: StepRequirement, builder: StrategyBuilder):
        """
        Register a strategy builder for a step requirement.

        Args:
            requirement: Requirement the builder handles
            builder: Callable returning a ValidationStrategy for a step
        """
        self._builders[requirement] = builder

    def create_for_step(self, step: StepDefinition) -> ValidationStrategy:
        """
        Build the strategy for a step.

        Raises:
            KeyError: if no builder is registered for the step's requirement
        """
        builder = self._builders.get(step.requirement)
        if builder is None:
            raise KeyError(f"No validation strategy registered for requirement: {step.requirement.value}")
        return builder(step)
