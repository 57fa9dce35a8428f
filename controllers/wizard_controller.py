# -*- coding: utf-8 -*-
"""
Wizard Controller - Manages navigation between wizard steps.

Handles:
- Step progression (next/previous) gated by step validation
- Jumps through the step indicator (completed steps only)
- Direct entry from the selection step
- Per-step error maps for inline display
"""

from typing import Callable, Dict, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from models.draft import Draft
from models.wizard import WizardDefinition, WizardState
from services.wizard.step_validator import StepValidator
from utils.logger import get_logger

logger = get_logger(__name__)


class WizardController(QObject):
    """
    State machine over WizardState.

    States are the step indices 0..N-1; step 0 is the entry/selection step
    and cannot be re-entered backwards. Validation failures are normal
    outcomes recorded in ``state.step_errors``, never exceptions.
    """

    # Signals
    step_changed = pyqtSignal(int, int)  # old_index, new_index
    state_changed = pyqtSignal(object)  # WizardState snapshot
    validation_failed = pyqtSignal(int, dict)  # step_index, errors

    def __init__(
        self,
        definition: WizardDefinition,
        validator: StepValidator,
        draft_provider: Callable[[], Draft],
        parent: Optional[QObject] = None,
    ):
        """
        Initialize the controller.

        Args:
            definition: Wizard definition (fixed step order)
            validator: Step validator
            draft_provider: Returns the current draft at validation time
        """
        super().__init__(parent)
        self.definition = definition
        self.validator = validator
        self.draft_provider = draft_provider
        self.state = WizardState()

    @property
    def current_step(self) -> int:
        return self.state.current_step

    @property
    def completed_steps(self) -> frozenset:
        return frozenset(self.state.completed_steps)

    def errors_for(self, step_index: int) -> Dict[str, str]:
        return self.state.errors_for(step_index)

    def can_go_next(self) -> bool:
        """Check if there is a step after the current one."""
        return self.state.current_step < self.definition.last_index

    def can_go_previous(self) -> bool:
        """Step 0 is never re-entered backwards, so step 1 cannot go back."""
        return self.state.current_step > 1

    def is_last_step(self) -> bool:
        return self.state.current_step == self.definition.last_index

    # =========================================================================
    # Transitions
    # =========================================================================

    def request_next(self) -> bool:
        """
        Validate the current step and advance.

        Returns:
            True if the current step validated
        """
        current = self.state.current_step
        if current == 0:
            return self.direct_entry()

        logger.debug(f"Validating step {current}...")
        result = self.validator.validate(current, self.draft_provider())
        if not result.is_valid:
            logger.warning(f"Step {current} validation failed: {result.errors}")
            self.state.set_errors(current, result.errors)
            self.validation_failed.emit(current, dict(result.errors))
            self._emit_state()
            return False

        self.state.mark_step_completed(current)
        self.state.clear_errors(current)

        if self.can_go_next():
            self._navigate_to(current + 1)
        else:
            logger.debug(f"Step {current} validated; already at last step")
            self._emit_state()
        return True

    def request_previous(self) -> bool:
        """Go back one step, without validation."""
        if not self.can_go_previous():
            logger.debug(f"Cannot go previous from step {self.state.current_step}")
            return False

        self._navigate_to(self.state.current_step - 1)
        return True

    def jump_to(self, step_index: int) -> bool:
        """
        Navigate to a step through the step indicator.

        Only completed steps are reachable; anything else is ignored.
        """
        if step_index not in self.state.completed_steps:
            logger.debug(f"Ignoring jump to step {step_index}: not completed")
            return False

        if step_index != self.state.current_step:
            self._navigate_to(step_index)
        return True

    def direct_entry(self) -> bool:
        """Leave the selection step for manual entry (step 1)."""
        self.state.mark_step_completed(0)
        if self.definition.is_valid_index(1):
            self._navigate_to(1)
        else:
            self._emit_state()
        return True

    def focus_step(self, step_index: int, errors: Optional[Dict[str, str]] = None) -> bool:
        """
        Move to a step that failed validation at submission time.

        Bypasses the completed-steps guard; completion is not changed.
        """
        if not self.definition.is_valid_index(step_index):
            logger.error(f"Invalid step index: {step_index} (valid range: 0-{self.definition.last_index})")
            return False

        if errors is not None:
            self.state.set_errors(step_index, errors)
            if errors:
                self.validation_failed.emit(step_index, dict(errors))

        if step_index != self.state.current_step:
            self._navigate_to(step_index)
        else:
            self._emit_state()
        return True

    def clear_errors(self, step_index: int):
        """Drop the error map of a step that validated outside request_next()."""
        if step_index in self.state.step_errors:
            self.state.clear_errors(step_index)
            self._emit_state()

    def reset(self):
        """Back to the selection step with a fresh state."""
        old_index = self.state.current_step
        self.state = WizardState()
        logger.info("Wizard state reset")
        if old_index != 0:
            self.step_changed.emit(old_index, 0)
        self._emit_state()

    def get_progress_percentage(self) -> float:
        """
        Get current progress as percentage.

        Returns:
            Progress percentage (0.0 to 100.0)
        """
        if self.definition.last_index == 0:
            return 100.0
        return (self.state.current_step / self.definition.last_index) * 100.0

    # =========================================================================
    # Internals
    # =========================================================================

    def _navigate_to(self, new_index: int):
        old_index = self.state.current_step
        self.state.current_step = new_index
        logger.info(f"Navigation: step {old_index} -> {new_index}")
        self.step_changed.emit(old_index, new_index)
        self._emit_state()

    def _emit_state(self):
        self.state_changed.emit(self.state.snapshot())
