# -*- coding: utf-8 -*-
"""
Series Admin Controllers
========================
Controller layer between the wizard views and the wizard services.

Controllers provide:
- Qt signals for UI updates
- Step navigation gated by validation
- Submission orchestration (sync or in a worker thread)

Usage:
    from controllers import create_series_wizard

    wizard = create_series_wizard(navigator=lambda series_id: open_series(series_id))
    wizard.start_manual_entry()
    wizard.update_fields({"type": "ANIME"})
    wizard.next()
"""

from controllers.base_controller import BaseController
from controllers.wizard_controller import WizardController
from controllers.entity_create_controller import (
    EntityCreateController,
    create_series_wizard,
)

__all__ = [
    "BaseController",
    "WizardController",
    "EntityCreateController",
    "create_series_wizard",
]
