# -*- coding: utf-8 -*-
"""
Wizard services - validation, draft persistence and submission for
entity creation wizards.
"""

from .step_validator import StepValidator, StepValidationResult
from .draft_store import DraftStore
from .submission_pipeline import (
    SubmissionPipeline,
    SubmissionResult,
    SubmissionStage,
    SubmissionWorker,
    build_create_payload,
)

__all__ = [
    "StepValidator",
    "StepValidationResult",
    "DraftStore",
    "SubmissionPipeline",
    "SubmissionResult",
    "SubmissionStage",
    "SubmissionWorker",
    "build_create_payload",
]
