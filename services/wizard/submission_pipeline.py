# -*- coding: utf-8 -*-
"""
Submission Pipeline - final step of an entity creation wizard.

Stages, strictly in order:
1. validation: every required step, by position
2. upload: each chosen image, one at a time; the returned media id replaces
   the transient file in the draft and is persisted right away
3. create: the entity, from the fully resolved draft

A failure in any stage stops the pipeline and is returned as a
SubmissionResult tagged with the stage; nothing is raised to the caller.
Uploads are not rolled back when the create call fails, so a retry reuses
the ids already stored in the draft instead of uploading again.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from PyQt5.QtCore import QThread, pyqtSignal

from models.draft import Draft, MediaFile
from models.wizard import ImageSlot, WizardDefinition
from services.error_mapper import map_exception
from services.exceptions import ApiException, ValidationException
from services.wizard.draft_store import DraftStore
from services.wizard.step_validator import StepValidator
from utils.datetime_utils import to_isoformat
from utils.logger import get_logger

logger = get_logger(__name__)

Uploader = Callable[[MediaFile, Dict[str, Any]], Mapping[str, Any]]
Creator = Callable[[Dict[str, Any]], Mapping[str, Any]]


class SubmissionStage(Enum):
    """Unit of failure attribution during submission."""
    VALIDATION = "validation"
    UPLOAD = "upload"
    CREATE = "create"


@dataclass
class SubmissionResult:
    """Outcome of a submission: success(entity_id) or failure(stage, cause)."""

    success: bool
    entity_id: Optional[str] = None
    stage: Optional[SubmissionStage] = None
    cause: Optional[Exception] = None
    step_index: Optional[int] = None
    errors: Dict[str, str] = field(default_factory=dict)
    draft: Optional[Draft] = None

    @classmethod
    def ok(cls, entity_id: str, draft: Optional[Draft] = None) -> "SubmissionResult":
        return cls(success=True, entity_id=entity_id, draft=draft)

    @classmethod
    def failed(
        cls,
        stage: SubmissionStage,
        cause: Exception,
        draft: Optional[Draft] = None,
        step_index: Optional[int] = None,
        errors: Optional[Dict[str, str]] = None,
    ) -> "SubmissionResult":
        return cls(
            success=False,
            stage=stage,
            cause=cause,
            step_index=step_index,
            errors=dict(errors or {}),
            draft=draft,
        )

    @property
    def message(self) -> str:
        """User-facing summary; technical details are only logged."""
        if self.success:
            return ""
        return map_exception(self.cause, context=self.stage.value if self.stage else None)


def build_create_payload(draft: Draft, definition: WizardDefinition) -> Dict[str, Any]:
    """
    Resolve a draft into the create payload.

    Drops transient handles and empty values, serializes dates. Key naming
    is left to the API client.
    """
    transient = definition.transient_fields
    return {
        key: _clean_value(value)
        for key, value in draft.fields.items()
        if key not in transient and value is not None
    }


def _clean_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _clean_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_clean_value(v) for v in value]
    if hasattr(value, "isoformat"):
        return to_isoformat(value)
    return value


class SubmissionPipeline:
    """
    Runs validation, uploads and creation for one wizard.

    Usage:
        pipeline = SubmissionPipeline(SERIES_WIZARD, validator, store,
                                      uploader=api.upload, creator=api.create)
        result = pipeline.submit(store.current)
    """

    def __init__(
        self,
        definition: WizardDefinition,
        validator: StepValidator,
        draft_store: DraftStore,
        uploader: Uploader,
        creator: Creator,
        controller=None,
        upload_options: Optional[Dict[str, Any]] = None,
    ):
        self.definition = definition
        self.validator = validator
        self.draft_store = draft_store
        self.uploader = uploader
        self.creator = creator
        self.controller = controller
        self.upload_options = dict(upload_options or {})

    def submit(
        self,
        draft: Draft,
        transient_files: Optional[Mapping[str, Optional[MediaFile]]] = None,
    ) -> SubmissionResult:
        """
        Submit the draft.

        Args:
            draft: Current draft
            transient_files: Files chosen in this session, keyed by file field;
                defaults to the files carried by the draft

        Returns:
            SubmissionResult (never raises for stage failures)
        """
        if transient_files is not None:
            draft = draft.merged(transient_files)

        logger.info(f"Submitting {self.definition.entity_type} draft")

        # Stage 1: validation
        failure = self._validate(draft)
        if failure is not None:
            return failure

        # Stage 2: uploads
        draft, failure = self._upload_images(draft)
        if failure is not None:
            return failure

        # Stage 3: create
        payload = build_create_payload(draft, self.definition)
        try:
            response = self.creator(payload)
            entity_id = _extract_id(response)
            if not entity_id:
                raise ApiException(f"Create response for {self.definition.entity_type} has no id")
        except Exception as e:
            logger.error(f"Create stage failed for {self.definition.entity_type}: {e}", exc_info=True)
            return SubmissionResult.failed(SubmissionStage.CREATE, e, draft=draft)

        # Completion
        logger.info(f"{self.definition.entity_type} created: {entity_id}")
        self.draft_store.reset()
        return SubmissionResult.ok(str(entity_id), draft=draft.without_files())

    # =========================================================================
    # Stages
    # =========================================================================

    def _validate(self, draft: Draft) -> Optional[SubmissionResult]:
        for step in self.definition.required_steps:
            result = self.validator.validate(step.index, draft)
            if result.is_valid:
                if self.controller is not None:
                    self.controller.clear_errors(step.index)
                continue

            logger.warning(f"Submission blocked by step {step.index} ({step.key}): {result.errors}")
            if self.controller is not None:
                self.controller.focus_step(step.index, result.errors)
            cause = ValidationException(
                f"Step '{step.label}' is incomplete",
                field=next(iter(result.errors)),
                errors=result.errors,
                context=step.key,
            )
            return SubmissionResult.failed(
                SubmissionStage.VALIDATION, cause,
                draft=draft, step_index=step.index, errors=result.errors,
            )
        return None

    def _upload_images(self, draft: Draft):
        for slot in self.definition.image_slots:
            media_file = draft.file_for(slot.file_field)
            if media_file is None:
                # Nothing new chosen: an id from an earlier upload passes through
                continue

            try:
                response = self.uploader(media_file, self._options_for(slot))
                media_id = _extract_id(response)
                if not media_id:
                    raise ApiException(f"Upload response for {media_file.name} has no media id")
            except Exception as e:
                logger.error(f"Upload failed for {slot.file_field} ({media_file.name}): {e}", exc_info=True)
                return draft, SubmissionResult.failed(SubmissionStage.UPLOAD, e, draft=draft)

            logger.info(f"Uploaded {media_file.name} as {slot.id_field}={media_id}")
            draft = self._resolve_slot(draft, slot, str(media_id))
        return draft, None

    def _resolve_slot(self, draft: Draft, slot: ImageSlot, media_id: str) -> Draft:
        resolved = {slot.id_field: media_id, slot.file_field: None}
        # Merge only the slot keys into the live draft
        self.draft_store.patch(resolved)
        return draft.merged(resolved)

    def _options_for(self, slot: ImageSlot) -> Dict[str, Any]:
        options = dict(self.upload_options)
        if slot.folder and "folder" not in options:
            options["folder"] = slot.folder
        return options


def _extract_id(response: Union[Mapping[str, Any], None]) -> Optional[Any]:
    if not response:
        return None
    return response.get("id")


class SubmissionWorker(QThread):
    """Background worker for submission."""

    finished = pyqtSignal(object)  # SubmissionResult

    def __init__(self, pipeline: SubmissionPipeline, draft: Draft):
        super().__init__()
        self.pipeline = pipeline
        self.draft = draft

    def run(self):
        """Run submission in background."""
        result = self.pipeline.submit(self.draft)
        self.finished.emit(result)
