# -*- coding: utf-8 -*-
"""
Entity Create Controller
========================
One creation-wizard session: draft editing, step navigation and submission.

The presentation layer only calls the methods below and renders what the
signals report; it never mutates wizard state directly.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from PyQt5.QtCore import QObject, pyqtSignal

from controllers.base_controller import BaseController
from controllers.wizard_controller import WizardController
from models.draft import Draft, MediaFile
from models.wizard import ImageSlot, WizardDefinition
from services.wizard.draft_store import DraftStore
from services.wizard.step_validator import StepValidator
from services.wizard.submission_pipeline import (
    SubmissionPipeline,
    SubmissionResult,
    SubmissionStage,
    SubmissionWorker,
    Creator,
    Uploader,
)
from utils.logger import get_logger

logger = get_logger(__name__)

Navigator = Callable[[str], None]


class EntityCreateController(BaseController):
    """
    Controller for an entity creation wizard.

    Signals:
        draft_changed(Draft): after every field edit or image change
        submission_finished(SubmissionResult): after every submit attempt
    """

    SUBMIT_OPERATION = "submit"

    draft_changed = pyqtSignal(object)
    submission_finished = pyqtSignal(object)

    def __init__(
        self,
        definition: WizardDefinition,
        uploader: Uploader,
        creator: Creator,
        navigator: Optional[Navigator] = None,
        draft_store: Optional[DraftStore] = None,
        upload_options: Optional[Dict[str, Any]] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.definition = definition
        self.navigator = navigator
        self.draft_store = draft_store or DraftStore(definition)
        self.draft_store.load()
        self.validator = StepValidator(definition)
        self.wizard = WizardController(definition, self.validator, lambda: self.draft, parent=self)
        self.pipeline = SubmissionPipeline(
            definition,
            self.validator,
            self.draft_store,
            uploader=uploader,
            creator=creator,
            upload_options=upload_options,
        )
        self._worker: Optional[SubmissionWorker] = None
        self._attached = True

        if not self.draft.is_empty():
            logger.info(f"Resumed {definition.entity_type} draft with {len(self.draft.fields)} fields")

    @property
    def draft(self) -> Draft:
        """Current draft, including files chosen in this session."""
        return self.draft_store.current

    # =========================================================================
    # Draft editing
    # =========================================================================

    def update_fields(self, partial: Mapping[str, Any]) -> Draft:
        """Merge edited fields into the draft (persisted immediately)."""
        transient = self.definition.transient_fields & set(partial)
        if transient:
            raise ValueError(f"Use select_image() for file fields: {sorted(transient)}")
        return self._apply(partial)

    def select_image(self, file_field: str, media: Union[MediaFile, str, Path]) -> Draft:
        """
        Choose an image for a slot; it is uploaded on submit.

        The slot's stored media id is dropped so the new file wins.
        """
        slot = self._slot(file_field)
        if not isinstance(media, MediaFile):
            media = MediaFile.from_path(media)
        logger.debug(f"Selected {media.name} for {slot.file_field}")
        return self._apply({slot.file_field: media, slot.id_field: None})

    def remove_image(self, file_field: str) -> Draft:
        """Remove the chosen image and any stored id for the slot."""
        slot = self._slot(file_field)
        return self._apply({slot.file_field: None, slot.id_field: None})

    def has_saved_draft(self) -> bool:
        return self.draft_store.has_saved_draft()

    def reset(self):
        """Discard the draft, chosen files and navigation state."""
        self.draft_store.reset()
        self.wizard.reset()
        self.draft_changed.emit(self.draft)
        logger.info(f"{self.definition.entity_type} wizard reset")

    # =========================================================================
    # Navigation
    # =========================================================================

    def next(self) -> bool:
        return self.wizard.request_next()

    def previous(self) -> bool:
        return self.wizard.request_previous()

    def jump_to(self, step_index: int) -> bool:
        return self.wizard.jump_to(step_index)

    def start_manual_entry(self) -> bool:
        return self.wizard.direct_entry()

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self) -> Optional[SubmissionResult]:
        """
        Run the submission pipeline on the calling thread.

        Returns:
            SubmissionResult, or None when a submission is already running
        """
        if not self._begin_submission():
            return None
        result = self.pipeline.submit(self.draft)
        self._handle_result(result)
        return result

    def submit_async(self) -> bool:
        """
        Run the submission pipeline in a background thread.

        The result arrives through ``submission_finished``.

        Returns:
            False when a submission is already running
        """
        if not self._begin_submission():
            return False
        self._worker = SubmissionWorker(self.pipeline, self.draft)
        self._worker.finished.connect(self._on_worker_finished)
        self._worker.start()
        return True

    def detach(self):
        """
        The view is going away: a result that arrives later ends the
        loading state but emits no submission_finished and never navigates.

        A running submission is not cancelled.
        """
        self._attached = False
        logger.debug(f"{self.definition.entity_type} wizard detached")

    def _begin_submission(self) -> bool:
        if self.is_loading:
            logger.warning("Submission already in progress; ignoring")
            return False
        self._start_operation(self.SUBMIT_OPERATION, entity_type=self.definition.entity_type)
        return True

    def _on_worker_finished(self, result: SubmissionResult):
        worker, self._worker = self._worker, None
        if worker is not None:
            # run() emits just before returning
            worker.wait()
        if not self._attached:
            logger.info(f"Ignoring submission result after detach (success={result.success})")
            self._finish_operation(self.SUBMIT_OPERATION, result.message)
            return
        self._handle_result(result)

    def _handle_result(self, result: SubmissionResult):
        if result.success:
            self.wizard.reset()
            self._finish_operation(self.SUBMIT_OPERATION)
            self.draft_changed.emit(self.draft)
            self.submission_finished.emit(result)
            if self.navigator is not None:
                self.navigator(result.entity_id)
            return

        logger.warning(f"Submission failed at {result.stage.value} stage: {result.cause}")
        required = [step.index for step in self.definition.required_steps]
        if result.stage is SubmissionStage.VALIDATION:
            for index in required:
                if index >= result.step_index:
                    break
                self.wizard.clear_errors(index)
            self.wizard.focus_step(result.step_index, result.errors)
        else:
            for index in required:
                self.wizard.clear_errors(index)

        self._finish_operation(self.SUBMIT_OPERATION, result.message)
        self.draft_changed.emit(self.draft)
        self.submission_finished.emit(result)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _apply(self, partial: Mapping[str, Any]) -> Draft:
        draft = self.draft_store.patch(partial)
        self.draft_changed.emit(draft)
        return draft

    def _slot(self, file_field: str) -> ImageSlot:
        for slot in self.definition.image_slots:
            if slot.file_field == file_field:
                return slot
        raise KeyError(f"No image slot named '{file_field}'")


def create_series_wizard(
    navigator: Optional[Navigator] = None,
    api_service=None,
    draft_store: Optional[DraftStore] = None,
    parent: Optional[QObject] = None,
) -> EntityCreateController:
    """
    Build the series creation wizard wired to the backend.

    Args:
        navigator: Called with the new series id after a successful submit
        api_service: SeriesApiService (default: shared API client)
        draft_store: DraftStore override (tests, alternative storage)
    """
    from app.config import Config
    from services.series_api_service import SeriesApiService
    from services.wizard.series_wizard import SERIES_WIZARD

    api_service = api_service or SeriesApiService()
    return EntityCreateController(
        SERIES_WIZARD,
        uploader=api_service.upload,
        creator=api_service.create,
        navigator=navigator,
        draft_store=draft_store,
        upload_options={"scramble": Config.MEDIA_UPLOAD_SCRAMBLE},
        parent=parent,
    )
