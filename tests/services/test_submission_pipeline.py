# -*- coding: utf-8 -*-
"""
Tests for the wizard Submission Pipeline.

Tests cover:
- Validation stage (first invalid required step wins)
- Upload stage (ordering, id persistence, partial failure)
- Create stage (payload, failure keeps uploads)
- Completion (draft cleared)
"""

from datetime import date
from unittest.mock import MagicMock

import pytest

from models.series import SeriesSeason
from services.exceptions import ApiException, NetworkException, ValidationException
from services.wizard.draft_store import DraftStore
from services.wizard.series_wizard import SERIES_WIZARD, STEP_BASIC_INFO, STEP_MEDIA
from services.wizard.step_validator import StepValidator
from services.wizard.submission_pipeline import (
    SubmissionPipeline,
    SubmissionStage,
    build_create_payload,
)


@pytest.fixture
def pipeline(draft_store, uploader, creator):
    """Pipeline wired to fakes and a temporary draft store."""
    return SubmissionPipeline(
        SERIES_WIZARD,
        StepValidator(SERIES_WIZARD),
        draft_store,
        uploader=uploader,
        creator=creator,
        upload_options={"scramble": False},
    )


def reload(storage_dir):
    return DraftStore(SERIES_WIZARD, storage_dir=storage_dir).load()


class TestValidationStage:
    """Test validation before any network call."""

    def test_first_invalid_step_reported(self, pipeline, draft_store, uploader, creator):
        """Test both steps invalid -> step 1 is reported, nothing is sent."""
        result = pipeline.submit(draft_store.current)

        assert result.success is False
        assert result.stage is SubmissionStage.VALIDATION
        assert result.step_index == STEP_BASIC_INFO
        assert "type" in result.errors
        assert isinstance(result.cause, ValidationException)
        assert uploader.calls == []
        assert creator.payloads == []

    def test_media_step_reported(self, pipeline, draft_store, valid_fields, creator):
        draft = draft_store.patch(valid_fields)
        result = pipeline.submit(draft)

        assert result.step_index == STEP_MEDIA
        assert result.errors == {"cover_image_id": "Cover image is required"}
        assert creator.payloads == []

    def test_controller_is_focused(self, draft_store, uploader, creator, valid_fields):
        """Test an attached controller is moved to the failing step."""
        controller = MagicMock()
        pipeline = SubmissionPipeline(
            SERIES_WIZARD, StepValidator(SERIES_WIZARD), draft_store,
            uploader=uploader, creator=creator, controller=controller,
        )

        pipeline.submit(draft_store.patch(valid_fields))

        controller.clear_errors.assert_called_once_with(STEP_BASIC_INFO)
        controller.focus_step.assert_called_once_with(
            STEP_MEDIA, {"cover_image_id": "Cover image is required"}
        )

    def test_failure_message(self, pipeline, draft_store):
        result = pipeline.submit(draft_store.current)
        assert result.message == "Some fields are missing or invalid."


class TestUploadStage:
    """Test image uploads."""

    def test_uploads_in_slot_order(self, pipeline, draft_store, valid_fields,
                                   cover_file, banner_file, uploader, creator):
        """Test cover then banner, one call each, ids in the payload."""
        draft = draft_store.patch({
            **valid_fields,
            "banner_image_file": banner_file,
            "cover_image_file": cover_file,
        })
        uploader.responses = [{"id": "m1"}, {"id": "m2"}]

        result = pipeline.submit(draft)

        assert result.success is True
        assert [call[0].name for call in uploader.calls] == ["cover.png", "banner.png"]
        assert uploader.calls[0][1]["scramble"] is False
        assert creator.payloads[0]["cover_image_id"] == "m1"
        assert creator.payloads[0]["banner_image_id"] == "m2"

    def test_stored_id_is_not_uploaded_again(self, pipeline, draft_store, valid_fields, uploader, creator):
        draft = draft_store.patch({**valid_fields, "cover_image_id": "m-old"})

        result = pipeline.submit(draft)

        assert result.success is True
        assert uploader.calls == []
        assert creator.payloads[0]["cover_image_id"] == "m-old"

    def test_partial_upload_failure(self, pipeline, draft_store, storage_dir, valid_fields,
                                    cover_file, banner_file, uploader, creator):
        """Test the cover id survives when the banner upload fails."""
        draft = draft_store.patch({
            **valid_fields,
            "cover_image_file": cover_file,
            "banner_image_file": banner_file,
        })
        uploader.responses = [{"id": "m1"}, NetworkException("connection reset")]

        result = pipeline.submit(draft)

        assert result.success is False
        assert result.stage is SubmissionStage.UPLOAD
        assert creator.payloads == []
        assert reload(storage_dir).fields["cover_image_id"] == "m1"
        assert "banner_image_id" not in reload(storage_dir).fields
        assert result.draft.file_for("banner_image_file") == banner_file
        assert result.draft.file_for("cover_image_file") is None

    def test_retry_skips_resolved_upload(self, pipeline, draft_store, valid_fields,
                                         cover_file, banner_file, uploader):
        draft = draft_store.patch({
            **valid_fields,
            "cover_image_file": cover_file,
            "banner_image_file": banner_file,
        })
        uploader.responses = [{"id": "m1"}, NetworkException("connection reset"), {"id": "m2"}]

        first = pipeline.submit(draft)
        second = pipeline.submit(first.draft)

        assert second.success is True
        assert [call[0].name for call in uploader.calls] == ["cover.png", "banner.png", "banner.png"]

    def test_edit_during_upload_survives(self, pipeline, draft_store, storage_dir, valid_fields,
                                         cover_file, uploader, creator):
        """Test an edit made while the upload runs is kept next to the new id."""
        snapshot = draft_store.patch({**valid_fields, "cover_image_file": cover_file})

        def upload_while_editing(media_file, options):
            draft_store.patch({"description": "edited during submit"})
            return {"id": "m1"}

        pipeline.uploader = upload_while_editing
        creator.response = NetworkException("timed out")

        result = pipeline.submit(snapshot)

        assert result.stage is SubmissionStage.CREATE
        stored = reload(storage_dir).fields
        assert stored["description"] == "edited during submit"
        assert stored["cover_image_id"] == "m1"
        assert draft_store.current.fields["description"] == "edited during submit"
        assert draft_store.current.file_for("cover_image_file") is None

    def test_edit_before_submit_survives(self, pipeline, draft_store, storage_dir, valid_fields,
                                         cover_file, creator):
        """Test a submission started from an older draft does not roll back newer edits."""
        snapshot = draft_store.patch({**valid_fields, "cover_image_file": cover_file})
        draft_store.patch({"description": "edited during submit"})
        creator.response = NetworkException("timed out")

        pipeline.submit(snapshot)

        assert reload(storage_dir).fields["description"] == "edited during submit"

    def test_response_without_id(self, pipeline, draft_store, valid_fields, cover_file, uploader):
        """Test an upload response with no id is a failure, not a silent pass."""
        draft = draft_store.patch({**valid_fields, "cover_image_file": cover_file})
        uploader.responses = [{}]

        result = pipeline.submit(draft)

        assert result.stage is SubmissionStage.UPLOAD
        assert isinstance(result.cause, ApiException)


class TestScenarios:
    """Test end-to-end submission scenarios."""

    def test_only_new_file_is_uploaded(self, pipeline, draft_store, valid_fields, cover_file, uploader, creator):
        """Test a new cover is uploaded while an existing banner id passes through."""
        draft = draft_store.patch({
            **valid_fields,
            "cover_image_file": cover_file,
            "banner_image_id": "existing-id",
        })
        uploader.responses = [{"id": "m-cover"}]

        result = pipeline.submit(draft)

        assert result.success is True
        assert len(uploader.calls) == 1
        assert creator.payloads[0]["cover_image_id"] == "m-cover"
        assert creator.payloads[0]["banner_image_id"] == "existing-id"

    def test_create_network_error_after_uploads(self, pipeline, draft_store, storage_dir, valid_fields,
                                                cover_file, banner_file, uploader, creator):
        """Test both uploaded ids survive a create failure and the draft is kept."""
        draft = draft_store.patch({
            **valid_fields,
            "cover_image_file": cover_file,
            "banner_image_file": banner_file,
        })
        creator.response = NetworkException("Connection aborted")

        result = pipeline.submit(draft)

        assert result.stage is SubmissionStage.CREATE
        assert result.draft.fields["cover_image_id"] == "m1"
        assert result.draft.fields["banner_image_id"] == "m2"
        stored = reload(storage_dir).fields
        assert (stored["cover_image_id"], stored["banner_image_id"]) == ("m1", "m2")
        assert stored["type"] == "ANIME"

        creator.response = {"id": "s-3"}
        assert pipeline.submit(result.draft).success is True
        assert len(uploader.calls) == 2


class TestCreateStage:
    """Test entity creation."""

    def test_create_failure_keeps_uploads(self, pipeline, draft_store, storage_dir,
                                          valid_fields, cover_file, creator):
        """Test uploaded ids stay in the draft when creation fails."""
        draft = draft_store.patch({**valid_fields, "cover_image_file": cover_file})
        creator.response = ApiException("Bad Request", status_code=400)

        result = pipeline.submit(draft)

        assert result.success is False
        assert result.stage is SubmissionStage.CREATE
        assert result.message == "The server rejected the submitted data."
        assert reload(storage_dir).fields["cover_image_id"] == "m1"

    def test_create_response_without_id(self, pipeline, draft_store, valid_fields, creator):
        draft = draft_store.patch({**valid_fields, "cover_image_id": "m1"})
        creator.response = {"title": "no id"}

        result = pipeline.submit(draft)

        assert result.stage is SubmissionStage.CREATE

    def test_success_clears_draft(self, pipeline, draft_store, storage_dir, valid_fields, cover_file):
        draft = draft_store.patch({**valid_fields, "cover_image_file": cover_file})

        result = pipeline.submit(draft)

        assert result.success is True
        assert result.entity_id == "s-1"
        assert result.message == ""
        assert not draft_store.path.exists()
        assert draft_store.current.fields == {}
        assert reload(storage_dir).fields == {}


class TestCreatePayload:
    """Test payload building."""

    def test_payload_cleaning(self, draft_store, valid_fields, cover_file):
        draft = draft_store.patch({
            **valid_fields,
            "title": {"romaji": "Bleach", "english": None},
            "season": SeriesSeason.FALL,
            "start_date": date(2004, 10, 5),
            "end_date": None,
            "cover_image_id": "m1",
            "cover_image_file": cover_file,
        })

        payload = build_create_payload(draft, SERIES_WIZARD)

        assert payload["title"] == {"romaji": "Bleach"}
        assert payload["season"] == "FALL"
        assert payload["start_date"] == "2004-10-05"
        assert "end_date" not in payload
        assert "cover_image_file" not in payload
