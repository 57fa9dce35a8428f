# -*- coding: utf-8 -*-
"""
Tests for the error mapper.

Tests cover:
- API status codes
- Network failures
- Validation and unexpected errors
"""

import pytest

from services.error_mapper import MESSAGES, map_exception
from services.exceptions import ApiException, NetworkException, ValidationException


class TestApiErrors:
    """Test API status mapping."""

    @pytest.mark.parametrize("status,key", [
        (400, "api.rejected"),
        (422, "api.rejected"),
        (404, "api.rejected"),
        (401, "api.forbidden"),
        (403, "api.forbidden"),
        (413, "api.too_large"),
        (500, "api.server"),
        (None, "api.server"),
    ])
    def test_status(self, status, key):
        assert map_exception(ApiException("boom", status_code=status)) == MESSAGES[key]

    def test_context_is_filled_in(self):
        error = ApiException("boom", status_code=500)
        map_exception(error, context="upload")
        assert error.context == "upload"

    def test_details_never_shown(self):
        error = ApiException("boom", status_code=400, response_data={"message": ["title must be a string"]})
        assert "title" not in map_exception(error)


class TestOtherErrors:
    """Test non-API errors."""

    def test_timeout(self):
        error = NetworkException("request failed", original_error=TimeoutError("timed out"))
        assert map_exception(error) == MESSAGES["network.timeout"]

    def test_connection(self):
        assert map_exception(NetworkException("Connection refused")) == MESSAGES["network.connection"]

    def test_validation(self):
        error = ValidationException("incomplete", errors={"type": "Field required"})
        assert map_exception(error) == MESSAGES["validation"]

    def test_unexpected(self):
        assert map_exception(RuntimeError("bug"), context="create") == MESSAGES["unexpected"]
