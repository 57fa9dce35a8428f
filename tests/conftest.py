# -*- coding: utf-8 -*-
"""
Shared fixtures for wizard tests.

pytest-qt provides ``qapp`` and ``qtbot``; the fixtures below provide a
draft store in a temporary directory and fake backend collaborators.
"""

import os

import pytest

from models.draft import MediaFile
from services.wizard.draft_store import DraftStore
from services.wizard.series_wizard import SERIES_WIZARD

# Headless runs (CI) have no display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


class FakeUploader:
    """Records uploads and returns scripted media records or errors."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def __call__(self, media_file, options):
        self.calls.append((media_file, dict(options)))
        response = self.responses.pop(0) if self.responses else {"id": f"m{len(self.calls)}"}
        if isinstance(response, Exception):
            raise response
        return response


class FakeCreator:
    """Records create payloads and returns a scripted entity or error."""

    def __init__(self, response=None):
        self.response = response if response is not None else {"id": "s-1"}
        self.payloads = []

    def __call__(self, payload):
        self.payloads.append(payload)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def storage_dir(tmp_path):
    """Directory for persisted drafts."""
    return tmp_path / "drafts"


@pytest.fixture
def draft_store(storage_dir):
    """Series draft store writing to a temporary directory."""
    return DraftStore(SERIES_WIZARD, storage_dir=storage_dir)


@pytest.fixture
def png_factory(tmp_path):
    """Create PNG files on disk and return MediaFile handles for them."""
    def _make(name="cover.png"):
        path = tmp_path / name
        path.write_bytes(PNG_BYTES)
        return MediaFile.from_path(path)
    return _make


@pytest.fixture
def cover_file(png_factory):
    return png_factory("cover.png")


@pytest.fixture
def banner_file(png_factory):
    return png_factory("banner.png")


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def creator():
    return FakeCreator()


@pytest.fixture
def valid_fields():
    """Fields that satisfy every required step except the cover image."""
    return {
        "type": "ANIME",
        "title": {"romaji": "Shingeki no Kyojin", "english": "Attack on Titan"},
        "format": "TV",
        "status": "FINISHED",
    }
