# -*- coding: utf-8 -*-
"""
Smoke tests to ensure the application doesn't break after changes.
These tests verify basic wiring works.
"""
import sys
import pytest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_imports():
    """Test that all main modules can be imported."""
    try:
        from app.config import Config
        from models import Draft, WizardDefinition
        from services.wizard import DraftStore, StepValidator, SubmissionPipeline
        from services.api_client import AdminApiClient
        from controllers import EntityCreateController, WizardController
        assert True
    except ImportError as e:
        pytest.fail(f"Import failed: {e}")


def test_config_defaults():
    """Test configuration values used by the wizard."""
    from app.config import Config

    assert Config.DRAFTS_DIR.name == "drafts"
    assert "image/png" in Config.MEDIA_ACCEPTED_TYPES
    assert Config.MEDIA_UPLOAD_SCRAMBLE is False


def test_logger_is_namespaced():
    """Test module loggers are children of the application logger."""
    from utils.logger import APP_LOGGER_NAME, get_logger

    logger = get_logger("services.wizard.draft_store")
    assert logger.name == f"{APP_LOGGER_NAME}.services.wizard.draft_store"


def test_logger_without_writable_log_dir(tmp_path, monkeypatch):
    """Test logging falls back to the console when the log file cannot be opened."""
    import logging
    from app.config import Config
    from utils.logger import setup_logger

    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file")
    monkeypatch.setattr(Config, "LOGS_DIR", blocker / "logs")
    monkeypatch.setattr(Config, "LOG_PATH", blocker / "logs" / "app.log")

    logger = setup_logger()

    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]


def test_api_client_singleton():
    """Test the shared API client can be reset."""
    from services.api_client import ApiConfig, get_api_client, reset_api_client

    reset_api_client()
    first = get_api_client(ApiConfig(base_url="http://api.test/api", access_token="t"))
    assert get_api_client() is first

    reset_api_client()
    assert get_api_client(ApiConfig(base_url="http://api.test/api", access_token="t")) is not first
    reset_api_client()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
