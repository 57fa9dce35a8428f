# -*- coding: utf-8 -*-


from pathlib import Path
from dataclasses import dataclass
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()

# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# API Settings
_API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000/api")
_API_TIMEOUT = int(os.getenv("API_TIMEOUT", "30"))
_API_USERNAME = os.getenv("API_USERNAME", "admin")
_API_PASSWORD = os.getenv("API_PASSWORD", "")
_API_VERIFY_SSL = os.getenv("API_VERIFY_SSL", "true").lower() in ("true", "1", "yes")

# Storage Settings
_DATA_DIR = os.getenv("SERIES_ADMIN_DATA_DIR", None)
_LOGS_DIR = os.getenv("SERIES_ADMIN_LOGS_DIR", None)

# Media Settings
_MEDIA_MAX_SIZE_MB = int(os.getenv("MEDIA_MAX_SIZE_MB", "10"))
_MEDIA_UPLOAD_FOLDER = os.getenv("MEDIA_UPLOAD_FOLDER", None)


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "Series Admin"
    APP_TITLE: str = "Series Catalogue Administration"
    VERSION: str = "1.0.0"

    # HTTP API Backend Settings
    # Reads from .env file (API_BASE_URL, API_TIMEOUT, API_USERNAME, ...)
    API_BASE_URL: str = _API_BASE_URL
    API_VERSION: str = "v1"
    API_TIMEOUT: int = _API_TIMEOUT
    API_USERNAME: str = _API_USERNAME
    API_PASSWORD: str = _API_PASSWORD
    API_VERIFY_SSL: bool = _API_VERIFY_SSL

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = Path(_DATA_DIR) if _DATA_DIR else PROJECT_ROOT / "data"
    LOGS_DIR: Path = Path(_LOGS_DIR) if _LOGS_DIR else PROJECT_ROOT / "logs"
    DRAFTS_DIR: Path = DATA_DIR / "drafts"

    # Logging
    LOG_FILE: str = "app.log"
    LOG_PATH: Path = LOGS_DIR / LOG_FILE
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

    # Wizard drafts
    # Bump when the persisted draft layout changes; older files are discarded on load.
    DRAFT_FORMAT_VERSION: int = 1

    # Media uploads
    MEDIA_MAX_SIZE_MB: int = _MEDIA_MAX_SIZE_MB
    MEDIA_ACCEPTED_TYPES: tuple = (
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    )
    MEDIA_UPLOAD_FOLDER: str = _MEDIA_UPLOAD_FOLDER
    MEDIA_UPLOAD_SCRAMBLE: bool = False
