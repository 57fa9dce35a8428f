# -*- coding: utf-8 -*-
"""
Series API Service - backend collaborators of the series creation wizard.

Adapts AdminApiClient to the two calls the submission pipeline makes:
``upload(file, options) -> {"id": ...}`` and ``create(payload) -> {"id": ...}``.
"""

from typing import Any, Dict, Mapping, Optional

from models.draft import MediaFile
from services.api_client import AdminApiClient, get_api_client
from services.exceptions import ApiException
from utils.logger import get_logger

logger = get_logger(__name__)


class SeriesApiService:
    """Series creation calls via REST API."""

    def __init__(self, api_client: Optional[AdminApiClient] = None):
        self._api_client = api_client

    @property
    def api(self) -> AdminApiClient:
        if self._api_client is None:
            self._api_client = get_api_client()
        return self._api_client

    def upload(self, media_file: MediaFile, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Upload one image and return its media record.

        Raises:
            ApiException: if the backend returned no media record
        """
        options = dict(options or {})
        uploaded = self.api.upload_media(
            media_file,
            folder=options.get("folder"),
            scramble=options.get("scramble", False),
        )
        if not uploaded:
            raise ApiException(f"Upload of {media_file.name} returned no media", context="upload")
        return uploaded[0]

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create the series and return it."""
        series = self.api.create_series(payload)
        logger.info(f"Series created: {series.get('id')}")
        return series
