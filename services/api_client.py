# -*- coding: utf-8 -*-
"""
Admin API Client - access to the catalogue backend.
====================================================

Covers the endpoints the creation wizards need: authentication, media
upload and entity creation.
"""

import json as _json
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import requests

from models.draft import MediaFile
from services.exceptions import ApiException, NetworkException
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ApiConfig:
    """
    API connection settings.

    Values left as None are read from Config (which reads .env).

    Example .env:
        API_BASE_URL=http://localhost:3000/api
        API_USERNAME=admin
        API_PASSWORD=secret
    """
    base_url: str = None
    username: str = None
    password: str = None
    access_token: Optional[str] = None
    timeout: int = None
    verify_ssl: bool = None

    def __post_init__(self):
        """Load from Config if not provided."""
        from app.config import Config

        if self.base_url is None:
            self.base_url = Config.API_BASE_URL
        if self.username is None:
            self.username = Config.API_USERNAME
        if self.password is None:
            self.password = Config.API_PASSWORD
        if self.timeout is None:
            self.timeout = Config.API_TIMEOUT
        if self.verify_ssl is None:
            self.verify_ssl = Config.API_VERIFY_SSL


def to_camel_case(key: str) -> str:
    """cover_image_id -> coverImageId"""
    head, *tail = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


# Nested objects whose keys are schema fields; every other value (free-form
# records such as external_links or metadata) is sent unchanged.
NESTED_OBJECT_FIELDS = ("title",)


def to_api_format(data: Dict[str, Any], nested_fields=NESTED_OBJECT_FIELDS) -> Dict[str, Any]:
    """Convert the payload's field names to the backend's camelCase."""
    converted = {}
    for key, value in data.items():
        if key in nested_fields and isinstance(value, dict):
            value = {to_camel_case(str(k)): v for k, v in value.items()}
        converted[to_camel_case(str(key))] = value
    return converted


def _unwrap(result: Any) -> Any:
    """Strip the backend's {success, data, message} envelope when present."""
    if isinstance(result, dict) and "data" in result and "success" in result:
        return result["data"]
    return result


class AdminApiClient:
    """
    Client for the catalogue admin backend.

    Features:
    - Login on first use (or an externally supplied token)
    - Token refresh before expiry
    - Uniform error mapping to ApiException / NetworkException

    Usage:
        client = AdminApiClient(ApiConfig(base_url="http://localhost:3000/api"))
        media = client.upload_media(MediaFile.from_path("cover.png"))
        series = client.create_series({"type": "ANIME", "cover_image_id": media[0]["id"]})
    """

    MEDIA_ENDPOINT = "/v1/media"
    SERIES_ENDPOINT = "/v1/series"

    def __init__(self, config: ApiConfig):
        self.config = config
        self.base_url = config.base_url.rstrip('/')
        self.session = requests.Session()
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.token_expires_at: Optional[datetime] = None

        if config.access_token:
            self.set_access_token(config.access_token)

    # ==================== Authentication ====================

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Log in and store the returned tokens.

        Returns:
            Token payload from the backend
        """
        try:
            response = self.session.post(
                f"{self.base_url}/v1/auth/login",
                json={"username": username, "password": password},
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            logger.error(f"Login failed ({status_code}) for {username}")
            raise ApiException(message="Login failed", status_code=status_code, context="login")
        except requests.exceptions.RequestException as e:
            logger.error(f"Login failed: {e}")
            raise NetworkException(message=str(e), original_error=e, context="login")

        data = _unwrap(response.json())
        self.access_token = data["accessToken"]
        self.refresh_token = data.get("refreshToken")

        expires_in = data.get("expiresIn", 3600)  # default 1 hour
        self.token_expires_at = datetime.now() + timedelta(seconds=expires_in)

        logger.info(f"Logged in as {username}")
        return data

    def set_access_token(self, token: str, expires_in: int = 3600):
        """
        Set access token from an authenticated user session.

        Args:
            token: Access token to use
            expires_in: Token lifetime in seconds
        """
        self.access_token = token
        self.token_expires_at = datetime.now() + timedelta(seconds=expires_in)
        logger.debug(f"Access token updated externally (expires in {expires_in}s)")

    def refresh_access_token(self) -> bool:
        """
        Refresh the access token with the refresh token.

        Returns:
            True if the refresh succeeded
        """
        if not self.refresh_token:
            logger.warning("No refresh token available")
            return False

        try:
            response = self.session.post(
                f"{self.base_url}/v1/auth/refresh",
                json={"refreshToken": self.refresh_token},
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
            response.raise_for_status()

            data = _unwrap(response.json())
            self.access_token = data["accessToken"]
            self.refresh_token = data.get("refreshToken", self.refresh_token)

            expires_in = data.get("expiresIn", 3600)
            self.token_expires_at = datetime.now() + timedelta(seconds=expires_in)

            logger.info("Token refreshed")
            return True

        except (requests.exceptions.RequestException, KeyError, ValueError) as e:
            logger.error(f"Token refresh failed: {e}")
            return False

    def _ensure_valid_token(self):
        """Log in, or refresh the token when it expires within 5 minutes."""
        if not self.access_token:
            self.login(self.config.username, self.config.password)
            return

        if self.token_expires_at:
            time_until_expiry = (self.token_expires_at - datetime.now()).total_seconds()
            if time_until_expiry < 300:
                logger.info("Token expiring soon, refreshing...")
                if not self.refresh_access_token():
                    # Re-login if refresh fails
                    self.login(self.config.username, self.config.password)

    def _auth_headers(self) -> Dict[str, str]:
        self._ensure_valid_token()
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json"
        }

    # ==================== Requests ====================

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        files: Optional[Any] = None,
    ) -> Any:
        """
        Perform an HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., "/v1/series")
            json_data: JSON payload
            params: Query parameters
            files: Multipart files (mutually exclusive with json_data)

        Returns:
            Response JSON data with the envelope removed
        """
        url = f"{self.base_url}{endpoint}"

        logger.info(f"[API REQ] {method} {endpoint}")
        if params:
            logger.debug(f"[API REQ] Params: {params}")
        if json_data:
            try:
                logger.debug(f"[API REQ] Body: {_json.dumps(json_data, ensure_ascii=False, default=str)}")
            except (TypeError, ValueError):
                logger.debug(f"[API REQ] Body: {json_data}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=json_data,
                params=params,
                files=files,
                headers=self._auth_headers(),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
            response.raise_for_status()

            result = None
            if response.text:
                result = response.json()

            logger.info(f"[API RES] {response.status_code} {endpoint}")
            return _unwrap(result)

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except ValueError:
                pass
            logger.error(f"[API ERR] {status_code} {method} {endpoint} | Response: {response_data}")
            raise ApiException(
                message=str(e),
                status_code=status_code,
                response_data=response_data if isinstance(response_data, dict) else {}
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Network error: {endpoint} - {e}")
            raise NetworkException(
                message=str(e),
                original_error=e
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {endpoint} - {e}")
            raise NetworkException(
                message=str(e),
                original_error=e
            )

    # ==================== Media ====================

    def upload_media(
        self,
        media_file: MediaFile,
        folder: Optional[str] = None,
        scramble: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Upload one image via multipart/form-data.

        Endpoint: POST /v1/media (form field "files")

        Returns:
            Uploaded media records, one per file
        """
        params = {"scramble": str(scramble).lower()}
        if folder:
            params["folder"] = folder

        logger.info(f"Uploading {media_file.name} ({media_file.mime_type}, {media_file.size} bytes)")

        try:
            with open(media_file.path, "rb") as f:
                files = [("files", (media_file.name, f, media_file.mime_type))]
                result = self._request("POST", self.MEDIA_ENDPOINT, params=params, files=files)
        except OSError as e:
            logger.error(f"Cannot read {media_file.path}: {e}")
            raise NetworkException(message=f"Cannot read {media_file.name}", original_error=e)

        if isinstance(result, dict):
            return [result]
        return result or []

    # ==================== Series ====================

    def create_series(self, series_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a series.

        Endpoint: POST /v1/series

        Args:
            series_data: snake_case payload (converted to camelCase here)

        Returns:
            Created series
        """
        return self._request("POST", self.SERIES_ENDPOINT, json_data=to_api_format(series_data)) or {}


# ==================== Singleton Instance ====================

_api_client_instance: Optional[AdminApiClient] = None


def get_api_client(config: Optional[ApiConfig] = None) -> AdminApiClient:
    """
    Shared AdminApiClient instance.

    Args:
        config: API settings (only used on first call)
    """
    global _api_client_instance

    if _api_client_instance is None:
        if config is None:
            config = ApiConfig()
        _api_client_instance = AdminApiClient(config)

    return _api_client_instance


def reset_api_client():
    """Reset the shared API client (for tests)."""
    global _api_client_instance
    _api_client_instance = None
