# -*- coding: utf-8 -*-
"""Centralized error message mapper."""

from services.exceptions import ApiException, ValidationException, NetworkException
from utils.logger import get_logger

logger = get_logger(__name__)

MESSAGES = {
    "api.rejected": "The server rejected the submitted data.",
    "api.forbidden": "You are not allowed to perform this action.",
    "api.too_large": "The file is too large for the server.",
    "api.server": "The server could not complete the request.",
    "network.timeout": "The server did not respond in time.",
    "network.connection": "Could not connect to the server.",
    "validation": "Some fields are missing or invalid.",
    "unexpected": "An unexpected error occurred.",
}


def map_api_error(error: ApiException) -> str:
    """Map API exception to a user-friendly message.

    Technical details are logged only - never shown to the user.
    """
    status = error.status_code

    if status in (400, 422):
        details = _extract_validation_details(error.response_data)
        if details:
            logger.warning(f"API validation error ({status}): {details}")
        return MESSAGES["api.rejected"]
    if status in (401, 403):
        logger.warning(f"API authorization error ({status}): {error}")
        return MESSAGES["api.forbidden"]
    if status == 413:
        logger.warning(f"API payload too large: {error}")
        return MESSAGES["api.too_large"]
    if error.is_client_error:
        logger.warning(f"API client error ({status}): {error}")
        return MESSAGES["api.rejected"]

    if status:
        logger.warning(f"API error ({status}): {error}")
    return MESSAGES["api.server"]


def map_network_error(error: NetworkException) -> str:
    """Map network exception to user-friendly message."""
    msg = str(error.original_error) if error.original_error else error.message
    if "timeout" in msg.lower() or "timed out" in msg.lower():
        return MESSAGES["network.timeout"]
    return MESSAGES["network.connection"]


def map_exception(error: Exception, context: str = None) -> str:
    """Map any exception to a user-friendly message.

    Technical details are logged only - never shown to the user.
    """
    if isinstance(error, ApiException):
        if not error.context and context:
            error.context = context
        return map_api_error(error)

    if isinstance(error, NetworkException):
        return map_network_error(error)

    if isinstance(error, ValidationException):
        if error.errors:
            logger.warning(f"Validation error: {error.errors}")
        return MESSAGES["validation"]

    logger.warning(f"Unexpected error{f' during {context}' if context else ''}: {error}")
    return MESSAGES["unexpected"]


def _extract_validation_details(response_data: dict) -> str:
    """Extract validation error details from API response."""
    if not response_data:
        return ""

    errors = response_data.get("errors", {})
    if isinstance(errors, dict) and errors:
        lines = []
        for field, messages in errors.items():
            if isinstance(messages, list):
                for msg in messages:
                    lines.append(f"• {field}: {msg}")
            else:
                lines.append(f"• {field}: {messages}")
        return "\n".join(lines)

    if isinstance(errors, list) and errors:
        return "\n".join(f"• {e}" for e in errors)

    message = response_data.get("message") or response_data.get("title", "")
    if isinstance(message, list):
        return "\n".join(f"• {m}" for m in message)
    return message or ""
