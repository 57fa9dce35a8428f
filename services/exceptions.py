# -*- coding: utf-8 -*-
"""Custom exceptions for the service layer."""


class ServiceException(Exception):
    """Base class for errors raised by services."""

    def __init__(self, message: str, context: str = None):
        super().__init__(message)
        self.message = message
        self.context = context


class ApiException(ServiceException):
    """The backend answered with an error status or an unusable body."""

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, context: str = None):
        super().__init__(message, context=context)
        self.status_code = status_code
        self.response_data = response_data or {}

    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ValidationException(ServiceException):
    """A wizard step is incomplete; ``errors`` maps field paths to messages."""

    def __init__(self, message: str, field: str = None,
                 errors: dict = None, context: str = None):
        super().__init__(message, context=context)
        self.field = field
        self.errors = errors or {}


class NetworkException(ServiceException):
    """The backend could not be reached, or an upload file could not be read."""

    def __init__(self, message: str, original_error: Exception = None,
                 context: str = None):
        super().__init__(message, context=context)
        self.original_error = original_error
