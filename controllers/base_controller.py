# -*- coding: utf-8 -*-
"""
Base Controller
===============
Base class for controllers that run long operations on behalf of a view.

Tracks one operation at a time: its loading flag and the user-facing
message of its last failure.
"""

from PyQt5.QtCore import QObject, pyqtSignal

from utils.logger import get_logger

logger = get_logger(__name__)


class BaseController(QObject):
    """
    Base controller class.

    Signals:
        operation_started(str): operation name
        operation_completed(str, bool): operation name, success
        operation_error(str, str): operation name, user-facing message
        loading_changed(bool): an operation started or ended
    """

    operation_started = pyqtSignal(str)
    operation_completed = pyqtSignal(str, bool)
    operation_error = pyqtSignal(str, str)
    loading_changed = pyqtSignal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._is_loading = False
        self._last_error = ""

    @property
    def is_loading(self) -> bool:
        """Check if an operation is running."""
        return self._is_loading

    @property
    def last_error(self) -> str:
        """User-facing message of the last failed operation ("" after a success)."""
        return self._last_error

    def _set_loading(self, loading: bool):
        if loading != self._is_loading:
            self._is_loading = loading
            self.loading_changed.emit(loading)

    def _start_operation(self, operation: str, **details):
        """Enter the loading state for ``operation``."""
        logger.info(f"{self.__class__.__name__}.{operation}: {details}")
        self._last_error = ""
        self.operation_started.emit(operation)
        self._set_loading(True)

    def _finish_operation(self, operation: str, error: str = ""):
        """
        Leave the loading state.

        Args:
            operation: Name passed to _start_operation()
            error: User-facing failure message; empty on success
        """
        self._last_error = error
        if error:
            logger.error(f"{self.__class__.__name__}.{operation} failed: {error}")
            self.operation_error.emit(operation, error)
        self.operation_completed.emit(operation, not error)
        self._set_loading(False)
