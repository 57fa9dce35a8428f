# -*- coding: utf-8 -*-
"""
Series Admin Utility Module
"""

from .logger import get_logger, setup_logger
from .datetime_utils import to_isoformat, from_isoformat

__all__ = [
    "get_logger",
    "setup_logger",
    "to_isoformat",
    "from_isoformat",
]
