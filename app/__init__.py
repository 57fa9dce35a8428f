# -*- coding: utf-8 -*-
"""
Series Admin Application Core Module
"""

from .config import Config

__all__ = ["Config"]
