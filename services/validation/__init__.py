# -*- coding: utf-8 -*-
"""Validation services package."""

from .validation_strategy import ValidationStrategy, NoValidationStrategy, SchemaValidationStrategy
from .validation_factory import ValidationFactory

__all__ = ['ValidationStrategy', 'NoValidationStrategy', 'SchemaValidationStrategy', 'ValidationFactory']
