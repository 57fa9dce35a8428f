# -*- coding: utf-8 -*-
"""
Series Admin Data Models
"""

from .draft import Draft, MediaFile
from .wizard import (
    ImageSlot,
    StepDefinition,
    StepRequirement,
    WizardDefinition,
    WizardState,
)
from .series import (
    SeriesFormat,
    SeriesSeason,
    SeriesSource,
    SeriesStatus,
    SeriesType,
)

__all__ = [
    "Draft",
    "MediaFile",
    "ImageSlot",
    "StepDefinition",
    "StepRequirement",
    "WizardDefinition",
    "WizardState",
    "SeriesFormat",
    "SeriesSeason",
    "SeriesSource",
    "SeriesStatus",
    "SeriesType",
]
