# -*- coding: utf-8 -*-
"""
Step schemas for the series creation wizard.

Each schema covers only the fields of its own step. Error locations are
flattened to dotted field paths by the StepValidator, so nested errors
surface as e.g. ``title.user_preferred``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.config import Config
from models.draft import MediaFile
from models.series import SeriesFormat, SeriesStatus, SeriesType

TITLE_MAX_LENGTH = 255


class SeriesTitleSchema(BaseModel):
    """Title variants; at least one of them must be filled in."""

    romaji: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    english: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    native: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    # Declared last and validated even when absent, so the other variants
    # are already available in info.data.
    user_preferred: Optional[str] = Field(
        default=None, max_length=TITLE_MAX_LENGTH, validate_default=True
    )

    @field_validator("user_preferred")
    @classmethod
    def at_least_one_title(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        others = [info.data.get(name) for name in ("romaji", "english", "native")]
        if not (value and value.strip()) and not any(o and o.strip() for o in others):
            raise ValueError("At least one title field is required")
        return value


class BasicInfoStepSchema(BaseModel):
    """Step 1: type, title, format and releasing status."""

    type: SeriesType
    title: Optional[SeriesTitleSchema] = None
    format: Optional[SeriesFormat] = None
    status: Optional[SeriesStatus] = None


def _check_media_file(file: Optional[MediaFile]) -> Optional[MediaFile]:
    if file is None:
        return None
    if file.mime_type not in Config.MEDIA_ACCEPTED_TYPES:
        raise ValueError(
            f"Unsupported image type '{file.mime_type}'. "
            f"Accepted: {', '.join(Config.MEDIA_ACCEPTED_TYPES)}"
        )
    if file.size_mb > Config.MEDIA_MAX_SIZE_MB:
        raise ValueError(f"Image must be {Config.MEDIA_MAX_SIZE_MB}MB or smaller")
    return file


class MediaStepSchema(BaseModel):
    """
    Step 2: cover (required) and banner (optional) images.

    An image counts as present when the user picked a file that will be
    uploaded on submit, or when an earlier upload already resolved its id.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    cover_image_file: Optional[MediaFile] = None
    banner_image_file: Optional[MediaFile] = None
    cover_image_id: Optional[str] = Field(default=None, validate_default=True)
    banner_image_id: Optional[str] = None

    @field_validator("cover_image_file", "banner_image_file")
    @classmethod
    def accepted_image(cls, value: Optional[MediaFile]) -> Optional[MediaFile]:
        return _check_media_file(value)

    @field_validator("cover_image_id")
    @classmethod
    def cover_required(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if not value and info.data.get("cover_image_file") is None:
            # A rejected file is already reported on its own field
            if "cover_image_file" in info.data:
                raise ValueError("Cover image is required")
        return value
