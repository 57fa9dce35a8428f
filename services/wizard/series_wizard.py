# -*- coding: utf-8 -*-
"""
Series creation wizard definition.

Step 0 chooses between importing and manual entry, steps 1-2 are required,
steps 3-5 are optional and never block submission.
"""

from app.config import Config
from models.wizard import ImageSlot, StepDefinition, StepRequirement, WizardDefinition
from services.wizard.series_schemas import BasicInfoStepSchema, MediaStepSchema

SERIES_ENTITY_TYPE = "series"

STEP_SELECTION = 0
STEP_BASIC_INFO = 1
STEP_MEDIA = 2
STEP_CONTENT = 3
STEP_RELEASE_INFO = 4
STEP_ADVANCED = 5

COVER_IMAGE = ImageSlot(
    file_field="cover_image_file",
    id_field="cover_image_id",
    label="Cover image",
    folder=Config.MEDIA_UPLOAD_FOLDER,
)
BANNER_IMAGE = ImageSlot(
    file_field="banner_image_file",
    id_field="banner_image_id",
    label="Banner image",
    folder=Config.MEDIA_UPLOAD_FOLDER,
)

SERIES_WIZARD = WizardDefinition(
    entity_type=SERIES_ENTITY_TYPE,
    steps=(
        StepDefinition(STEP_SELECTION, "selection", "Selection"),
        StepDefinition(
            STEP_BASIC_INFO, "basic", "Basic information",
            StepRequirement.REQUIRED_SCHEMA, BasicInfoStepSchema,
        ),
        StepDefinition(
            STEP_MEDIA, "media", "Media & visuals",
            StepRequirement.REQUIRED_SCHEMA, MediaStepSchema,
        ),
        StepDefinition(STEP_CONTENT, "content", "Content"),
        StepDefinition(STEP_RELEASE_INFO, "release", "Release information"),
        StepDefinition(STEP_ADVANCED, "advanced", "Advanced"),
    ),
    # Cover first: errors are attributed to the first failing upload
    image_slots=(COVER_IMAGE, BANNER_IMAGE),
    date_fields=("start_date", "end_date"),
    storage_key="series-create-form-draft",
)
