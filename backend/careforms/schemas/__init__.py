"""Pydantic schemas for templates, responses and transcription."""

from careforms.schemas.template import (
    FieldType,
    FormField,
    FormSection,
    FormTemplate,
    TemplateCreate,
    TemplateResponse,
    TemplateListResponse,
)
from careforms.schemas.response import (
    FormResponseCreate,
    FormResponseUpdate,
    FormResponseOut,
)
from careforms.schemas.transcription import (
    TranscriptionResult,
    TranscriptionStatusResponse,
)

__all__ = [
    # Template
    "FieldType",
    "FormField",
    "FormSection",
    "FormTemplate",
    "TemplateCreate",
    "TemplateResponse",
    "TemplateListResponse",
    # Response
    "FormResponseCreate",
    "FormResponseUpdate",
    "FormResponseOut",
    # Transcription
    "TranscriptionResult",
    "TranscriptionStatusResponse",
]
