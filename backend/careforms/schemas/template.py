"""Form template Pydantic schemas."""

import json
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional, List, Tuple, Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def _new_id() -> str:
    return uuid4().hex


class FieldType(str, PyEnum):
    """Closed set of field types a template may declare."""
    TEXT = "text"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"


# Stored templates predating the checkbox rename still say "multiselect"
FIELD_TYPE_ALIASES = {"multiselect": FieldType.CHECKBOX.value}


class FormField(BaseModel):
    """A single answerable field inside a section."""
    id: str = Field(default_factory=_new_id, description="Field identifier, unique within its section")
    label: str = Field(..., min_length=1, description="Human-readable field label")
    field_type: FieldType = Field(..., alias="fieldType")
    order_index: int = Field(0, alias="orderIndex")
    is_required: bool = Field(False, alias="isRequired")
    options: Optional[Tuple[str, ...]] = Field(None, description="Choices for select/radio/checkbox fields")
    placeholder: Optional[str] = None
    help_text: Optional[str] = Field(None, alias="helpText")
    default_value: Optional[Any] = Field(None, alias="defaultValue")

    @field_validator("field_type", mode="before")
    @classmethod
    def normalize_field_type(cls, value):
        if isinstance(value, str):
            return FIELD_TYPE_ALIASES.get(value, value)
        return value

    @field_validator("options", mode="before")
    @classmethod
    def parse_options(cls, value):
        """Options are stored as a JSON-encoded list; decode them once here."""
        if value is None or value == "":
            return None
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"options must be a JSON list of strings: {e}") from e
        if not isinstance(value, (list, tuple)):
            raise ValueError("options must be a list of strings")
        return tuple(str(option) for option in value)

    class Config:
        frozen = True
        populate_by_name = True


class FormSection(BaseModel):
    """An ordered group of fields, optionally repeatable."""
    id: str = Field(default_factory=_new_id)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    order_index: int = Field(0, alias="orderIndex")
    is_repeatable: bool = Field(False, alias="isRepeatable")
    max_repeat: Optional[int] = Field(None, alias="maxRepeat", ge=1)
    fields: Tuple[FormField, ...] = ()

    class Config:
        frozen = True
        populate_by_name = True


class FormTemplate(BaseModel):
    """
    Read-only description of a form.

    Sections and fields are embedded; a template is loaded once per
    editing session and never mutated.
    """
    id: str
    name: str
    description: Optional[str] = None
    form_type: Optional[str] = Field(None, alias="formType")
    sections: Tuple[FormSection, ...] = ()

    def get_section(self, section_id: str) -> Optional[FormSection]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    class Config:
        frozen = True
        populate_by_name = True


class TemplateCreate(BaseModel):
    """Schema for creating a new template."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    form_type: Optional[str] = Field(None, alias="formType", max_length=100)
    sections: List[FormSection] = []

    class Config:
        populate_by_name = True


class TemplateResponse(BaseModel):
    """Schema for template responses."""
    id: str
    name: str
    description: Optional[str]
    form_type: Optional[str] = Field(None, serialization_alias="formType")
    sections: List[FormSection] = []
    is_active: bool = Field(..., serialization_alias="isActive")
    created_at: datetime = Field(..., serialization_alias="createdAt")

    class Config:
        from_attributes = True


class TemplateListResponse(BaseModel):
    """Schema for template list responses."""
    id: str
    name: str
    description: Optional[str]
    form_type: Optional[str] = Field(None, serialization_alias="formType")
    is_active: bool = Field(..., serialization_alias="isActive")
    created_at: datetime = Field(..., serialization_alias="createdAt")

    class Config:
        from_attributes = True
