"""Form response Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field

from careforms.models.response import ResponseStatus


class FormResponseCreate(BaseModel):
    """Schema for saving a new draft or submission."""
    template_id: str = Field(..., alias="templateId")
    response_data: Dict[str, Any] = Field(default_factory=dict, alias="responseData")
    status: ResponseStatus = ResponseStatus.DRAFT

    class Config:
        populate_by_name = True


class FormResponseUpdate(BaseModel):
    """Schema for updating a draft."""
    response_data: Optional[Dict[str, Any]] = Field(None, alias="responseData")
    status: Optional[ResponseStatus] = None

    class Config:
        populate_by_name = True


class FormResponseOut(BaseModel):
    """Schema for form response responses."""
    id: str
    template_id: str = Field(..., serialization_alias="templateId")
    response_data: Dict[str, Any] = Field(..., serialization_alias="responseData")
    status: ResponseStatus
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")
    submitted_at: Optional[datetime] = Field(None, serialization_alias="submittedAt")

    class Config:
        from_attributes = True
