"""Form response model."""

from datetime import datetime
from typing import Optional, Dict, Any
from enum import Enum as PyEnum
from uuid import uuid4

from sqlalchemy import String, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from careforms.database import Base


class ResponseStatus(str, PyEnum):
    """Persisted response states."""
    DRAFT = "draft"
    SUBMITTED = "submitted"


class FormResponse(Base):
    """
    FormResponse stores one filled-in form.

    ``response_data`` is the flat composite-key map produced by the form
    state store. The persistence layer may add underscore-prefixed
    metadata keys (e.g. ``_approval``) which are stripped before a draft
    is loaded back into an editing session.
    """

    __tablename__ = "form_responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: uuid4().hex)

    # Template reference
    template_id: Mapped[str] = mapped_column(
        ForeignKey("form_templates.id"),
        nullable=False,
        index=True
    )

    response_data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[ResponseStatus] = mapped_column(
        Enum(ResponseStatus, values_callable=lambda x: [e.value for e in x]),
        default=ResponseStatus.DRAFT,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        onupdate=datetime.utcnow,
        nullable=True
    )
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    template: Mapped["Template"] = relationship("Template", back_populates="responses")

    def __repr__(self) -> str:
        return f"<FormResponse(id={self.id}, template_id={self.template_id}, status='{self.status}')>"
