"""Template model for storing form templates."""

from datetime import datetime
from typing import Optional, List, Dict, Any
from uuid import uuid4

from sqlalchemy import String, Text, DateTime, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from careforms.database import Base


class Template(Base):
    """
    Template model representing a form template.

    Sections and their fields are stored embedded as a JSON document
    in the same camelCase shape the API serves, so a template is always
    fetched whole.
    """

    __tablename__ = "form_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: uuid4().hex)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    form_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    # Ordered sections with embedded fields
    sections: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        onupdate=datetime.utcnow,
        nullable=True
    )

    # Relationships
    responses: Mapped[List["FormResponse"]] = relationship(
        "FormResponse",
        back_populates="template"
    )

    def __repr__(self) -> str:
        return f"<Template(id={self.id}, name='{self.name}')>"
