"""SQLAlchemy models for the CareForms backend."""

from careforms.models.template import Template
from careforms.models.response import FormResponse, ResponseStatus

__all__ = [
    "Template",
    "FormResponse",
    "ResponseStatus",
]
