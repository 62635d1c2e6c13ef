"""Editing session: template, live form state and the save/submit policy."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field as dc_field
from typing import Optional, Dict, Any, Mapping

from careforms.exceptions import PersistenceError
from careforms.models.response import ResponseStatus
from careforms.schemas.template import FormTemplate
from careforms.services.draft import reconcile_draft
from careforms.services.validation import validate

logger = logging.getLogger(__name__)


class ResponseSink(ABC):
    """Where finished drafts and submissions are handed off."""

    @abstractmethod
    def save(
        self,
        template_id: str,
        response_data: Dict[str, Any],
        status: ResponseStatus,
        response_id: Optional[str] = None,
    ) -> str:
        """Persist the response and return its identifier."""


@dataclass
class SubmitResult:
    submitted: bool
    errors: Dict[str, str] = dc_field(default_factory=dict)
    response_id: Optional[str] = None


class FormSession:
    """
    One user's pass over one form.

    Drafts are always saved. Submission only goes through when
    validation returns no errors; otherwise the errors are recorded on
    the store and returned without touching persistence. Sink failures
    are re-raised as ``PersistenceError`` and leave the session open.
    """

    def __init__(
        self,
        template: FormTemplate,
        sink: ResponseSink,
        initial_data: Optional[Mapping[str, Any]] = None,
        response_id: Optional[str] = None,
    ):
        self.template = template
        self.sink = sink
        self.response_id = response_id
        self.store = reconcile_draft(template, initial_data)
        self.closed = False

    def validate(self) -> Dict[str, str]:
        errors = validate(self.template, self.store.data, self.store.repeat_counts)
        self.store.set_errors(errors)
        return errors

    def save_draft(self) -> str:
        return self._persist(ResponseStatus.DRAFT)

    def submit(self) -> SubmitResult:
        errors = self.validate()
        if errors:
            logger.info(
                "Submission of template %s blocked: %d required fields missing",
                self.template.id, len(errors)
            )
            return SubmitResult(submitted=False, errors=errors)

        response_id = self._persist(ResponseStatus.SUBMITTED)
        return SubmitResult(submitted=True, response_id=response_id)

    def cancel(self) -> None:
        self.closed = True

    def _persist(self, status: ResponseStatus) -> str:
        if self.closed:
            raise RuntimeError("Form session is closed")

        try:
            response_id = self.sink.save(
                self.template.id,
                self.store.snapshot(preserve_shape=True),
                status,
                self.response_id,
            )
        except Exception as e:
            logger.error("Failed to save %s response for template %s: %s", status.value, self.template.id, e)
            raise PersistenceError(f"Failed to save form as {status.value}") from e

        self.response_id = response_id
        self.closed = True
        logger.info("Saved %s response %s", status.value, response_id)
        return response_id
