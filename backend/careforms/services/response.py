"""Form response service: draft and submission persistence."""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from careforms.models.response import FormResponse, ResponseStatus
from careforms.models.template import Template
from careforms.services.draft import reconcile_draft
from careforms.services.form_session import ResponseSink
from careforms.services.template import TemplateService
from careforms.services.validation import validate

logger = logging.getLogger(__name__)


class ResponseService:
    """Service for form response operations."""

    @staticmethod
    def get_response(db: Session, response_id: str) -> Optional[FormResponse]:
        """Get a form response by ID."""
        return db.query(FormResponse).filter(FormResponse.id == response_id).first()

    @staticmethod
    def get_responses(
        db: Session,
        status_filter: Optional[ResponseStatus] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[FormResponse]:
        query = db.query(FormResponse)
        if status_filter:
            query = query.filter(FormResponse.status == status_filter)
        return query.order_by(FormResponse.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def create_response(
        db: Session,
        template_id: str,
        response_data: Dict[str, Any],
        response_status: ResponseStatus = ResponseStatus.DRAFT
    ) -> FormResponse:
        """Store a new draft or submission."""
        template = db.query(Template).filter(
            Template.id == template_id,
            Template.is_active == True
        ).first()

        if not template:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )

        if response_status == ResponseStatus.SUBMITTED:
            ResponseService._check_submittable(template, response_data)

        db_response = FormResponse(
            template_id=template_id,
            response_data=response_data,
            status=response_status,
            submitted_at=datetime.utcnow() if response_status == ResponseStatus.SUBMITTED else None,
        )
        db.add(db_response)
        db.commit()
        db.refresh(db_response)

        logger.info("Created %s response %s for template %s", response_status.value, db_response.id, template_id)
        return db_response

    @staticmethod
    def update_response(
        db: Session,
        response_id: str,
        response_data: Optional[Dict[str, Any]] = None,
        response_status: Optional[ResponseStatus] = None
    ) -> Optional[FormResponse]:
        """Replace a draft's data and optionally submit it."""
        db_response = ResponseService.get_response(db, response_id)
        if not db_response:
            return None

        if db_response.status == ResponseStatus.SUBMITTED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot edit a submitted response"
            )

        new_data = db_response.response_data
        if response_data is not None:
            # Keep persistence-owned metadata such as _approval across edits
            metadata = {k: v for k, v in (db_response.response_data or {}).items() if k.startswith("_")}
            new_data = {**response_data, **metadata}

        # Rejected submissions must leave the row untouched
        if response_status == ResponseStatus.SUBMITTED:
            ResponseService._check_submittable(db_response.template, new_data)

        db_response.response_data = new_data
        if response_status == ResponseStatus.SUBMITTED:
            db_response.status = ResponseStatus.SUBMITTED
            db_response.submitted_at = datetime.utcnow()

        db.commit()
        db.refresh(db_response)
        return db_response

    @staticmethod
    def _check_submittable(template: Template, response_data: Dict[str, Any]) -> None:
        form_template = TemplateService.to_form_template(template)
        store = reconcile_draft(form_template, response_data)
        errors = validate(form_template, store.data, store.repeat_counts)
        if errors:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Required fields are missing", "errors": errors}
            )


class DatabaseResponseSink(ResponseSink):
    """Hands form sessions' drafts and submissions to the database."""

    def __init__(self, db: Session):
        self.db = db

    def save(
        self,
        template_id: str,
        response_data: Dict[str, Any],
        status: ResponseStatus,
        response_id: Optional[str] = None,
    ) -> str:
        if response_id is None:
            return ResponseService.create_response(self.db, template_id, response_data, status).id

        db_response = ResponseService.update_response(self.db, response_id, response_data, status)
        if db_response is None:
            raise LookupError(f"Response {response_id} not found")
        return db_response.id
