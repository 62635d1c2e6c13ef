"""Template service for storing and fetching form templates."""

import logging
from typing import Optional, List

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from careforms.models.template import Template
from careforms.schemas.template import FormTemplate, TemplateCreate

logger = logging.getLogger(__name__)


class TemplateService:
    """Service for template management."""

    @staticmethod
    def get_template_record(db: Session, template_id: str) -> Optional[Template]:
        """Get a template row by ID."""
        return db.query(Template).filter(Template.id == template_id).first()

    @staticmethod
    def get_template(db: Session, template_id: str) -> Optional[FormTemplate]:
        """Fetch a template with its sections and fields embedded."""
        db_template = TemplateService.get_template_record(db, template_id)
        if not db_template:
            return None
        return TemplateService.to_form_template(db_template)

    @staticmethod
    def get_templates(
        db: Session,
        skip: int = 0,
        limit: int = 100,
        form_type: Optional[str] = None,
        active_only: bool = True
    ) -> List[Template]:
        """Get all templates."""
        query = db.query(Template)
        if active_only:
            query = query.filter(Template.is_active == True)
        if form_type:
            query = query.filter(Template.form_type == form_type)
        return query.order_by(Template.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def create_template(db: Session, template_data: TemplateCreate) -> Template:
        """Create a new template from its section/field definition."""
        sections = [
            section.model_copy(
                update={"fields": tuple(sorted(section.fields, key=lambda f: f.order_index))}
            ).model_dump(mode="json", by_alias=True)
            for section in sorted(template_data.sections, key=lambda s: s.order_index)
        ]

        db_template = Template(
            name=template_data.name,
            description=template_data.description,
            form_type=template_data.form_type,
            sections=sections,
        )
        db.add(db_template)
        db.commit()
        db.refresh(db_template)

        logger.info("Created template %s (%s) with %d sections", db_template.id, db_template.name, len(sections))
        return db_template

    @staticmethod
    def delete_template(db: Session, template_id: str) -> bool:
        """Soft delete a template (mark as inactive)."""
        db_template = TemplateService.get_template_record(db, template_id)
        if not db_template:
            return False

        db_template.is_active = False
        db.commit()
        return True

    @staticmethod
    def to_form_template(db_template: Template) -> FormTemplate:
        """Convert a stored row into the immutable template model."""
        try:
            return FormTemplate.model_validate({
                "id": db_template.id,
                "name": db_template.name,
                "description": db_template.description,
                "formType": db_template.form_type,
                "sections": [
                    {**section, "fields": sorted(section.get("fields") or [], key=lambda f: f.get("orderIndex", 0))}
                    for section in sorted(db_template.sections or [], key=lambda s: s.get("orderIndex", 0))
                ],
            })
        except ValidationError as e:
            logger.error("Stored template %s is malformed: %s", db_template.id, e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Template {db_template.id} is malformed"
            )
