"""Template management router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from careforms.database import get_db
from careforms.schemas.template import (
    TemplateCreate,
    TemplateResponse,
    TemplateListResponse,
)
from careforms.services.template import TemplateService

router = APIRouter()


@router.get("", response_model=List[TemplateListResponse])
async def list_templates(
    skip: int = 0,
    limit: int = 100,
    form_type: Optional[str] = None,
    active_only: bool = True,
    db: Session = Depends(get_db)
):
    """List all templates."""
    return TemplateService.get_templates(db, skip, limit, form_type, active_only)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    db: Session = Depends(get_db)
):
    """Get a template with its sections and fields."""
    template = TemplateService.get_template_record(db, template_id)
    if not template:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found"
        )
    return template


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    template_data: TemplateCreate,
    db: Session = Depends(get_db)
):
    """Create a new template."""
    return TemplateService.create_template(db, template_data)


@router.delete("/{template_id}")
async def delete_template(
    template_id: str,
    db: Session = Depends(get_db)
):
    """Delete (deactivate) a template."""
    success = TemplateService.delete_template(db, template_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found"
        )
    return {"message": "Template deleted successfully"}
