"""Form response router: drafts and submissions."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from careforms.database import get_db
from careforms.models.response import ResponseStatus
from careforms.schemas.response import (
    FormResponseCreate,
    FormResponseUpdate,
    FormResponseOut,
)
from careforms.services.response import ResponseService

router = APIRouter()


@router.get("", response_model=List[FormResponseOut])
async def list_responses(
    status_filter: Optional[ResponseStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List responses, optionally only drafts or only submissions."""
    return ResponseService.get_responses(db, status_filter, skip, limit)


@router.post("", response_model=FormResponseOut, status_code=status.HTTP_201_CREATED)
async def create_response(
    response_data: FormResponseCreate,
    db: Session = Depends(get_db)
):
    """
    Save a new response.

    Drafts are always accepted; submissions are rejected with 422 and
    the per-field errors when required fields are missing.
    """
    return ResponseService.create_response(
        db,
        response_data.template_id,
        response_data.response_data,
        response_data.status,
    )


@router.get("/{response_id}", response_model=FormResponseOut)
async def get_response(
    response_id: str,
    db: Session = Depends(get_db)
):
    """Get a response by ID (used to reopen drafts)."""
    response = ResponseService.get_response(db, response_id)
    if not response:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Response not found"
        )
    return response


@router.put("/{response_id}", response_model=FormResponseOut)
async def update_response(
    response_id: str,
    update_data: FormResponseUpdate,
    db: Session = Depends(get_db)
):
    """Update a draft, or submit it."""
    response = ResponseService.update_response(
        db,
        response_id,
        update_data.response_data,
        update_data.status,
    )
    if not response:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Response not found"
        )
    return response
