import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.form import FormCreateRequest, FormPublishRequest, FormResponse, FormSummary
from app.services.form_service import FormService
from app.core.exceptions import NotAuthenticatedException
from app.api.deps import get_current_user, get_current_user_optional, get_request_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[FormSummary])
async def list_forms(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the signed-in user's forms, most recently updated first."""
    return await FormService.list_forms_for_user(db, current_user.id)


@router.post("", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def create_form(
    payload: FormCreateRequest,
    request_id: str = Depends(get_request_id),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a form owned by the signed-in user.
    Body: ``{"title", "description", "schema", "settings"}``; the form starts unpublished.
    """
    return await FormService.create_form(
        db=db,
        owner_id=current_user.id,
        title=payload.title,
        description=payload.description,
        schema=payload.schema_,
        form_settings=payload.settings,
        request_id=request_id
    )


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a form by ID.
    Published forms are public; unpublished forms are returned to their owner only.
    """
    return await FormService.get_visible_form(
        db=db,
        form_id=form_id,
        viewer_id=current_user.id if current_user else None
    )


@router.patch("/{form_id}/publish", response_model=FormResponse)
async def publish_form(
    form_id: str,
    payload: FormPublishRequest,
    request_id: str = Depends(get_request_id),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """
    Publish or unpublish a form.

    Body: ``{"isPublished": true|false}``. Returns the updated form.
    With PUBLISH_REQUIRES_AUTH enabled only the signed-in owner may do this.
    """
    owner_id = None
    if settings.PUBLISH_REQUIRES_AUTH:
        if current_user is None:
            raise NotAuthenticatedException()
        owner_id = current_user.id

    return await FormService.set_publish_status(
        db=db,
        form_id=form_id,
        is_published=payload.is_published,
        owner_id=owner_id,
        request_id=request_id
    )
