import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.form import Form
from app.core.exceptions import (
    FormNotFoundException,
    FormNotAvailableException,
    PermissionDeniedException,
    PersistenceException,
)
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)


class FormService:
    """Service for form creation, lookup, visibility checks and the publish toggle."""

    @staticmethod
    async def get_form_by_id(
        db: AsyncSession,
        form_id: str
    ) -> Optional[Form]:
        """
        Get form by ID.

        Args:
            db: Database session
            form_id: Form ID

        Returns:
            Form record or None
        """
        result = await db.execute(
            select(Form).where(Form.id == form_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_visible_form(
        db: AsyncSession,
        form_id: str,
        viewer_id: Optional[str] = None
    ) -> Form:
        """
        Get a form the viewer is allowed to see.

        Published forms are public; unpublished ones are visible to their owner only.

        Raises:
            FormNotFoundException if the form does not exist
            FormNotAvailableException if it is unpublished and the viewer is not the owner
        """
        try:
            form = await FormService.get_form_by_id(db, form_id)
        except SQLAlchemyError:
            logger.exception(sanitize_log_message("Failed to load form", FormID=form_id))
            raise PersistenceException()

        if not form:
            raise FormNotFoundException()

        if not form.is_published and (viewer_id is None or viewer_id != form.user_id):
            raise FormNotAvailableException()

        return form

    @staticmethod
    async def create_form(
        db: AsyncSession,
        owner_id: str,
        title: str,
        description: Optional[str] = None,
        schema: Optional[List[Dict[str, Any]]] = None,
        form_settings: Optional[Dict[str, Any]] = None,
        is_published: bool = False,
        request_id: Optional[str] = None
    ) -> Form:
        """
        Create a form owned by a user. New forms start unpublished unless asked otherwise.

        Args:
            db: Database session
            owner_id: ID of the owning user
            title: Form title
            description: Optional description
            schema: Field definitions
            form_settings: Display settings (submit text, theme, ...)
            is_published: Initial publish flag
            request_id: Request ID (UUID) for request tracing

        Returns:
            Created Form record

        Raises:
            PersistenceException if the database rejects the write
        """
        form = Form(
            title=title,
            description=description,
            schema=schema or [],
            settings=form_settings or {},
            is_published=is_published,
            user_id=owner_id
        )

        try:
            db.add(form)
            await db.commit()
            await db.refresh(form)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception(
                sanitize_log_message(
                    "Error creating form",
                    RequestID=request_id,
                    UserID=owner_id,
                    ErrorType=type(e).__name__
                )
            )
            raise PersistenceException()

        logger.info(
            sanitize_log_message(
                "Form created",
                RequestID=request_id,
                FormID=form.id,
                UserID=owner_id
            )
        )

        return form

    @staticmethod
    async def list_forms_for_user(
        db: AsyncSession,
        user_id: str
    ) -> List[Form]:
        """Forms owned by a user, most recently updated first."""
        try:
            result = await db.execute(
                select(Form)
                .where(Form.user_id == user_id)
                .order_by(Form.updated_at.desc())
            )
        except SQLAlchemyError:
            logger.exception(sanitize_log_message("Failed to list forms", UserID=user_id))
            raise PersistenceException()
        return list(result.scalars().all())

    @staticmethod
    async def set_publish_status(
        db: AsyncSession,
        form_id: str,
        is_published: bool,
        owner_id: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> Form:
        """
        Persist the publish flag and refresh updated_at.

        Repeating the same value is allowed; the timestamp still advances.

        Args:
            db: Database session
            form_id: Form ID
            is_published: New flag value
            owner_id: When given, the form must belong to this user
            request_id: Request ID (UUID) for request tracing

        Returns:
            Updated Form record

        Raises:
            FormNotFoundException if no form has this ID
            PermissionDeniedException if owner_id is given and does not own the form
            PersistenceException if the database rejects the read or write
        """
        try:
            form = await FormService.get_form_by_id(db, form_id)

            if not form:
                raise FormNotFoundException()

            if owner_id is not None and form.user_id != owner_id:
                raise PermissionDeniedException("You do not own this form")

            form.is_published = is_published
            form.touch()

            await db.commit()
            await db.refresh(form)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception(
                sanitize_log_message(
                    "Error updating form publish status",
                    RequestID=request_id,
                    FormID=form_id,
                    ErrorType=type(e).__name__
                )
            )
            raise PersistenceException()

        logger.info(
            sanitize_log_message(
                "Form publish status updated",
                RequestID=request_id,
                FormID=form.id,
                IsPublished=form.is_published,
                UpdatedAt=form.updated_at.isoformat()
            )
        )

        return form
