import uuid
from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.core.exceptions import NotAuthenticatedException
from app.core.security import decode_access_token
from app.services.user_service import UserService
from app.services.settings_service import SettingsService


def get_session_token(request: Request) -> Optional[str]:
    """
    Session token from ``Authorization: Bearer`` or, failing that, the session cookie.
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Get the signed-in user, or None.
    An absent, invalid or expired token, or a deleted user, all mean "no session".
    """
    token = get_session_token(request)
    if not token:
        return None

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None

    return await UserService.get_user_by_id(db, str(payload["sub"]))


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """
    Get the signed-in user.

    Raises:
        NotAuthenticatedException: 401 if there is no valid session
    """
    if user is None:
        raise NotAuthenticatedException()
    return user


def get_request_id(request: Request) -> str:
    """Request ID set by LoggingMiddleware (generated here when logging is off)."""
    if not hasattr(request.state, "request_id"):
        request.state.request_id = str(uuid.uuid4())
    return request.state.request_id


# Service Dependencies for Dependency Injection
def get_settings_service() -> SettingsService:
    """Get SettingsService bound to the configured settings file."""
    return SettingsService()
