import logging
from datetime import datetime, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse, SessionResponse, UserResponse
from app.services.user_service import UserService
from app.core.exceptions import InvalidCredentialsException
from app.core.security import create_access_token
from app.core.logging_utils import sanitize_log_message
from app.middleware.rate_limit import rate_limit_auth
from app.api.deps import get_current_user_optional, get_request_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@rate_limit_auth()
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Sign in with email and password.
    Returns a bearer token and also sets it as an HTTP-only session cookie.
    """
    request_id = get_request_id(request)
    user = await UserService.authenticate(db, credentials.email, credentials.password)
    if not user:
        logger.warning(
            sanitize_log_message("Failed login attempt", RequestID=request_id, Email=credentials.email)
        )
        raise InvalidCredentialsException()

    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.id, "email": user.email},
        expires_delta=expires_delta
    )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=int(expires_delta.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT == "production",
    )

    logger.info(sanitize_log_message("User signed in", RequestID=request_id, UserID=user.id))

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_at=datetime.utcnow() + expires_delta,
        user=UserResponse.model_validate(user)
    )


@router.post("/logout", response_model=SessionResponse)
async def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return SessionResponse()


@router.get("/session", response_model=SessionResponse)
async def get_session(
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Current session; ``user`` is null when not signed in."""
    if current_user is None:
        return SessionResponse()
    return SessionResponse(user=UserResponse.model_validate(current_user))
