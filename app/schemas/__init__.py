"""Pydantic schemas for request/response contracts."""
from app.schemas.form import (
    FormCreateRequest,
    FormPublishRequest,
    FormResponse,
    FormSummary,
)
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SessionResponse,
    UserResponse,
)
from app.schemas.settings import (
    AppSettings,
    AppSettingsUpdate,
)

__all__ = [
    "FormCreateRequest",
    "FormPublishRequest",
    "FormResponse",
    "FormSummary",
    "LoginRequest",
    "LoginResponse",
    "SessionResponse",
    "UserResponse",
    "AppSettings",
    "AppSettingsUpdate",
]
