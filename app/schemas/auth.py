from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    """Request schema for email/password login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public view of a user."""
    id: str
    email: str
    name: Optional[str] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Response schema for a successful login."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse


class SessionResponse(BaseModel):
    """Current session; user is null when not signed in."""
    user: Optional[UserResponse] = None
