"""Database models."""
from app.models.form import Form
from app.models.user import User

__all__ = [
    "Form",
    "User",
]
