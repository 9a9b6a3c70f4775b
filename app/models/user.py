from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin


class User(IdMixin, TimestampMixin, Base):
    """User model - credentials for the session layer."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    password = Column(String(255), nullable=False)  # bcrypt hash, never plaintext

    # Relationships
    forms = relationship("Form", back_populates="user")
