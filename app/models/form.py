from sqlalchemy import Column, String, Text, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin


class Form(IdMixin, TimestampMixin, Base):
    """Form model - a builder-defined form and its publish flag."""

    __tablename__ = "forms"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    schema = Column(JSON, nullable=False, default=list)  # List of field definitions
    settings = Column(JSON, nullable=False, default=dict)

    # Free-standing flag, no staged lifecycle
    is_published = Column(Boolean, default=False, nullable=False, index=True)

    user_id = Column(String(64), ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    user = relationship("User", back_populates="forms")
