from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, StrictBool
from pydantic.alias_generators import to_camel


class FormPublishRequest(BaseModel):
    """Request schema for publishing/unpublishing a form."""
    # Strict: "true", 1 and null are rejected rather than coerced
    is_published: StrictBool = Field(..., alias="isPublished")


class FormResponse(BaseModel):
    """Form record as returned by the API (camelCase keys)."""
    id: str
    title: str
    description: Optional[str] = None
    schema_: List[Dict[str, Any]] = Field(default_factory=list, alias="schema")
    settings: Dict[str, Any] = Field(default_factory=dict)
    is_published: bool
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class FormCreateRequest(BaseModel):
    """Request schema for creating a form owned by the signed-in user."""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    schema_: List[Dict[str, Any]] = Field(default_factory=list, alias="schema")
    settings: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class FormSummary(BaseModel):
    """Row of the owner's form list."""
    id: str
    title: str
    description: Optional[str] = None
    is_published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
