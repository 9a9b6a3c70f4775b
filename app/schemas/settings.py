from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from app.config import settings

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class AppSettings(BaseModel):
    """Site-wide settings shown by the UI (branding, language, landing copy)."""
    app_name: str = "FormBuilder"
    app_description: str = "Platform pembuat form yang mudah dan powerful"
    logo: str = "/logo.svg"
    # Stored as-is; the theme layer rejects unusable colours
    primary_color: str = "#6366f1"
    language: str = "id"
    allow_registration: bool = True
    require_approval: bool = False
    landing_title: str = "Buat Form Cantik dalam Hitungan Menit"
    landing_subtitle: str = "Platform terdepan untuk membuat form interaktif"
    landing_description: str = (
        "Buat form profesional dengan drag-and-drop builder kami. Kumpulkan respons, "
        "analisis data, dan bagikan form Anda ke seluruh dunia tanpa perlu coding."
    )
    hero_title: str = "Build Beautiful Forms"
    hero_subtitle: str = "in Minutes"
    hero_description: str = (
        "Create professional forms with our intuitive drag-and-drop builder. Collect responses, "
        "analyze data, and share your forms with the world, all without code."
    )
    features: List[str] = Field(default_factory=lambda: [
        "Drag & Drop Form Builder",
        "AI Essay Grading System",
        "Real-time Analytics",
        "Custom Branding",
        "Multi-language Support",
        "Advanced Quiz Features",
    ])

    class Config:
        populate_by_name = True
        alias_generator = to_camel


class AppSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    app_name: Optional[str] = None
    app_description: Optional[str] = None
    logo: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    language: Optional[str] = None
    allow_registration: Optional[bool] = None
    require_approval: Optional[bool] = None
    landing_title: Optional[str] = None
    landing_subtitle: Optional[str] = None
    landing_description: Optional[str] = None
    hero_title: Optional[str] = None
    hero_subtitle: Optional[str] = None
    hero_description: Optional[str] = None
    features: Optional[List[str]] = None

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in settings.SUPPORTED_LANGUAGES:
            raise ValueError(f"language must be one of: {', '.join(settings.SUPPORTED_LANGUAGES)}")
        return v

    class Config:
        populate_by_name = True
        alias_generator = to_camel
