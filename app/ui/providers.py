"""
Per-request context composition for rendered pages.

Outer to inner: session, app settings, language, theme. Each layer is built
from the ones above it and the result is handed to templates explicitly.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
from fastapi import Depends, Request
from app.config import settings
from app.models.user import User
from app.schemas.settings import AppSettings
from app.services.settings_service import SettingsService
from app.core.i18n import LanguageContext, available_languages, resolve_language
from app.core.theme import ThemeContext
from app.api.deps import get_current_user_optional, get_settings_service


@dataclass(frozen=True)
class SessionContext:
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


@dataclass(frozen=True)
class Providers:
    session: SessionContext
    settings: AppSettings
    language: LanguageContext
    theme: ThemeContext

    def template_context(self) -> Dict[str, Any]:
        """Names the base layout and components expect."""
        return {
            "session": self.session,
            "app_settings": self.settings,
            "language": self.language.language,
            "supported_languages": available_languages(),
            "t": self.language.t,
            "theme": self.theme,
        }


def compose_providers(
    user: Optional[User],
    app_settings: AppSettings,
    language_choice: Optional[str] = None
) -> Providers:
    """
    Build the provider stack.

    Args:
        user: Signed-in user, if any
        app_settings: Loaded site settings
        language_choice: Language explicitly picked by the visitor (cookie)
    """
    language = LanguageContext(resolve_language(language_choice, app_settings.language))
    return Providers(
        session=SessionContext(user=user),
        settings=app_settings,
        language=language,
        theme=ThemeContext.from_primary_color(app_settings.primary_color),
    )


async def get_providers(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    settings_service: SettingsService = Depends(get_settings_service)
) -> Providers:
    """FastAPI dependency wrapping compose_providers() for page routes."""
    app_settings = await settings_service.load()
    return compose_providers(
        user=current_user,
        app_settings=app_settings,
        language_choice=request.cookies.get(settings.LANGUAGE_COOKIE_NAME),
    )
