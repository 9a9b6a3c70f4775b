"""
UI translations and the per-request language context.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from app.config import settings

TRANSLATIONS: Dict[str, Dict[str, Any]] = {
    "id": {
        "nav": {
            "formBuilder": "FormBuilder",
            "dashboard": "Dashboard",
            "settings": "Pengaturan",
            "signIn": "Masuk",
            "signOut": "Keluar",
            "createForm": "Buat Form",
            "welcomeBack": "Selamat datang kembali",
        },
        "dashboard": {
            "title": "Dashboard",
            "totalForms": "Total Form",
            "publishedForms": "Form Dipublikasi",
            "published": "Dipublikasi",
            "draft": "Draft",
        },
        "form": {
            "publish": "Publikasikan",
            "unpublish": "Batalkan Publikasi",
            "published": "Form berhasil dipublikasikan",
            "unpublished": "Publikasi form dibatalkan",
            "notAvailable": "Form tidak tersedia",
            "updated": "Diperbarui",
        },
        "diagnostic": {
            "title": "Tes Tailwind CSS",
            "intro": "Halaman ini membandingkan kelas utilitas dengan gaya inline yang setara.",
        },
    },
    "en": {
        "nav": {
            "formBuilder": "FormBuilder",
            "dashboard": "Dashboard",
            "settings": "Settings",
            "signIn": "Sign in",
            "signOut": "Sign out",
            "createForm": "Create Form",
            "welcomeBack": "Welcome back",
        },
        "dashboard": {
            "title": "Dashboard",
            "totalForms": "Total Forms",
            "publishedForms": "Published Forms",
            "published": "Published",
            "draft": "Draft",
        },
        "form": {
            "publish": "Publish",
            "unpublish": "Unpublish",
            "published": "Form published",
            "unpublished": "Form unpublished",
            "notAvailable": "Form is not available",
            "updated": "Updated",
        },
        "diagnostic": {
            "title": "Tailwind CSS Test",
            "intro": "This page compares utility classes with equivalent inline styles.",
        },
    },
}


def lookup(language: str, key: str) -> Optional[str]:
    """Resolve a dotted key such as ``nav.dashboard``; None when missing."""
    node: Any = TRANSLATIONS.get(language)
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def available_languages() -> List[str]:
    """Configured languages that have a translation table, in configured order."""
    return [code for code in settings.SUPPORTED_LANGUAGES if code in TRANSLATIONS]


def resolve_language(*candidates: Optional[str], supported: Optional[Iterable[str]] = None) -> str:
    """First supported candidate, else settings.DEFAULT_LANGUAGE."""
    allowed = set(supported if supported is not None else settings.SUPPORTED_LANGUAGES) & set(TRANSLATIONS)
    for candidate in candidates:
        if candidate and candidate.lower() in allowed:
            return candidate.lower()
    return settings.DEFAULT_LANGUAGE


@dataclass(frozen=True)
class LanguageContext:
    language: str

    def t(self, key: str) -> str:
        """Translate a key, falling back to the default language and then the key itself."""
        return lookup(self.language, key) or lookup(settings.DEFAULT_LANGUAGE, key) or key
