import logging
from pathlib import Path
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.services.form_service import FormService
from app.core.i18n import available_languages
from app.ui.providers import Providers, get_providers

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])


def render(request: Request, template_name: str, providers: Providers, status_code: int = 200, **context):
    """Render a page with the provider context merged under the page context."""
    return templates.TemplateResponse(
        request,
        template_name,
        {**providers.template_context(), **context},
        status_code=status_code,
    )


def _safe_next(next_path: Optional[str]) -> str:
    # Local paths only
    if next_path and next_path.startswith("/") and not next_path.startswith("//"):
        return next_path
    return "/"


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, providers: Providers = Depends(get_providers)):
    return render(request, "home.html", providers)


@router.get("/test-tailwind", response_class=HTMLResponse)
async def test_tailwind(request: Request, providers: Providers = Depends(get_providers)):
    """Styling pipeline check: utility classes next to equivalent inline styles."""
    return render(request, "test_tailwind.html", providers)


@router.get("/form/{form_id}", response_class=HTMLResponse)
async def view_form(
    request: Request,
    form_id: str,
    providers: Providers = Depends(get_providers),
    db: AsyncSession = Depends(get_db)
):
    """Public view of a form; unpublished forms are shown to their owner only."""
    viewer = providers.session.user
    try:
        form = await FormService.get_visible_form(db, form_id, viewer_id=viewer.id if viewer else None)
    except HTTPException as exc:
        return render(request, "error.html", providers, status_code=exc.status_code, message=exc.detail)

    return render(request, "form.html", providers, form=form)


@router.get("/language/{code}")
async def set_language(code: str, next: Optional[str] = Query(None)):
    """Remember the visitor's language choice in a cookie and go back."""
    response = RedirectResponse(url=_safe_next(next), status_code=303)
    code = code.lower()
    if code in available_languages():
        response.set_cookie(
            key=settings.LANGUAGE_COOKIE_NAME,
            value=code,
            max_age=60 * 60 * 24 * 365,
            samesite="lax",
        )
    else:
        logger.info(f"Ignoring unsupported language choice: {code!r}")
    return response
