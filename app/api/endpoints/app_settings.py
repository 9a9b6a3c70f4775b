from fastapi import APIRouter, Depends
from app.models.user import User
from app.schemas.settings import AppSettings, AppSettingsUpdate
from app.services.settings_service import SettingsService
from app.api.deps import get_current_user, get_settings_service

router = APIRouter()


@router.get("", response_model=AppSettings)
async def read_settings(
    settings_service: SettingsService = Depends(get_settings_service)
):
    """Site-wide settings merged over the defaults. Public endpoint."""
    return await settings_service.load()


@router.post("", response_model=AppSettings)
async def update_settings(
    changes: AppSettingsUpdate,
    current_user: User = Depends(get_current_user),
    settings_service: SettingsService = Depends(get_settings_service)
):
    """
    Merge a partial update into the stored settings.
    Requires a signed-in user.
    """
    return await settings_service.update(changes)
