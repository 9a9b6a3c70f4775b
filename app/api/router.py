from fastapi import APIRouter
from app.api.endpoints import forms, auth, app_settings

api_router = APIRouter()

api_router.include_router(forms.router, prefix="/forms", tags=["forms"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(app_settings.router, prefix="/settings", tags=["settings"])
