import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import aiofiles
import aiofiles.os
from pydantic import ValidationError
from app.config import settings
from app.schemas.settings import AppSettings, AppSettingsUpdate
from app.core.exceptions import SettingsStorageException
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)


class SettingsService:
    """File-backed store for the site-wide AppSettings."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.SETTINGS_FILE)

    async def load(self) -> AppSettings:
        """
        Stored settings merged over the defaults.

        A missing, unreadable or non-object file yields the defaults. Each
        stored field is validated on its own, so an invalid value only falls
        back to that field's default.
        """
        if not self.path.exists():
            return AppSettings()

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
        except (OSError, ValueError) as e:
            logger.error(
                sanitize_log_message(
                    "Error loading settings, using defaults",
                    Path=str(self.path),
                    Error=str(e)
                )
            )
            return AppSettings()

        if not isinstance(data, dict):
            logger.error(
                sanitize_log_message(
                    "Settings file is not a JSON object, using defaults",
                    Path=str(self.path)
                )
            )
            return AppSettings()

        return self._merge_over_defaults(data)

    def _merge_over_defaults(self, data: Dict[str, Any]) -> AppSettings:
        merged: Dict[str, Any] = {}
        for name, field in AppSettings.model_fields.items():
            key = field.alias if field.alias in data else name
            if key not in data:
                continue
            try:
                candidate = AppSettings.model_validate({key: data[key]})
            except ValidationError as e:
                logger.warning(
                    sanitize_log_message(
                        "Ignoring invalid stored setting",
                        Field=field.alias or name,
                        Error=e.errors()[0].get("msg")
                    )
                )
                continue
            merged[name] = getattr(candidate, name)

        return AppSettings.model_validate(merged)

    async def save(self, app_settings: AppSettings) -> AppSettings:
        """Write settings atomically (temp file + rename)."""
        payload = json.dumps(app_settings.model_dump(by_alias=True), indent=2, ensure_ascii=False)
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(
                sanitize_log_message("Error saving settings", Path=str(self.path), Error=str(e)),
                exc_info=True
            )
            raise SettingsStorageException()

        return app_settings

    async def update(self, changes: AppSettingsUpdate) -> AppSettings:
        """Merge a partial update into the stored settings and persist it."""
        current = await self.load()
        merged = AppSettings.model_validate({
            **current.model_dump(),
            **changes.model_dump(exclude_unset=True, exclude_none=True),
        })
        saved = await self.save(merged)
        logger.info(
            sanitize_log_message(
                "Settings updated",
                Fields=sorted(changes.model_dump(exclude_unset=True, exclude_none=True))
            )
        )
        return saved
