"""Feature flags controlling whether reps and faculty may post jobs."""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.app_setting import (
    AppSetting,
    DEFAULT_SETTINGS,
    FACULTY_CAN_POST_JOBS,
    REP_CAN_POST_JOBS,
)
from jobboard.services.errors import ValidationError

logger = logging.getLogger(__name__)

ROLE_FLAGS = {
    "rep": REP_CAN_POST_JOBS,
    "faculty": FACULTY_CAN_POST_JOBS,
}


@dataclass
class ToggleResult:
    setting_key: str
    value: bool
    previous: bool
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def get_settings_map(db: AsyncSession) -> dict[str, bool]:
    """All known flags, defaults filled in for rows that do not exist yet."""
    result = await db.execute(select(AppSetting.setting_key, AppSetting.setting_value))
    stored = {row.setting_key: row.setting_value for row in result}
    return {**DEFAULT_SETTINGS, **stored}


async def get_setting(db: AsyncSession, key: str) -> bool:
    result = await db.execute(select(AppSetting.setting_value).where(AppSetting.setting_key == key))
    value = result.scalar_one_or_none()
    return DEFAULT_SETTINGS.get(key, True) if value is None else value


async def is_posting_enabled(db: AsyncSession, role: str) -> bool:
    """Admins and staff always may post; reps and faculty follow their flag."""
    key = ROLE_FLAGS.get(role)
    if key is None:
        return True
    return await get_setting(db, key)


async def toggle_setting(db: AsyncSession, key: str, value: bool, user_id: UUID | None) -> ToggleResult:
    """Optimistic flag update: snapshot, apply, flush; restore the snapshot on failure."""
    if key not in DEFAULT_SETTINGS:
        raise ValidationError(f"Unknown setting: {key}")

    previous = await get_setting(db, key)
    try:
        async with db.begin_nested():
            result = await db.execute(select(AppSetting).where(AppSetting.setting_key == key))
            setting = result.scalar_one_or_none()
            if setting is None:
                setting = AppSetting(setting_key=key)
                db.add(setting)
            setting.setting_value = value
            setting.updated_by = user_id
            await db.flush()
    except SQLAlchemyError as e:
        logger.error("Failed to update setting %s: %s", key, e)
        return ToggleResult(key, previous, previous, error="Failed to update setting. Please try again.")

    logger.info("Setting %s changed from %s to %s by %s", key, previous, value, user_id)
    return ToggleResult(key, value, previous)
