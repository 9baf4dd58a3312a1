import pytest
from sqlalchemy.exc import SQLAlchemyError

from jobboard.models.app_setting import FACULTY_CAN_POST_JOBS, REP_CAN_POST_JOBS
from jobboard.services import settings_service
from jobboard.services.errors import ValidationError


async def test_defaults_when_no_rows(db):
    assert await settings_service.get_settings_map(db) == {
        REP_CAN_POST_JOBS: True,
        FACULTY_CAN_POST_JOBS: True,
    }
    assert await settings_service.is_posting_enabled(db, "rep")
    assert await settings_service.is_posting_enabled(db, "admin")


async def test_toggle_persists(db, make_user):
    admin = await make_user("admin")
    result = await settings_service.toggle_setting(db, REP_CAN_POST_JOBS, False, admin.user_id)
    assert result.ok
    assert result.previous is True
    assert result.value is False
    assert not await settings_service.is_posting_enabled(db, "rep")
    assert await settings_service.is_posting_enabled(db, "faculty")
    # staff are never gated
    await settings_service.toggle_setting(db, FACULTY_CAN_POST_JOBS, False, admin.user_id)
    assert await settings_service.is_posting_enabled(db, "staff")


async def test_failed_toggle_restores_previous_value(db, make_user, monkeypatch):
    admin = await make_user("admin")
    await settings_service.toggle_setting(db, FACULTY_CAN_POST_JOBS, True, admin.user_id)

    async def broken_flush(*args, **kwargs):
        raise SQLAlchemyError("connection reset")

    monkeypatch.setattr(db, "flush", broken_flush)
    result = await settings_service.toggle_setting(db, FACULTY_CAN_POST_JOBS, False, admin.user_id)
    monkeypatch.undo()

    assert not result.ok
    assert result.value is True
    assert result.error == "Failed to update setting. Please try again."
    assert await settings_service.get_setting(db, FACULTY_CAN_POST_JOBS) is True


async def test_unknown_setting_rejected(db):
    with pytest.raises(ValidationError):
        await settings_service.toggle_setting(db, "students_can_post_jobs", True, None)
