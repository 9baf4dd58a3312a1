"""Admin API endpoints — feature flags, moderation queue, user management, platform analytics."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.dependencies.auth import require_role_api
from jobboard.models.audit import DeletedUserAudit, UserStatusAudit
from jobboard.models.base import get_db
from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.models.user_role import ROLES, UserRole
from jobboard.schemas.account import (
    AccountDelete,
    DeletedUserRead,
    StatusLogRead,
    UserRoleChange,
    UserRoleRead,
    UserStatusChange,
)
from jobboard.schemas.analytics import PlatformReport
from jobboard.schemas.job import JobRead, StatusChange
from jobboard.schemas.settings import SettingsRead, SettingToggleResult, SettingUpdate
from jobboard.services import account_service, analytics_service, posting_service, settings_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/admin", tags=["admin"])

require_admin = require_role_api("admin")


# --- Feature flags ---

@router.get("/settings", response_model=SettingsRead)
async def get_app_settings(
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    return await settings_service.get_settings_map(db)


@router.patch("/settings", response_model=SettingToggleResult)
async def update_app_setting(
    body: SettingUpdate,
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    result = await settings_service.toggle_setting(db, body.setting_key, body.setting_value, admin.user_id)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error)
    return SettingToggleResult(
        setting_key=result.setting_key,
        setting_value=result.value,
        previous_value=result.previous,
    )


# --- Moderation ---

@router.get("/jobs/pending", response_model=list[JobRead])
async def list_pending_jobs(
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    """Review queue, oldest submission first."""
    result = await db.execute(
        select(Job).where(Job.status == "pending").order_by(Job.created_at.asc())
    )
    return result.scalars().all()


@router.post("/jobs/{job_id}/status", response_model=JobRead)
async def set_job_status(
    job_id: UUID,
    body: StatusChange,
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    """Approve, reject (with a note) or remove a posting."""
    job = await posting_service.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return await posting_service.moderate_job(db, job, body.status, body.rejection_note)


# --- Users ---

@router.get("/users", response_model=list[UserRoleRead])
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
    role: str | None = Query(None, description="Filter by role"),
    active_only: bool = Query(False, description="Only return active accounts"),
):
    query = select(UserRole).order_by(UserRole.created_at.desc())
    if role:
        query = query.where(UserRole.role == role)
    if active_only:
        query = query.where(UserRole.is_active == True)
    result = await db.execute(query)
    return result.scalars().all()


@router.post("/users/{user_id}/status", response_model=UserRoleRead)
async def set_user_status(
    user_id: UUID,
    body: UserStatusChange,
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    """Enable or disable an account (also how pending rep registrations are approved)."""
    if user_id == admin.user_id and not body.is_active:
        raise HTTPException(status_code=400, detail="You cannot disable your own account")
    try:
        return await account_service.set_user_active(db, user_id, body.is_active, admin.email)
    except LookupError:
        raise HTTPException(status_code=404, detail="User not found")


@router.post("/users/{user_id}/role", response_model=UserRoleRead)
async def set_user_role(
    user_id: UUID,
    body: UserRoleChange,
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    if body.role not in ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")
    record = await account_service.get_role(db, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Role of %s changed from %s to %s by %s", user_id, record.role, body.role, admin.email)
    record.role = body.role
    await db.flush()
    return record


@router.delete("/users/{user_id}", response_model=DeletedUserRead)
async def delete_user(
    user_id: UUID,
    body: AccountDelete,
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    if user_id == admin.user_id:
        raise HTTPException(status_code=400, detail="Use account settings to delete your own account")
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return await account_service.delete_account(
        db, user, body.confirm_text, body.reason, admin_email=admin.email
    )


@router.get("/deleted-users", response_model=list[DeletedUserRead])
async def list_deleted_users(
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    result = await db.execute(select(DeletedUserAudit).order_by(DeletedUserAudit.deleted_at.desc()))
    return result.scalars().all()


@router.get("/status-logs", response_model=list[StatusLogRead])
async def list_status_logs(
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
):
    result = await db.execute(select(UserStatusAudit).order_by(UserStatusAudit.created_at.desc()))
    return result.scalars().all()


# --- Analytics ---

@router.get("/analytics", response_model=PlatformReport)
async def platform_analytics(
    db: AsyncSession = Depends(get_db),
    admin: UserRole = Depends(require_admin),
    days: int = Query(settings.default_analytics_days, ge=1, le=365),
):
    """Engagement across every posting on the platform."""
    jobs = await analytics_service.load_jobs_with_events(db)
    report = analytics_service.compute_engagement(jobs, days=days)

    role_counts = await db.execute(
        select(UserRole.role, func.count(UserRole.id).label("count"))
        .where(UserRole.is_active == True)
        .group_by(UserRole.role)
    )
    report["users_by_role"] = {row.role: row.count for row in role_counts}
    report["top_companies"] = analytics_service.top_companies(jobs)
    return report
