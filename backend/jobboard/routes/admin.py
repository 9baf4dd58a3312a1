"""Admin pages — review queue, feature-flag toggles, users and platform analytics."""

import logging
from pathlib import Path
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.models.audit import DeletedUserAudit
from jobboard.models.base import get_db
from jobboard.models.job import Job
from jobboard.models.user_role import UserRole
from jobboard.services import account_service, analytics_service, posting_service, settings_service
from jobboard.services.errors import ValidationError
from jobboard.dependencies.auth import require_role, ensure_csrf_token, validate_csrf_token

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/admin")
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")

require_admin = require_role("admin")

FLAG_LABELS = {
    "rep_can_post_jobs": "Company representatives can post jobs",
    "faculty_can_post_jobs": "Faculty can post jobs",
}


def _check_csrf(request: Request, token: str | None = None):
    """Validate CSRF token from X-CSRF-Token header or form data."""
    token = token or request.headers.get("X-CSRF-Token", "")
    if not validate_csrf_token(request, token):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")


async def _dashboard_ctx(request: Request, db: AsyncSession, admin: UserRole, **extra) -> dict:
    pending = await db.execute(select(Job).where(Job.status == "pending").order_by(Job.created_at.asc()))
    status_counts = await db.execute(
        select(Job.status, func.count(Job.id).label("count")).group_by(Job.status)
    )
    users = await db.execute(select(UserRole).order_by(UserRole.created_at.desc()))
    return {
        "request": request,
        "current_user": admin,
        "csrf_token": ensure_csrf_token(request),
        "pending_jobs": pending.scalars().all(),
        "status_counts": {row.status: row.count for row in status_counts},
        "users": users.scalars().all(),
        "flags": await settings_service.get_settings_map(db),
        "flag_labels": FLAG_LABELS,
        "min_rejection_note_length": settings.min_rejection_note_length,
        "error": None,
        **extra,
    }


@router.get("/dashboard", response_class=HTMLResponse)
async def admin_dashboard(
    request: Request,
    admin: UserRole = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    ctx = await _dashboard_ctx(request, db, admin)
    return templates.TemplateResponse(request, "admin/dashboard.html", ctx)


@router.post("/jobs/{job_id}/status", response_class=HTMLResponse)
async def moderate_job(
    request: Request,
    job_id: UUID,
    admin: UserRole = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject from the review queue; a short rejection note re-renders with an error."""
    form = await request.form()
    _check_csrf(request, form.get("csrf_token"))

    job = await posting_service.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        await posting_service.moderate_job(db, job, form.get("status", ""), form.get("rejection_note"))
    except ValidationError as e:
        ctx = await _dashboard_ctx(request, db, admin, error=e.message, rejecting_job_id=job.id)
        return templates.TemplateResponse(request, "admin/dashboard.html", ctx, status_code=400)

    return RedirectResponse("/admin/dashboard", status_code=303)


@router.post("/settings/toggle", response_class=HTMLResponse)
async def toggle_flag(
    request: Request,
    admin: UserRole = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """HTMX partial: the checkbox is flipped client-side; this returns the confirmed state,
    or the previous state plus an error when the write failed."""
    form = await request.form()
    _check_csrf(request, form.get("csrf_token"))

    key = form.get("setting_key", "")
    value = form.get("setting_value") in ("true", "on", "1")
    try:
        result = await settings_service.toggle_setting(db, key, value, admin.user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return templates.TemplateResponse(
        request,
        "admin/_toggle.html",
        {
            "request": request,
            "csrf_token": ensure_csrf_token(request),
            "key": result.setting_key,
            "label": FLAG_LABELS[result.setting_key],
            "value": result.value,
            "error": result.error,
        },
    )


@router.post("/users/{user_id}/status")
async def set_user_status(
    request: Request,
    user_id: UUID,
    admin: UserRole = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    _check_csrf(request, form.get("csrf_token"))
    if user_id == admin.user_id:
        raise HTTPException(status_code=400, detail="You cannot change your own status")
    try:
        await account_service.set_user_active(db, user_id, form.get("is_active") == "true", admin.email)
    except LookupError:
        raise HTTPException(status_code=404, detail="User not found")
    return RedirectResponse("/admin/dashboard#users", status_code=303)


@router.get("/deleted-users", response_class=HTMLResponse)
async def deleted_users(
    request: Request,
    admin: UserRole = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(DeletedUserAudit).order_by(DeletedUserAudit.deleted_at.desc()))
    return templates.TemplateResponse(
        request,
        "admin/deleted_users.html",
        {"request": request, "current_user": admin, "deleted_users": result.scalars().all()},
    )


@router.get("/analytics", response_class=HTMLResponse)
async def platform_analytics(
    request: Request,
    admin: UserRole = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    days: int = Query(settings.default_analytics_days, ge=1, le=365),
):
    jobs = await analytics_service.load_jobs_with_events(db)
    report = analytics_service.compute_engagement(jobs, days=days)
    return templates.TemplateResponse(
        request,
        "postings/analytics.html",
        {
            "request": request,
            "current_user": admin,
            "area": "admin",
            "report": report,
            "top_companies": analytics_service.top_companies(jobs),
        },
    )
