"""Posting owner pages — faculty and rep dashboards, posting forms, analytics."""

import logging
from pathlib import Path
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.models.base import get_db
from jobboard.models.job import Job, INDUSTRIES, JOB_TYPES
from jobboard.models.user_role import UserRole
from jobboard.services import analytics_service, posting_service
from jobboard.services.errors import PermissionDenied, ValidationError
from jobboard.services.settings_service import is_posting_enabled
from jobboard.dependencies.auth import (
    NotAuthorizedException,
    require_role,
    ensure_csrf_token,
    validate_csrf_token,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")

Area = Literal["faculty", "rep"]

AREA_ROLES = {
    "faculty": ("faculty", "staff", "admin"),
    "rep": ("rep",),
}

FORM_FIELDS = (
    "title", "company", "industry", "job_type", "location", "salary_range",
    "description", "requirements", "skills", "deadline", "apply_url",
)


async def area_role(
    area: Area,
    role: UserRole = Depends(require_role("faculty", "rep", "staff", "admin")),
) -> UserRole:
    """Guard for /{area}/... pages: the role must belong to that area."""
    if role.role not in AREA_ROLES[area]:
        raise NotAuthorizedException()
    return role


def _ctx(request: Request, role: UserRole, area: str, **extra) -> dict:
    return {
        "request": request,
        "current_user": role,
        "area": area,
        "csrf_token": ensure_csrf_token(request),
        "error": None,
        "success": None,
        **extra,
    }


def _form_ctx(request: Request, role: UserRole, area: str, job: Job | None, values: dict, **extra) -> dict:
    return _ctx(
        request, role, area,
        job=job,
        form=values,
        job_types=JOB_TYPES,
        industries=INDUSTRIES,
        min_description_length=settings.min_description_length,
        **extra,
    )


def _job_form_values(job: Job) -> dict:
    return {
        "title": job.title,
        "company": job.company,
        "industry": job.industry,
        "job_type": job.job_type,
        "location": job.location or "",
        "salary_range": job.salary_range or "",
        "description": job.description,
        "requirements": "\n".join(job.requirements or []),
        "skills": ", ".join(job.skills or []),
        "deadline": job.deadline.isoformat() if job.deadline else "",
        "apply_url": job.apply_url or "",
    }


async def _owned_job(db: AsyncSession, job_id: UUID, role: UserRole) -> Job:
    job = await posting_service.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if not posting_service.can_manage(job, role):
        raise NotAuthorizedException()
    return job


@router.get("/{area}/dashboard", response_class=HTMLResponse)
async def owner_dashboard(
    request: Request,
    area: Area,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
    tab: str = "current",
):
    """The caller's postings split into current and archived tabs."""
    result = await db.execute(
        select(Job).where(Job.created_by == role.user_id).order_by(Job.created_at.desc())
    )
    current, archived = posting_service.archived_and_current(result.scalars().all())
    ctx = _ctx(
        request, role, area,
        current_jobs=current,
        archived_jobs=archived,
        tab="archived" if tab == "archived" else "current",
        posting_enabled=await is_posting_enabled(db, role.role),
        message=request.query_params.get("message"),
    )
    return templates.TemplateResponse(request, "postings/dashboard.html", ctx)


@router.get("/{area}/jobs/new", response_class=HTMLResponse)
async def new_job_page(
    request: Request,
    area: Area,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
):
    if not await is_posting_enabled(db, role.role):
        return RedirectResponse(f"/{area}/dashboard?message=posting-disabled", status_code=303)
    values = {"company": role.company_name or ""} if role.role == "rep" else {}
    return templates.TemplateResponse(request, "postings/form.html", _form_ctx(request, role, area, None, values))


@router.post("/{area}/jobs/new", response_class=HTMLResponse)
async def new_job_submit(
    request: Request,
    area: Area,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    values = {name: form.get(name, "") for name in FORM_FIELDS}

    if not validate_csrf_token(request, form.get("csrf_token", "")):
        ctx = _form_ctx(request, role, area, None, values, error="Invalid request. Please try again.")
        return templates.TemplateResponse(request, "postings/form.html", ctx)

    if not await is_posting_enabled(db, role.role):
        ctx = _form_ctx(request, role, area, None, values, error="Job posting is currently disabled for your account type.")
        return templates.TemplateResponse(request, "postings/form.html", ctx, status_code=403)

    try:
        await posting_service.create_job(db, role, values)
    except ValidationError as e:
        ctx = _form_ctx(request, role, area, None, values, error=e.message)
        return templates.TemplateResponse(request, "postings/form.html", ctx)

    return RedirectResponse(f"/{area}/dashboard?message=created", status_code=303)


@router.get("/{area}/jobs/{job_id}/edit", response_class=HTMLResponse)
async def edit_job_page(
    request: Request,
    area: Area,
    job_id: UUID,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
):
    job = await _owned_job(db, job_id, role)
    ctx = _form_ctx(request, role, area, job, _job_form_values(job))
    return templates.TemplateResponse(request, "postings/form.html", ctx)


@router.post("/{area}/jobs/{job_id}/edit", response_class=HTMLResponse)
async def edit_job_submit(
    request: Request,
    area: Area,
    job_id: UUID,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
):
    job = await _owned_job(db, job_id, role)
    form = await request.form()
    values = {name: form.get(name, "") for name in FORM_FIELDS}

    if not validate_csrf_token(request, form.get("csrf_token", "")):
        ctx = _form_ctx(request, role, area, job, values, error="Invalid request. Please try again.")
        return templates.TemplateResponse(request, "postings/form.html", ctx)

    try:
        await posting_service.update_job(db, job, role, values)
    except ValidationError as e:
        ctx = _form_ctx(request, role, area, job, values, error=e.message)
        return templates.TemplateResponse(request, "postings/form.html", ctx)

    return RedirectResponse(f"/{area}/dashboard?message=updated", status_code=303)


@router.post("/{area}/jobs/{job_id}/remove")
async def remove_job(
    request: Request,
    area: Area,
    job_id: UUID,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")
    job = await _owned_job(db, job_id, role)
    await posting_service.remove_job(db, job, role)
    return RedirectResponse(f"/{area}/dashboard?message=removed", status_code=303)


@router.post("/{area}/jobs/{job_id}/reactivate", response_class=HTMLResponse)
async def reactivate_job(
    request: Request,
    area: Area,
    job_id: UUID,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
):
    """New deadline from the archived tab; errors re-render the dashboard inline."""
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")
    job = await _owned_job(db, job_id, role)

    try:
        await posting_service.reactivate_job(db, job, role, form.get("deadline", ""))
    except (ValidationError, PermissionDenied) as e:
        result = await db.execute(
            select(Job).where(Job.created_by == role.user_id).order_by(Job.created_at.desc())
        )
        current, archived = posting_service.archived_and_current(result.scalars().all())
        ctx = _ctx(
            request, role, area,
            current_jobs=current,
            archived_jobs=archived,
            tab="archived",
            posting_enabled=await is_posting_enabled(db, role.role),
            message=None,
            error=e.message,
        )
        return templates.TemplateResponse(request, "postings/dashboard.html", ctx, status_code=400)

    return RedirectResponse(f"/{area}/dashboard?message=reactivated", status_code=303)


@router.get("/{area}/analytics", response_class=HTMLResponse)
async def owner_analytics(
    request: Request,
    area: Area,
    role: UserRole = Depends(area_role),
    db: AsyncSession = Depends(get_db),
    days: int = Query(settings.default_analytics_days, ge=1, le=365),
):
    jobs = await analytics_service.load_jobs_with_events(db, created_by=role.user_id)
    report = analytics_service.compute_engagement(jobs, days=days)
    return templates.TemplateResponse(request, "postings/analytics.html", _ctx(request, role, area, report=report))
