"""Web routes for HTML pages — landing redirect, student screens and job detail."""

import logging
from pathlib import Path
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.models.base import get_db
from jobboard.models.job import Job, INDUSTRIES, JOB_TYPES
from jobboard.models.job_application import JobApplication
from jobboard.models.saved_job import SavedJob
from jobboard.models.user_role import UserRole
from jobboard.services import posting_service, recommendation_service, tracking_service
from jobboard.services.job_filters import (
    days_until_deadline,
    industries_of,
    is_archived,
    is_visible_to_students,
    student_listing,
)
from jobboard.dependencies.auth import get_current_role, require_role, ensure_csrf_token, validate_csrf_token
from jobboard.routes.auth import ROLE_HOME, safe_next_path

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")
templates.env.globals["days_until_deadline"] = days_until_deadline
templates.env.globals["is_archived"] = is_archived


def _ctx(request: Request, role: UserRole | None, **extra) -> dict:
    """Common template context with current_user and csrf_token."""
    return {
        "request": request,
        "current_user": role,
        "csrf_token": ensure_csrf_token(request),
        **extra,
    }


async def _saved_job_ids(db: AsyncSession, user_id: UUID) -> set[UUID]:
    result = await db.execute(select(SavedJob.job_id).where(SavedJob.user_id == user_id))
    return {row[0] for row in result}


async def _applied_job_ids(db: AsyncSession, user_id: UUID) -> set[UUID]:
    result = await db.execute(select(JobApplication.job_id).where(JobApplication.student_id == user_id))
    return {row[0] for row in result}


@router.get("/", response_class=RedirectResponse)
async def home(role: UserRole | None = Depends(get_current_role)):
    """Send each role to its dashboard."""
    if role is None:
        return RedirectResponse("/login", status_code=303)
    return RedirectResponse(ROLE_HOME.get(role.role, "/unauthorized"), status_code=303)


@router.get("/unauthorized", response_class=HTMLResponse)
async def unauthorized(request: Request, role: UserRole | None = Depends(get_current_role)):
    return templates.TemplateResponse(
        request,
        "unauthorized.html", _ctx(request, role), status_code=403
    )


# --- Student ---

@router.get("/student/dashboard", response_class=HTMLResponse)
async def student_dashboard(
    request: Request,
    role: UserRole = Depends(require_role("student")),
    db: AsyncSession = Depends(get_db),
    search: str | None = None,
    job_type: list[str] = Query([]),
    industry: str | None = None,
    sort: str = "newest",
    tab: str = "browse",
):
    """Browse, recommended, saved and applied tabs."""
    result = await db.execute(select(Job).where(Job.status == "active"))
    active_jobs = result.scalars().all()
    jobs = student_listing(
        active_jobs, search, job_type, industry, "deadline" if sort == "deadline" else "newest"
    )

    saved_result = await db.execute(
        select(SavedJob)
        .where(SavedJob.user_id == role.user_id)
        .options(selectinload(SavedJob.job))
        .order_by(SavedJob.created_at.desc())
    )
    applications_result = await db.execute(
        select(JobApplication)
        .where(JobApplication.student_id == role.user_id)
        .options(selectinload(JobApplication.job))
        .order_by(JobApplication.applied_at.desc())
    )

    ctx = _ctx(
        request,
        role,
        jobs=jobs,
        total_active=len([j for j in active_jobs if is_visible_to_students(j)]),
        recommendations=await recommendation_service.get_recommendations(db, role.user_id),
        saved_jobs=[s.job for s in saved_result.scalars().all()],
        applications=applications_result.scalars().all(),
        saved_job_ids=await _saved_job_ids(db, role.user_id),
        applied_job_ids=await _applied_job_ids(db, role.user_id),
        job_types=JOB_TYPES,
        industries=industries_of(active_jobs),
        filters={"search": search or "", "job_type": job_type, "industry": industry or "", "sort": sort},
        tab=tab,
    )
    return templates.TemplateResponse(request, "student/dashboard.html", ctx)


@router.get("/student/profile", response_class=HTMLResponse)
async def student_profile_page(
    request: Request,
    role: UserRole = Depends(require_role("student")),
    db: AsyncSession = Depends(get_db),
):
    profile = await recommendation_service.get_profile(db, role.user_id)
    ctx = _ctx(request, role, profile=profile, job_types=JOB_TYPES, industries=INDUSTRIES, success=None)
    return templates.TemplateResponse(request, "student/profile.html", ctx)


@router.post("/student/profile", response_class=HTMLResponse)
async def student_profile_submit(
    request: Request,
    role: UserRole = Depends(require_role("student")),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")

    data = {
        "interests": form.get("interests", "").split(","),
        "skills": form.get("skills", "").split(","),
        "preferred_job_types": form.getlist("preferred_job_types"),
        "preferred_industries": form.getlist("preferred_industries"),
    }
    profile = await recommendation_service.save_profile(db, role.user_id, data)
    ctx = _ctx(
        request, role, profile=profile, job_types=JOB_TYPES, industries=INDUSTRIES,
        success="Preferences saved.",
    )
    return templates.TemplateResponse(request, "student/profile.html", ctx)


@router.post("/student/saved/{job_id}")
async def toggle_saved_job(
    request: Request,
    job_id: UUID,
    role: UserRole = Depends(require_role("student")),
    db: AsyncSession = Depends(get_db),
):
    """Bookmark or un-bookmark a posting, then return to the dashboard."""
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")

    if job_id in await _saved_job_ids(db, role.user_id):
        await db.execute(delete(SavedJob).where(SavedJob.user_id == role.user_id, SavedJob.job_id == job_id))
    elif await posting_service.get_job(db, job_id):
        db.add(SavedJob(user_id=role.user_id, job_id=job_id))
    return RedirectResponse(safe_next_path(form.get("back")) or "/student/dashboard", status_code=303)


# --- Job detail ---

@router.get("/jobs/{job_id}", response_class=HTMLResponse)
async def job_detail(
    request: Request,
    job_id: UUID,
    role: UserRole = Depends(require_role()),
    db: AsyncSession = Depends(get_db),
):
    """Single posting page; records one view per visit."""
    job = await posting_service.get_job(db, job_id)
    if not job or (not is_visible_to_students(job) and not posting_service.can_manage(job, role)):
        raise HTTPException(status_code=404, detail="Job not found")

    await tracking_service.record_view(db, job.id, role.user_id)

    ctx = _ctx(
        request,
        role,
        job=job,
        archived=is_archived(job),
        is_saved=job.id in await _saved_job_ids(db, role.user_id),
        has_applied=job.id in await _applied_job_ids(db, role.user_id),
        can_manage=posting_service.can_manage(job, role),
    )
    return templates.TemplateResponse(request, "jobs/detail.html", ctx)


@router.get("/jobs/{job_id}/apply-link")
async def follow_apply_link(
    job_id: UUID,
    role: UserRole = Depends(require_role()),
    db: AsyncSession = Depends(get_db),
):
    """Count a click on the external application link, then go there."""
    job = await posting_service.get_job(db, job_id)
    if not job or not job.apply_url:
        raise HTTPException(status_code=404, detail="Job not found")
    if not is_visible_to_students(job) and not posting_service.can_manage(job, role):
        raise HTTPException(status_code=404, detail="Job not found")
    try:
        async with db.begin_nested():
            await tracking_service.record_click(db, job.id, role.user_id)
    except SQLAlchemyError as e:
        logger.warning("Failed to record click for job %s: %s", job.id, e)
    return RedirectResponse(job.apply_url, status_code=303)


@router.post("/jobs/{job_id}/apply")
async def apply_to_job(
    request: Request,
    job_id: UUID,
    role: UserRole = Depends(require_role("student")),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")

    job = await posting_service.get_job(db, job_id)
    if not job or not is_visible_to_students(job):
        raise HTTPException(status_code=404, detail="Job not found")
    if job.id not in await _applied_job_ids(db, role.user_id):
        db.add(JobApplication(job_id=job.id, student_id=role.user_id))
        logger.info("Student %s applied to job %s", role.user_id, job.id)
    return RedirectResponse(f"/jobs/{job.id}", status_code=303)
