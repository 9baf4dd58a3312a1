"""Job posting API endpoints — listing, owner mutations, applications and event tracking."""

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.dependencies.auth import get_current_user, require_role_api
from jobboard.models.base import get_db
from jobboard.models.job import Job
from jobboard.models.job_application import JobApplication
from jobboard.models.user import User
from jobboard.models.user_role import POSTING_ROLES, UserRole
from jobboard.schemas.job import (
    JobCreate,
    JobRead,
    JobSummary,
    JobUpdate,
    ReactivateRequest,
    TrackClickRequest,
)
from jobboard.schemas.student import ApplicationRead
from jobboard.services import posting_service, tracking_service
from jobboard.services.job_filters import is_visible_to_students, student_listing
from jobboard.services.settings_service import is_posting_enabled

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


async def _get_job_or_404(db: AsyncSession, job_id: UUID) -> Job:
    job = await posting_service.get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.get("", response_model=list[JobSummary])
async def list_jobs(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api()),
    search: str | None = Query(None, description="Search in title or company"),
    job_type: list[str] = Query([], description="Repeatable; any of Internship, Part-Time, Full-Time"),
    industry: str | None = Query(None, description="Filter by industry"),
    sort: Literal["newest", "deadline"] = Query("newest"),
):
    """Active, unexpired postings filtered and sorted for the student browse screen."""
    result = await db.execute(select(Job).where(Job.status == "active"))
    return student_listing(result.scalars().all(), search, job_type, industry, sort)


@router.get("/mine", response_model=list[JobRead])
async def list_my_jobs(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api(*POSTING_ROLES)),
):
    """All postings created by the caller, newest first."""
    result = await db.execute(
        select(Job).where(Job.created_by == role.user_id).order_by(Job.created_at.desc())
    )
    return result.scalars().all()


@router.post("", response_model=JobRead, status_code=201)
async def create_job(
    body: JobCreate,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api(*POSTING_ROLES)),
):
    if not await is_posting_enabled(db, role.role):
        raise HTTPException(status_code=403, detail="Job posting is currently disabled for your account type.")
    return await posting_service.create_job(db, role, body.model_dump())


@router.post("/track-click", status_code=201)
async def track_click(
    body: TrackClickRequest,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api()),
):
    """Record one click on a posting's external application link."""
    job = await _get_job_or_404(db, body.job_id)
    if not is_visible_to_students(job) and not posting_service.can_manage(job, role):
        raise HTTPException(status_code=404, detail="Job not found")
    try:
        await tracking_service.record_click(db, body.job_id, role.user_id)
    except SQLAlchemyError:
        logger.exception("Failed to record click for job %s", body.job_id)
        raise HTTPException(status_code=500, detail="Failed to track click")
    return {"success": True}


@router.post("/{job_id}/view", status_code=204)
async def track_view(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_current_user),
):
    """Record a detail-page view; always 204, anonymous viewers are not recorded."""
    if user is not None:
        await tracking_service.record_view(db, job_id, user.id)
    return Response(status_code=204)


@router.get("/{job_id}", response_model=JobRead)
async def get_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api()),
):
    job = await _get_job_or_404(db, job_id)
    if not is_visible_to_students(job) and not posting_service.can_manage(job, role):
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.put("/{job_id}", response_model=JobRead)
async def update_job(
    job_id: UUID,
    body: JobUpdate,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api(*POSTING_ROLES)),
):
    job = await _get_job_or_404(db, job_id)
    return await posting_service.update_job(db, job, role, body.model_dump())


@router.post("/{job_id}/remove", response_model=JobRead)
async def remove_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api(*POSTING_ROLES)),
):
    job = await _get_job_or_404(db, job_id)
    return await posting_service.remove_job(db, job, role)


@router.post("/{job_id}/reactivate", response_model=JobRead)
async def reactivate_job(
    job_id: UUID,
    body: ReactivateRequest,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api(*POSTING_ROLES)),
):
    job = await _get_job_or_404(db, job_id)
    return await posting_service.reactivate_job(db, job, role, body.deadline)


@router.post("/{job_id}/apply", response_model=ApplicationRead, status_code=201)
async def apply_to_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api("student")),
):
    job = await _get_job_or_404(db, job_id)
    if not is_visible_to_students(job):
        raise HTTPException(status_code=400, detail="This posting is no longer accepting applications")

    existing = await db.execute(
        select(JobApplication).where(
            JobApplication.job_id == job_id,
            JobApplication.student_id == role.user_id,
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="You have already applied to this job")

    application = JobApplication(job_id=job_id, student_id=role.user_id)
    db.add(application)
    await db.flush()
    logger.info("Student %s applied to job %s", role.user_id, job_id)
    return application
