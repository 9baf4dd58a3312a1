"""Faculty API endpoints — detailed analytics and applications to the caller's postings."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.config import get_settings
from jobboard.dependencies.auth import require_role_api
from jobboard.models.base import get_db
from jobboard.models.job import Job
from jobboard.models.job_application import APPLICATION_STATUSES, JobApplication
from jobboard.models.user_role import UserRole
from jobboard.schemas.analytics import AnalyticsReport
from jobboard.schemas.job import JobSummary
from jobboard.schemas.student import ApplicationRead, ApplicationStatusUpdate, ApplicationWithDetails
from jobboard.services import analytics_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/faculty", tags=["faculty"])

# Reps own postings too and share the applications screens
require_owner = require_role_api("faculty", "rep", "staff", "admin")


@router.get("/analytics-detailed", response_model=AnalyticsReport)
async def analytics_detailed(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api("faculty", "staff", "admin")),
    days: int = Query(settings.default_analytics_days, ge=1, le=365),
):
    """Engagement report over the caller's own postings."""
    jobs = await analytics_service.load_jobs_with_events(db, created_by=role.user_id)
    return analytics_service.compute_engagement(jobs, days=days)


@router.get("/applications/list", response_model=list[ApplicationWithDetails])
async def list_applications(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_owner),
):
    """Applications to the caller's postings with the applicant's public profile fields."""
    result = await db.execute(
        select(JobApplication, UserRole)
        .join(Job, JobApplication.job_id == Job.id)
        .outerjoin(UserRole, UserRole.user_id == JobApplication.student_id)
        .options(selectinload(JobApplication.job))
        .where(Job.created_by == role.user_id)
        .order_by(JobApplication.applied_at.desc())
    )
    applications = []
    for application, student in result.all():
        data = ApplicationRead.model_validate(application).model_dump()
        applications.append(ApplicationWithDetails(
            **data,
            job=JobSummary.model_validate(application.job),
            student_name=student.display_name if student else None,
            student_email=student.email if student else None,
            major=student.major if student else None,
            graduation_year=student.graduation_year if student else None,
            resume_url=student.resume_url if student else None,
        ))
    return applications


@router.put("/applications/update-status", response_model=ApplicationRead)
async def update_application_status(
    body: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_owner),
):
    if body.status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status value")

    result = await db.execute(
        select(JobApplication)
        .options(selectinload(JobApplication.job))
        .where(JobApplication.id == body.application_id)
    )
    application = result.scalar_one_or_none()
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    if role.role != "admin" and application.job.created_by != role.user_id:
        raise HTTPException(status_code=403, detail="Not authorized to update this application")

    application.status = body.status
    await db.flush()
    logger.info("Application %s set to %s by %s", application.id, body.status, role.user_id)
    return application
