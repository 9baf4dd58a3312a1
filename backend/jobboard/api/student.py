"""Student API endpoints — preferences, recommendations, bookmarks and applications."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.dependencies.auth import require_role_api
from jobboard.models.base import get_db
from jobboard.models.job_application import JobApplication
from jobboard.models.saved_job import SavedJob
from jobboard.models.user_role import UserRole
from jobboard.schemas.job import JobSummary, RecommendedJob
from jobboard.schemas.student import ApplicationRead, StudentProfileBase, StudentProfileRead
from jobboard.services import posting_service, recommendation_service

router = APIRouter(prefix="/student", tags=["student"])

require_student = require_role_api("student")


@router.get("/profile", response_model=StudentProfileBase)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    """Saved preferences, or empty lists when none have been saved yet."""
    profile = await recommendation_service.get_profile(db, role.user_id)
    if profile is None:
        return StudentProfileBase()
    return StudentProfileBase.model_validate(profile, from_attributes=True)


@router.put("/profile", response_model=StudentProfileRead)
async def save_profile(
    body: StudentProfileBase,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    return await recommendation_service.save_profile(db, role.user_id, body.model_dump())


@router.get("/recommendations", response_model=list[RecommendedJob])
async def recommendations(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    ranked = await recommendation_service.get_recommendations(db, role.user_id)
    return [
        RecommendedJob(**JobSummary.model_validate(job).model_dump(), match_score=score)
        for job, score in ranked
    ]


@router.get("/applications", response_model=list[ApplicationRead])
async def my_applications(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    result = await db.execute(
        select(JobApplication)
        .where(JobApplication.student_id == role.user_id)
        .order_by(JobApplication.applied_at.desc())
    )
    return result.scalars().all()


@router.get("/saved", response_model=list[JobSummary])
async def saved_jobs(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    result = await db.execute(
        select(SavedJob)
        .where(SavedJob.user_id == role.user_id)
        .options(selectinload(SavedJob.job))
        .order_by(SavedJob.created_at.desc())
    )
    return [saved.job for saved in result.scalars().all()]


@router.post("/saved/{job_id}", status_code=201)
async def save_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    """Bookmark a posting; saving twice is a no-op."""
    if not await posting_service.get_job(db, job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    existing = await db.execute(
        select(SavedJob).where(SavedJob.user_id == role.user_id, SavedJob.job_id == job_id)
    )
    if not existing.scalar_one_or_none():
        db.add(SavedJob(user_id=role.user_id, job_id=job_id))
        await db.flush()
    return {"saved": True}


@router.delete("/saved/{job_id}", status_code=204)
async def unsave_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_student),
):
    await db.execute(
        delete(SavedJob).where(SavedJob.user_id == role.user_id, SavedJob.job_id == job_id)
    )
    return Response(status_code=204)
