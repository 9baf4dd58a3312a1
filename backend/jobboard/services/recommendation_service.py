"""Recommendation service — scores visible postings against a student's saved preferences."""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.job import Job
from jobboard.models.job_application import JobApplication
from jobboard.models.student_profile import StudentProfile
from jobboard.services.job_filters import is_visible_to_students

JOB_TYPE_WEIGHT = 5
INDUSTRY_WEIGHT = 4
SKILL_WEIGHT = 3  # per matching skill
INTEREST_WEIGHT = 2  # per interest found in the posting text

MIN_SCORE = 5
MAX_RECOMMENDATIONS = 20


def match_score(job, profile) -> int:
    score = 0
    if job.job_type in (profile.preferred_job_types or []):
        score += JOB_TYPE_WEIGHT
    if job.industry in (profile.preferred_industries or []):
        score += INDUSTRY_WEIGHT

    student_skills = {s.lower() for s in profile.skills or []}
    score += SKILL_WEIGHT * sum(1 for skill in job.skills or [] if skill.lower() in student_skills)

    text = f"{job.title} {job.description} {job.industry}".lower()
    for interest in profile.interests or []:
        if interest and interest.lower() in text:
            score += INTEREST_WEIGHT
    return score


def rank_jobs(jobs, profile, applied_job_ids=(), today: date | None = None) -> list[tuple[object, int]]:
    """Return (job, score) pairs, best first, skipping postings already applied to.

    The top ``MAX_RECOMMENDATIONS`` are taken first, then anything under
    ``MIN_SCORE`` is dropped.
    """
    applied = set(applied_job_ids)
    scored = [
        (job, match_score(job, profile))
        for job in jobs
        if job.id not in applied and is_visible_to_students(job, today)
    ]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [(job, score) for job, score in scored[:MAX_RECOMMENDATIONS] if score >= MIN_SCORE]


async def get_profile(db: AsyncSession, student_id: UUID) -> StudentProfile | None:
    result = await db.execute(select(StudentProfile).where(StudentProfile.student_id == student_id))
    return result.scalar_one_or_none()


async def save_profile(db: AsyncSession, student_id: UUID, data: dict) -> StudentProfile:
    """Upsert the student's preferences wholesale; lists are de-duplicated."""
    profile = await get_profile(db, student_id)
    if profile is None:
        profile = StudentProfile(student_id=student_id)
        db.add(profile)
    for name in ("interests", "skills", "preferred_job_types", "preferred_industries"):
        profile_values = []
        for item in data.get(name) or []:
            item = (item or "").strip()
            if item and item not in profile_values:
                profile_values.append(item)
        setattr(profile, name, profile_values)
    await db.flush()
    return profile


async def get_recommendations(
    db: AsyncSession,
    student_id: UUID,
    today: date | None = None,
) -> list[tuple[Job, int]]:
    """Recommended postings for a student; empty when no preferences are saved."""
    profile = await get_profile(db, student_id)
    if profile is None:
        return []

    jobs_result = await db.execute(select(Job).where(Job.status == "active"))
    applied_result = await db.execute(
        select(JobApplication.job_id).where(JobApplication.student_id == student_id)
    )
    return rank_jobs(
        jobs_result.scalars().all(),
        profile,
        applied_job_ids=applied_result.scalars().all(),
        today=today,
    )
