"""Posting lifecycle — validation and create/edit/remove/reactivate/moderate flows."""

import logging
import re
from datetime import date
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.models.job import Job, JOB_STATUSES, JOB_TYPES
from jobboard.models.user_role import UserRole
from jobboard.services.errors import PermissionDenied, ValidationError
from jobboard.services.job_filters import is_archived, today_utc

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REQUIRED_FIELDS = (
    "title",
    "company",
    "industry",
    "job_type",
    "location",
    "description",
    "deadline",
    "apply_url",
)

# Roles whose postings go through admin review
MODERATED_ROLES = ("faculty", "rep")


def parse_deadline(value: Any) -> date:
    """Parse a YYYY-MM-DD deadline (or pass a date through)."""
    if isinstance(value, date):
        return value
    text = (value or "").strip() if isinstance(value, str) else ""
    if not DATE_PATTERN.match(text):
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD.")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD.") from None


def validate_future_deadline(value: Any, today: date | None = None) -> date:
    """Deadline must parse and fall strictly after today."""
    deadline = parse_deadline(value)
    if deadline <= (today or today_utc()):
        raise ValidationError("Deadline must be in the future.")
    return deadline


def split_lines(value: str | Iterable[str] | None) -> list[str]:
    """Requirements arrive as a newline-separated textarea or as a list; order is kept."""
    if value is None:
        return []
    items = value.split("\n") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def split_skills(value: str | Iterable[str] | None) -> list[str]:
    """Skills are a set; duplicates are dropped case-insensitively, first spelling wins."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    seen: set[str] = set()
    skills = []
    for item in items:
        skill = (item or "").strip()
        if skill and skill.lower() not in seen:
            seen.add(skill.lower())
            skills.append(skill)
    return skills


def validate_posting(data: dict, today: date | None = None, require_future: bool = True) -> dict:
    """Check required fields and description length; return cleaned column values."""
    settings = get_settings()

    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Please fill in all required fields.")

    if data["job_type"] not in JOB_TYPES:
        raise ValidationError(f"Job type must be one of: {', '.join(JOB_TYPES)}.")

    description = data["description"].strip()
    if len(description) < settings.min_description_length:
        raise ValidationError(
            f"Job description must be at least {settings.min_description_length} characters."
        )

    skills = split_skills(data.get("skills"))
    if not skills:
        raise ValidationError("Please select at least one required skill.")

    deadline = (
        validate_future_deadline(data["deadline"], today)
        if require_future
        else parse_deadline(data["deadline"])
    )

    return {
        "title": data["title"].strip(),
        "company": data["company"].strip(),
        "industry": data["industry"].strip(),
        "job_type": data["job_type"],
        "location": data["location"].strip(),
        "salary_range": (data.get("salary_range") or "").strip() or None,
        "description": description,
        "requirements": split_lines(data.get("requirements")),
        "skills": skills,
        "deadline": deadline,
        "apply_url": data["apply_url"].strip(),
    }


def validate_rejection_note(note: str | None) -> str:
    minimum = get_settings().min_rejection_note_length
    cleaned = (note or "").strip()
    if len(cleaned) < minimum:
        raise ValidationError(
            f"Please provide a detailed reason for rejection (at least {minimum} characters)."
        )
    return cleaned


def apply_status_change(job: Job, status: str, rejection_note: str | None = None) -> Job:
    """Moderation transition; keeps rejection_note present only while rejected."""
    if status not in JOB_STATUSES:
        raise ValidationError("Invalid status value.")
    if status == "rejected":
        job.rejection_note = validate_rejection_note(rejection_note)
    else:
        job.rejection_note = None
    job.status = status
    return job


def can_manage(job: Job, role: UserRole) -> bool:
    return role.role == "admin" or (job.created_by is not None and job.created_by == role.user_id)


def _ensure_can_manage(job: Job, role: UserRole):
    if not can_manage(job, role):
        raise PermissionDenied("You do not have permission to modify this posting.")


async def get_job(db: AsyncSession, job_id: UUID) -> Job | None:
    result = await db.execute(select(Job).where(Job.id == job_id))
    return result.scalar_one_or_none()


async def create_job(db: AsyncSession, role: UserRole, data: dict, today: date | None = None) -> Job:
    """Insert a new posting; faculty/rep postings start pending review."""
    values = validate_posting(data, today)
    status = "pending" if role.role in MODERATED_ROLES else "active"
    job = Job(**values, status=status, created_by=role.user_id)
    db.add(job)
    await db.flush()
    logger.info("Job %s created by %s (%s) with status %s", job.id, role.user_id, role.role, status)
    return job


async def update_job(db: AsyncSession, job: Job, role: UserRole, data: dict, today: date | None = None) -> Job:
    """Owner edit. A rejected posting goes back to pending once edited."""
    _ensure_can_manage(job, role)
    values = validate_posting(data, today, require_future=False)
    for key, value in values.items():
        setattr(job, key, value)
    if job.status == "rejected" and role.role in MODERATED_ROLES:
        apply_status_change(job, "pending")
    await db.flush()
    return job


async def remove_job(db: AsyncSession, job: Job, role: UserRole) -> Job:
    _ensure_can_manage(job, role)
    apply_status_change(job, "removed")
    await db.flush()
    logger.info("Job %s removed by %s", job.id, role.user_id)
    return job


async def reactivate_job(
    db: AsyncSession, job: Job, role: UserRole, new_deadline: Any, today: date | None = None
) -> Job:
    """Give a previously approved posting a new future deadline and make it active again."""
    _ensure_can_manage(job, role)
    if job.status in ("pending", "rejected"):
        raise ValidationError("Only previously approved postings can be reactivated.")
    job.deadline = validate_future_deadline(new_deadline, today)
    apply_status_change(job, "active")
    await db.flush()
    logger.info("Job %s reactivated until %s", job.id, job.deadline)
    return job


async def moderate_job(
    db: AsyncSession, job: Job, status: str, rejection_note: str | None = None
) -> Job:
    """Admin approve/reject/remove. Validation happens before any write."""
    apply_status_change(job, status, rejection_note)
    await db.flush()
    if status == "rejected":
        logger.info("Job %s rejected with note: %s", job.id, job.rejection_note)
    return job


def archived_and_current(jobs: Iterable[Job], today: date | None = None) -> tuple[list[Job], list[Job]]:
    """Split an owner's postings into (current, archived) tabs."""
    current, archived = [], []
    for job in jobs:
        (archived if is_archived(job, today) else current).append(job)
    return current, archived
