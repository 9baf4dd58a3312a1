"""Pydantic schemas for student preferences, bookmarks and applications."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from jobboard.schemas.job import JobSummary


class StudentProfileBase(BaseModel):
    interests: list[str] = []
    skills: list[str] = []
    preferred_job_types: list[str] = []
    preferred_industries: list[str] = []


class StudentProfileRead(StudentProfileBase):
    model_config = ConfigDict(from_attributes=True)

    student_id: UUID
    updated_at: datetime


class ApplicationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    student_id: UUID | None = None
    status: str
    applied_at: datetime


class ApplicationWithDetails(ApplicationRead):
    """Application row as listed to the posting owner."""

    job: JobSummary
    student_name: str | None = None
    student_email: str | None = None
    major: str | None = None
    graduation_year: int | None = None
    resume_url: str | None = None


class ApplicationStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    application_id: UUID = Field(alias="applicationId")
    status: str
