"""Pydantic schemas for Job postings."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class JobBase(BaseModel):
    """Fields submitted by the posting form."""

    title: str
    company: str
    industry: str
    job_type: str
    location: str
    salary_range: str | None = None
    description: str
    requirements: list[str] | str | None = None
    skills: list[str] | str | None = None
    deadline: str
    apply_url: str


class JobCreate(JobBase):
    pass


class JobUpdate(JobBase):
    pass


class JobRead(BaseModel):
    """Full posting output."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str
    industry: str
    job_type: str
    location: str | None = None
    salary_range: str | None = None
    description: str
    requirements: list[str] = []
    skills: list[str] = []
    deadline: date
    apply_url: str | None = None
    status: str
    rejection_note: str | None = None
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class JobSummary(BaseModel):
    """Minimal posting info for list views."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str
    industry: str
    job_type: str
    location: str | None = None
    deadline: date
    status: str
    created_at: datetime


class RecommendedJob(JobSummary):
    match_score: int


class ReactivateRequest(BaseModel):
    deadline: str


class StatusChange(BaseModel):
    """Admin moderation payload."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    rejection_note: str | None = Field(default=None, alias="rejectionNote")


class TrackClickRequest(BaseModel):
    job_id: UUID
