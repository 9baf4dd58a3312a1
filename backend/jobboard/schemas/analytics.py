"""Pydantic schemas for engagement analytics reports."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class Overview(BaseModel):
    total_jobs: int
    total_views: int
    unique_views: int
    total_link_clicks: int
    active_jobs: int
    pending_jobs: int
    rejected_jobs: int
    removed_jobs: int
    archived_jobs: int
    average_clicks_per_job: float
    engagement_rate: float
    click_through_rate: float
    engagement_score: float
    average_days_to_first_click: float
    approval_rate: float


class TrendPoint(BaseModel):
    date: date
    clicks: int
    views: int
    postings: int


class Breakdown(BaseModel):
    """One row of a job-type, industry, skill or weekday breakdown."""

    name: str | None = None
    skill: str | None = None
    day: str | None = None
    count: int
    percentage: float
    clicks: int
    views: int
    avg_clicks_per_job: float
    avg_views_per_job: float
    engagement_rate: float


class EngagementLevel(BaseModel):
    level: str
    count: int
    percentage: float


class TopJob(BaseModel):
    id: UUID
    title: str
    company: str
    clicks: int
    total_views: int
    unique_views: int
    engagement_rate: float
    status: str
    archived: bool
    days_active: int
    deadline: date | None = None


class CompanyStats(BaseModel):
    company: str
    postings: int
    views: int
    clicks: int
    engagement_rate: float


class AnalyticsReport(BaseModel):
    """Report returned by the faculty, rep and admin analytics endpoints."""

    days: int
    generated_at: datetime
    overview: Overview
    trends: list[TrendPoint]
    job_types: list[Breakdown]
    industries: list[Breakdown]
    skills: list[Breakdown]
    weekdays: list[Breakdown]
    best_posting_days: list[Breakdown]
    engagement_levels: list[EngagementLevel]
    top_jobs: list[TopJob]


class PlatformReport(AnalyticsReport):
    """Admin view: everything above across all postings, plus user and company totals."""

    users_by_role: dict[str, int]
    top_companies: list[CompanyStats]
