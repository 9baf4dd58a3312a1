"""Engagement analytics — aggregates postings and their view/click events in memory.

Faculty, rep and admin analytics pages all go through ``compute_engagement``; it is
recomputed from scratch on every request, there is no incremental state.

Definitions (all percentages rounded to one decimal):

* engagement rate      = clicks / total views * 100, for the overview and for every
                         per-posting, breakdown and company row alike
* engagement level     = bucket of clicks / unique viewers, see ``engagement_level``
* click-through rate   = postings with at least one click / postings * 100
* engagement score     = 0.4 * engagement rate + 0.4 * click-through rate
                         + 0.2 * min(average clicks per posting * 5, 100)

Every ratio is 0 when its denominator is 0.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.models.job import Job
from jobboard.services.job_filters import is_archived, is_visible_to_students

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

HIGH_ENGAGEMENT = 0.15
LOW_ENGAGEMENT = 0.05
TOP_JOBS_LIMIT = 5
TOP_SKILLS_LIMIT = 10
TOP_COMPANIES_LIMIT = 10


def _as_aware(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator * scale


def engagement_score(engagement_rate: float, click_through_rate: float, average_clicks_per_job: float) -> float:
    """Fixed linear heuristic; the clicks-per-posting term saturates at 100."""
    score = (
        engagement_rate * 0.4
        + click_through_rate * 0.4
        + min(average_clicks_per_job * 5, 100) * 0.2
    )
    return round(score, 1)


def engagement_level(clicks: int, unique_views: int) -> str:
    if clicks == 0:
        return "none"
    if unique_views == 0:
        # Clicks recorded without a tracked view (views are best-effort)
        return "high"
    rate = clicks / unique_views
    if rate > HIGH_ENGAGEMENT:
        return "high"
    if rate >= LOW_ENGAGEMENT:
        return "medium"
    return "low"


@dataclass
class _Bucket:
    count: int = 0
    clicks: int = 0
    views: int = 0

    def as_dict(self, name_key: str, name: str, total_jobs: int) -> dict:
        return {
            name_key: name,
            "count": self.count,
            "percentage": round(ratio(self.count, total_jobs, 100), 1),
            "clicks": self.clicks,
            "views": self.views,
            "avg_clicks_per_job": round(ratio(self.clicks, self.count), 1),
            "avg_views_per_job": round(ratio(self.views, self.count), 1),
            "engagement_rate": round(ratio(self.clicks, self.views, 100), 1),
        }


@dataclass
class _JobMetrics:
    job: object
    clicks: int
    views: int
    unique_views: int
    click_times: list[datetime] = field(default_factory=list)
    view_times: list[datetime] = field(default_factory=list)

    @property
    def engagement_rate(self) -> float:
        return round(ratio(self.clicks, self.views, 100), 1)


def _job_metrics(job) -> _JobMetrics:
    views = list(job.views or [])
    clicks = list(job.link_clicks or [])
    viewers = {v.user_id for v in views if v.user_id is not None}
    return _JobMetrics(
        job=job,
        clicks=len(clicks),
        views=len(views),
        unique_views=len(viewers),
        click_times=[_as_aware(c.clicked_at) for c in clicks if c.clicked_at],
        view_times=[_as_aware(v.viewed_at) for v in views if v.viewed_at],
    )


def _days_to_first_click(m: _JobMetrics) -> int | None:
    created = _as_aware(m.job.created_at)
    if not m.click_times or created is None:
        return None
    first = min(m.click_times)
    return math.ceil((first - created).total_seconds() / 86400)


def compute_engagement(
    jobs: Sequence,
    days: int = 30,
    now: datetime | None = None,
) -> dict:
    """Aggregate a user's postings (with ``views`` and ``link_clicks`` loaded).

    Totals cover all time; the ``days`` window applies to the daily trend series.
    """
    now = _as_aware(now) or datetime.now(timezone.utc)
    today = now.date()
    days = max(int(days), 1)
    first_day = today - timedelta(days=days - 1)

    total_jobs = len(jobs)
    totals = defaultdict(int)
    by_type: dict[str, _Bucket] = defaultdict(_Bucket)
    by_industry: dict[str, _Bucket] = defaultdict(_Bucket)
    by_skill: dict[str, _Bucket] = defaultdict(_Bucket)
    by_weekday: dict[str, _Bucket] = {day: _Bucket() for day in WEEKDAYS}
    levels = {"high": 0, "medium": 0, "low": 0, "none": 0}
    trend = {first_day + timedelta(days=i): {"clicks": 0, "views": 0, "postings": 0} for i in range(days)}
    days_to_click: list[int] = []
    per_job: list[_JobMetrics] = []

    for job in jobs:
        m = _job_metrics(job)
        per_job.append(m)

        totals["clicks"] += m.clicks
        totals["views"] += m.views
        totals["unique_views"] += m.unique_views
        if m.clicks:
            totals["jobs_with_clicks"] += 1
        if is_visible_to_students(job, today):
            totals["active"] += 1
        if is_archived(job, today):
            totals["archived"] += 1
        totals[f"status_{job.status}"] += 1

        for bucket in (by_type[job.job_type or "Unknown"], by_industry[job.industry or "Unknown"]):
            bucket.count += 1
            bucket.clicks += m.clicks
            bucket.views += m.views

        for skill in job.skills or []:
            bucket = by_skill[skill]
            bucket.count += 1
            bucket.clicks += m.clicks
            bucket.views += m.views

        created = _as_aware(job.created_at)
        if created is not None:
            weekday = by_weekday[WEEKDAYS[created.weekday()]]
            weekday.count += 1
            weekday.clicks += m.clicks
            weekday.views += m.views
            if created.date() in trend:
                trend[created.date()]["postings"] += 1

        for ts in m.click_times:
            if ts.date() in trend:
                trend[ts.date()]["clicks"] += 1
        for ts in m.view_times:
            if ts.date() in trend:
                trend[ts.date()]["views"] += 1

        levels[engagement_level(m.clicks, m.unique_views)] += 1

        elapsed = _days_to_first_click(m)
        if elapsed is not None and elapsed > 0:
            days_to_click.append(elapsed)

    average_clicks = ratio(totals["clicks"], total_jobs)
    engagement_rate = ratio(totals["clicks"], totals["views"], 100)
    click_through_rate = ratio(totals["jobs_with_clicks"], total_jobs, 100)

    submitted = total_jobs - totals["status_pending"]
    approved = totals["status_active"] + totals["status_removed"]

    overview = {
        "total_jobs": total_jobs,
        "total_views": totals["views"],
        "unique_views": totals["unique_views"],
        "total_link_clicks": totals["clicks"],
        "active_jobs": totals["active"],
        "pending_jobs": totals["status_pending"],
        "rejected_jobs": totals["status_rejected"],
        "removed_jobs": totals["status_removed"],
        "archived_jobs": totals["archived"],
        "average_clicks_per_job": round(average_clicks, 1),
        "engagement_rate": round(engagement_rate, 1),
        "click_through_rate": round(click_through_rate, 1),
        "engagement_score": engagement_score(engagement_rate, click_through_rate, average_clicks),
        "average_days_to_first_click": round(ratio(sum(days_to_click), len(days_to_click)), 1),
        "approval_rate": round(ratio(approved, submitted, 100), 1),
    }

    top_jobs = sorted(per_job, key=lambda m: (m.clicks, m.engagement_rate), reverse=True)[:TOP_JOBS_LIMIT]
    skills = sorted(
        (b.as_dict("skill", name, total_jobs) for name, b in by_skill.items()),
        key=lambda s: (s["engagement_rate"], s["count"]),
        reverse=True,
    )[:TOP_SKILLS_LIMIT]
    weekdays = [by_weekday[day].as_dict("day", day, total_jobs) for day in WEEKDAYS]

    return {
        "days": days,
        "generated_at": now,
        "overview": overview,
        "trends": [{"date": d, **counts} for d, counts in trend.items()],
        "job_types": [b.as_dict("name", name, total_jobs) for name, b in sorted(by_type.items())],
        "industries": sorted(
            (b.as_dict("name", name, total_jobs) for name, b in by_industry.items()),
            key=lambda i: i["clicks"],
            reverse=True,
        ),
        "skills": skills,
        "weekdays": weekdays,
        "best_posting_days": sorted(
            (d for d in weekdays if d["count"] > 0), key=lambda d: d["clicks"], reverse=True
        ),
        "engagement_levels": [
            {
                "level": level,
                "count": count,
                "percentage": round(ratio(count, total_jobs, 100), 1),
            }
            for level, count in levels.items()
        ],
        "top_jobs": [
            {
                "id": m.job.id,
                "title": m.job.title,
                "company": m.job.company,
                "clicks": m.clicks,
                "total_views": m.views,
                "unique_views": m.unique_views,
                "engagement_rate": m.engagement_rate,
                "status": m.job.status,
                "archived": is_archived(m.job, today),
                "days_active": _days_active(m.job, now),
                "deadline": m.job.deadline,
            }
            for m in top_jobs
        ],
    }


def _days_active(job, now: datetime) -> int:
    created = _as_aware(job.created_at)
    if created is None:
        return 0
    return max(math.ceil((now - created).total_seconds() / 86400), 0)


def top_companies(jobs: Iterable, limit: int = TOP_COMPANIES_LIMIT) -> list[dict]:
    """Platform-wide: postings, views and clicks per company (admin analytics)."""
    companies: dict[str, _Bucket] = defaultdict(_Bucket)
    for job in jobs:
        bucket = companies[job.company or "Unknown"]
        bucket.count += 1
        bucket.views += len(job.views or [])
        bucket.clicks += len(job.link_clicks or [])
    ranked = sorted(companies.items(), key=lambda item: (item[1].clicks, item[1].views), reverse=True)
    return [
        {
            "company": name,
            "postings": b.count,
            "views": b.views,
            "clicks": b.clicks,
            "engagement_rate": round(ratio(b.clicks, b.views, 100), 1),
        }
        for name, b in ranked[:limit]
    ]


async def load_jobs_with_events(db: AsyncSession, created_by: UUID | None = None) -> list[Job]:
    """Postings with their view and click rows; all postings when ``created_by`` is None."""
    query = select(Job).options(selectinload(Job.views), selectinload(Job.link_clicks))
    if created_by is not None:
        query = query.where(Job.created_by == created_by)
    result = await db.execute(query.order_by(Job.created_at.desc()))
    return list(result.scalars().all())
