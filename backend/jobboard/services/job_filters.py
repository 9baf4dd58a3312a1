"""Listing predicates — archived/visibility rules and client-style filter/sort.

Everything here is pure and works on any object exposing the ``Job`` attributes,
so the same rules serve the JSON API, the HTML pages and the analytics code.
"""

from datetime import date, datetime, timezone
from typing import Iterable, Literal, Sequence

SortKey = Literal["newest", "deadline"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def is_archived(job, today: date | None = None) -> bool:
    """A posting is archived once its deadline has passed, whatever its stored status."""
    if job.deadline is None:
        return False
    return job.deadline < (today or today_utc())


def is_visible_to_students(job, today: date | None = None) -> bool:
    return job.status == "active" and not is_archived(job, today)


def matches_search(job, search: str | None) -> bool:
    if not search:
        return True
    needle = search.strip().lower()
    if not needle:
        return True
    return needle in (job.title or "").lower() or needle in (job.company or "").lower()


def filter_jobs(
    jobs: Iterable,
    search: str | None = None,
    job_types: Sequence[str] | None = None,
    industry: str | None = None,
) -> list:
    """Keep jobs whose type is in ``job_types`` (or any when empty), whose industry
    equals ``industry`` (when given) and whose title or company contains ``search``."""
    wanted_types = set(job_types or ())
    result = []
    for job in jobs:
        if wanted_types and job.job_type not in wanted_types:
            continue
        if industry and job.industry != industry:
            continue
        if not matches_search(job, search):
            continue
        result.append(job)
    return result


def _as_aware(value: datetime | None) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sort_jobs(jobs: Iterable, sort: SortKey = "newest") -> list:
    """Two-key sort: newest-first or soonest-deadline-first, the other key breaking ties."""
    if sort == "deadline":
        return sorted(
            jobs,
            key=lambda j: (j.deadline or date.max, -_as_aware(j.created_at).timestamp()),
        )
    return sorted(
        jobs,
        key=lambda j: (-_as_aware(j.created_at).timestamp(), j.deadline or date.max),
    )


def student_listing(
    jobs: Iterable,
    search: str | None = None,
    job_types: Sequence[str] | None = None,
    industry: str | None = None,
    sort: SortKey = "newest",
    today: date | None = None,
) -> list:
    """Jobs a student may see, filtered and sorted for the browse screen."""
    visible = [j for j in jobs if is_visible_to_students(j, today)]
    return sort_jobs(filter_jobs(visible, search, job_types, industry), sort)


def industries_of(jobs: Iterable) -> list[str]:
    """Distinct industries for the filter dropdown."""
    return sorted({j.industry for j in jobs if j.industry})


def days_until_deadline(job, today: date | None = None) -> int | None:
    if job.deadline is None:
        return None
    return (job.deadline - (today or today_utc())).days
