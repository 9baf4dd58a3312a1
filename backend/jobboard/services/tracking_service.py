"""View and link-click tracking — one append-only row per event."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.job_event import JobLinkClick, JobView

logger = logging.getLogger(__name__)


async def record_view(db: AsyncSession, job_id: UUID, user_id: UUID | None) -> bool:
    """Insert one view event. Failures are logged and never reach the caller's page."""
    try:
        async with db.begin_nested():
            db.add(JobView(job_id=job_id, user_id=user_id))
        return True
    except SQLAlchemyError as e:
        logger.warning("Failed to record view for job %s: %s", job_id, e)
        return False


async def record_click(db: AsyncSession, job_id: UUID, user_id: UUID | None) -> JobLinkClick:
    """Insert one link-click event; errors propagate to the endpoint."""
    click = JobLinkClick(job_id=job_id, user_id=user_id)
    db.add(click)
    await db.flush()
    return click
