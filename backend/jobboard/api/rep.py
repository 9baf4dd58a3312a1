"""Company representative API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.dependencies.auth import require_role_api
from jobboard.models.base import get_db
from jobboard.models.user_role import UserRole
from jobboard.schemas.analytics import AnalyticsReport
from jobboard.services import analytics_service

settings = get_settings()

router = APIRouter(prefix="/rep", tags=["rep"])


@router.get("/analytics", response_model=AnalyticsReport)
async def rep_analytics(
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api("rep")),
    days: int = Query(settings.default_analytics_days, ge=1, le=365),
):
    jobs = await analytics_service.load_jobs_with_events(db, created_by=role.user_id)
    return analytics_service.compute_engagement(jobs, days=days)
