"""Admin-controlled boolean feature flags."""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid, func

from jobboard.models.base import Base, UUIDMixin, utcnow

REP_CAN_POST_JOBS = "rep_can_post_jobs"
FACULTY_CAN_POST_JOBS = "faculty_can_post_jobs"

# Flag defaults when no row exists yet
DEFAULT_SETTINGS = {
    REP_CAN_POST_JOBS: True,
    FACULTY_CAN_POST_JOBS: True,
}


class AppSetting(UUIDMixin, Base):
    __tablename__ = "app_settings"

    setting_key = Column(String(100), unique=True, nullable=False)
    setting_value = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)
    updated_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
