"""Job view and link-click events — append-only, used only for counting."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import relationship

from jobboard.models.base import Base, UUIDMixin, utcnow


class JobView(UUIDMixin, Base):
    __tablename__ = "job_views"

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    viewed_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    job = relationship("Job", back_populates="views")

    __table_args__ = (
        Index("idx_job_views_job", "job_id"),
    )


class JobLinkClick(UUIDMixin, Base):
    __tablename__ = "job_link_clicks"

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    clicked_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    job = relationship("Job", back_populates="link_clicks")

    __table_args__ = (
        Index("idx_job_link_clicks_job", "job_id"),
    )
