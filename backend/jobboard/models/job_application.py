"""Job application model — a student's application to a posting."""

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship

from jobboard.models.base import Base, UUIDMixin, utcnow

APPLICATION_STATUSES = ("applied", "viewed", "interview", "hired", "rejected")


class JobApplication(UUIDMixin, Base):
    __tablename__ = "job_applications"

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True)
    status = Column(String(20), default="applied", nullable=False)
    applied_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    job = relationship("Job", back_populates="applications")

    __table_args__ = (
        UniqueConstraint("job_id", "student_id", name="uq_job_applications_job_student"),
    )
