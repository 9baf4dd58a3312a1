"""Job posting model — the single listings table."""

from sqlalchemy import Column, String, Text, Date, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from jobboard.models.base import Base, JSONList, TimestampMixin, UUIDMixin

JOB_TYPES = ("Internship", "Part-Time", "Full-Time")
JOB_STATUSES = ("pending", "active", "rejected", "removed")

INDUSTRIES = (
    "Technology",
    "Healthcare",
    "Finance",
    "Education",
    "Marketing & Advertising",
    "Engineering",
    "Sales",
    "Retail",
    "Hospitality",
    "Government",
    "Non-Profit",
    "Manufacturing",
    "Arts & Entertainment",
    "Other",
)


class Job(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "jobs"

    # Core
    title = Column(Text, nullable=False)
    company = Column(String(255), nullable=False)
    industry = Column(String(100), nullable=False, index=True)
    job_type = Column(String(20), nullable=False, index=True)  # Internship, Part-Time, Full-Time
    location = Column(String(255))
    salary_range = Column(String(255))
    description = Column(Text, nullable=False)
    requirements = Column(JSONList, default=list, nullable=False)  # ordered
    skills = Column(JSONList, default=list, nullable=False)
    deadline = Column(Date, nullable=False)
    apply_url = Column(Text)

    # Moderation
    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, active, rejected, removed
    rejection_note = Column(Text)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True)

    # Relationships
    creator = relationship("User")
    views = relationship("JobView", back_populates="job", cascade="all, delete-orphan")
    link_clicks = relationship("JobLinkClick", back_populates="job", cascade="all, delete-orphan")
    applications = relationship("JobApplication", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_jobs_status_deadline", "status", "deadline"),
        Index("idx_jobs_creator_status", "created_by", "status"),
    )
