"""Student preference profile — upserted wholesale on save."""

from sqlalchemy import Column, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from jobboard.models.base import Base, JSONList, TimestampMixin, UUIDMixin


class StudentProfile(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "student_profiles"

    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Lists treated as sets; order is not meaningful
    interests = Column(JSONList, default=list, nullable=False)
    skills = Column(JSONList, default=list, nullable=False)
    preferred_job_types = Column(JSONList, default=list, nullable=False)
    preferred_industries = Column(JSONList, default=list, nullable=False)

    user = relationship("User", back_populates="student_profile")
