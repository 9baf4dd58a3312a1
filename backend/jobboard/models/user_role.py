"""Role record — one per identity, carries role-specific profile fields."""

from sqlalchemy import Column, String, Boolean, Integer, Float, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from jobboard.models.base import Base, TimestampMixin, UUIDMixin

ROLES = ("student", "faculty", "rep", "admin", "staff")
POSTING_ROLES = ("faculty", "rep", "admin", "staff")

# Fields written only when present in an update payload, grouped by role
STUDENT_FIELDS = ("major", "graduation_year", "gpa", "resume_url", "linkedin_url")
REP_FIELDS = ("company_name", "job_title", "company_website")
FACULTY_FIELDS = ("department", "office_location", "office_hours")


class UserRole(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_roles"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    role = Column(String(20), nullable=False, index=True)  # student, faculty, rep, admin, staff
    is_active = Column(Boolean, default=True, nullable=False)

    # Common
    email = Column(String(255))
    first_name = Column(String(100))
    last_name = Column(String(100))
    phone_number = Column(String(50))
    bio = Column(Text)
    profile_picture_url = Column(Text)

    # Student
    major = Column(String(255))
    graduation_year = Column(Integer)
    gpa = Column(Float)
    resume_url = Column(Text)
    linkedin_url = Column(Text)

    # Rep
    company_name = Column(String(255))
    job_title = Column(String(255))
    company_website = Column(Text)

    # Faculty
    department = Column(String(255))
    office_location = Column(String(255))
    office_hours = Column(String(255))

    user = relationship("User", back_populates="role_record")

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or (self.email or "")
