"""User model — login identity (email + password hash)."""

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from jobboard.models.base import Base, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime(timezone=True))

    # Relationships
    role_record = relationship("UserRole", back_populates="user", uselist=False, lazy="selectin")
    student_profile = relationship("StudentProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    saved_jobs = relationship("SavedJob", back_populates="user", cascade="all, delete-orphan")
