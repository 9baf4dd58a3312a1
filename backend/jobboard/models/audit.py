"""Audit tables for account deletion and admin status changes."""

from sqlalchemy import Column, String, Boolean, Text, DateTime, Uuid, func

from jobboard.models.base import Base, UUIDMixin, utcnow


class DeletedUserAudit(UUIDMixin, Base):
    __tablename__ = "deleted_users_audit"

    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    email = Column(String(255))
    role = Column(String(20))
    first_name = Column(String(100))
    last_name = Column(String(100))
    company_name = Column(String(255))
    deleted_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    self_deleted = Column(Boolean, default=True, nullable=False)
    deleted_by_admin_email = Column(String(255))
    deletion_reason = Column(Text)


class UserStatusAudit(UUIDMixin, Base):
    __tablename__ = "user_status_audit"

    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    action = Column(String(20), nullable=False)  # enabled, disabled
    changed_by_admin_email = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
