"""Account lifecycle — registration, profile updates, anonymizing deletion."""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.models.audit import DeletedUserAudit, UserStatusAudit
from jobboard.models.saved_job import SavedJob
from jobboard.models.student_profile import StudentProfile
from jobboard.models.user import User
from jobboard.models.user_role import (
    FACULTY_FIELDS,
    REP_FIELDS,
    ROLES,
    STUDENT_FIELDS,
    UserRole,
)
from jobboard.services.auth_service import hash_password
from jobboard.services.errors import ValidationError

logger = logging.getLogger(__name__)

GENERIC_FIELDS = ("phone_number", "bio", "profile_picture_url")

# Columns blanked when an account is deleted
ANONYMIZED_FIELDS = GENERIC_FIELDS + STUDENT_FIELDS + REP_FIELDS + FACULTY_FIELDS


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def validate_password(password: str | None, confirm: str | None = None) -> str:
    minimum = get_settings().min_password_length
    if not password or len(password) < minimum:
        raise ValidationError(f"Password must be at least {minimum} characters long.")
    if confirm is not None and password != confirm:
        raise ValidationError("Passwords do not match.")
    return password


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def create_account(
    db: AsyncSession,
    email: str,
    password: str,
    role: str,
    is_active: bool = True,
    **profile: Any,
) -> tuple[User, UserRole]:
    """Create an identity and its single role record."""
    if role not in ROLES:
        raise ValidationError("Invalid role.")
    email = normalize_email(email)
    if not email or "@" not in email:
        raise ValidationError("A valid email address is required.")
    validate_password(password)
    if await get_user_by_email(db, email):
        raise ValidationError("Email already registered.")

    user = User(email=email, hashed_password=hash_password(password), is_active=True)
    db.add(user)
    await db.flush()

    role_record = UserRole(user_id=user.id, role=role, is_active=is_active, email=email, **profile)
    db.add(role_record)
    await db.flush()
    logger.info("Created %s account %s (active=%s)", role, email, is_active)
    return user, role_record


async def get_role(db: AsyncSession, user_id: UUID) -> UserRole | None:
    result = await db.execute(select(UserRole).where(UserRole.user_id == user_id))
    return result.scalar_one_or_none()


async def update_profile(
    db: AsyncSession,
    user_id: UUID,
    email: str | None,
    profile_data: dict[str, Any],
) -> UserRole:
    """Write profile fields; role-specific ones only when present in ``profile_data``."""
    first_name = (profile_data.get("first_name") or "").strip()
    last_name = (profile_data.get("last_name") or "").strip()
    if not first_name or not last_name:
        raise ValidationError("First name and last name are required.")

    user = await db.get(User, user_id)
    role = await get_role(db, user_id)
    if user is None or role is None:
        raise LookupError("User profile not found")

    values = {"first_name": first_name, "last_name": last_name}
    for name in GENERIC_FIELDS:
        values[name] = profile_data.get(name) or None
    for name in STUDENT_FIELDS + REP_FIELDS + FACULTY_FIELDS:
        if name in profile_data:
            values[name] = _clean_field(name, profile_data[name])

    if email:
        email = normalize_email(email)
        if email != user.email and await get_user_by_email(db, email) is not None:
            raise ValidationError("Failed to update email. It may already be in use.")
        user.email = email
        values["email"] = email

    # Nothing is written until every field has validated
    for name, value in values.items():
        setattr(role, name, value)

    await db.flush()
    return role


def _clean_field(name: str, value: Any) -> Any:
    if value in ("", None):
        return None
    if name == "gpa":
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError("GPA must be a number.") from None
    if name == "graduation_year":
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("Graduation year must be a number.") from None
    return value


async def change_password(db: AsyncSession, user: User, new_password: str, confirm: str | None = None):
    user.hashed_password = hash_password(validate_password(new_password, confirm))
    await db.flush()


async def delete_account(
    db: AsyncSession,
    user: User,
    confirm_text: str | None,
    reason: str | None = None,
    admin_email: str | None = None,
) -> DeletedUserAudit:
    """Anonymize the role record and deactivate the identity.

    Postings, applications and view/click events stay in place so analytics keep
    their counts; they now point at an anonymized account.
    """
    if confirm_text != get_settings().delete_confirmation_text:
        raise ValidationError(
            f'Confirmation text must be "{get_settings().delete_confirmation_text}"'
        )

    role = await get_role(db, user.id)
    if role is None:
        raise LookupError("User profile not found")

    audit = DeletedUserAudit(
        user_id=user.id,
        email=role.email or user.email,
        role=role.role,
        first_name=role.first_name,
        last_name=role.last_name,
        company_name=role.company_name,
        self_deleted=admin_email is None,
        deleted_by_admin_email=admin_email,
        deletion_reason=reason or None,
    )
    db.add(audit)

    tombstone = f"deleted_{user.id}@deleted.invalid"
    role.is_active = False
    role.first_name = "Deleted"
    role.last_name = "User"
    role.email = tombstone
    for name in ANONYMIZED_FIELDS:
        setattr(role, name, None)

    await db.execute(delete(StudentProfile).where(StudentProfile.student_id == user.id))
    await db.execute(delete(SavedJob).where(SavedJob.user_id == user.id))

    user.email = tombstone
    user.is_active = False
    user.hashed_password = "!" + secrets.token_hex(32)

    await db.flush()
    logger.info("Account %s deleted (%s) - reason: %s", user.id, audit.role, reason or "not provided")
    return audit


async def set_user_active(db: AsyncSession, user_id: UUID, is_active: bool, admin_email: str | None) -> UserRole:
    """Admin enable/disable of an account, recorded in the status audit log."""
    role = await get_role(db, user_id)
    if role is None:
        raise LookupError("User not found")
    role.is_active = is_active
    db.add(UserStatusAudit(
        user_id=user_id,
        action="enabled" if is_active else "disabled",
        changed_by_admin_email=admin_email,
    ))
    await db.flush()
    return role


async def record_login(db: AsyncSession, user: User):
    user.last_login_at = datetime.now(timezone.utc)
    await db.flush()
