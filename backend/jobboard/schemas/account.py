"""Pydantic schemas for identities, role records and account operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserRoleRead(BaseModel):
    """Role record output; role-specific fields are None for other roles."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    role: str
    is_active: bool
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    bio: str | None = None
    profile_picture_url: str | None = None
    major: str | None = None
    graduation_year: int | None = None
    gpa: float | None = None
    resume_url: str | None = None
    linkedin_url: str | None = None
    company_name: str | None = None
    job_title: str | None = None
    company_website: str | None = None
    department: str | None = None
    office_location: str | None = None
    office_hours: str | None = None
    created_at: datetime


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    user_id: UUID


class RegisterRep(BaseModel):
    email: str
    password: str
    company_name: str
    first_name: str
    last_name: str
    job_title: str | None = None
    phone_number: str | None = None


class RegisterStudent(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    major: str | None = None
    graduation_year: int | None = None


class PasswordChange(BaseModel):
    password: str
    confirm_password: str


class PasswordResetRequest(BaseModel):
    email: str


class PasswordResetConfirm(BaseModel):
    token: str
    password: str
    confirm_password: str


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: UUID = Field(alias="userId")
    email: str | None = None
    profile_data: dict[str, Any] = Field(default_factory=dict, alias="profileData")


class AccountDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    confirm_text: str = Field(alias="confirmText")
    reason: str | None = None


class UserStatusChange(BaseModel):
    is_active: bool


class DeletedUserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: str | None = None
    role: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    deleted_at: datetime
    self_deleted: bool
    deleted_by_admin_email: str | None = None
    deletion_reason: str | None = None


class UserRoleChange(BaseModel):
    role: str


class StatusLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    action: str
    changed_by_admin_email: str | None = None
    created_at: datetime
