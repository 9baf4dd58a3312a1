"""Pydantic schemas package."""

from jobboard.schemas.job import (
    JobBase,
    JobCreate,
    JobUpdate,
    JobRead,
    JobSummary,
    RecommendedJob,
    ReactivateRequest,
    StatusChange,
    TrackClickRequest,
)
from jobboard.schemas.account import (
    UserRoleRead,
    LoginRequest,
    TokenResponse,
    RegisterRep,
    RegisterStudent,
    PasswordChange,
    PasswordResetRequest,
    PasswordResetConfirm,
    ProfileUpdate,
    AccountDelete,
    UserStatusChange,
    DeletedUserRead,
    UserRoleChange,
    StatusLogRead,
)
from jobboard.schemas.student import (
    StudentProfileBase,
    StudentProfileRead,
    ApplicationRead,
    ApplicationWithDetails,
    ApplicationStatusUpdate,
)
from jobboard.schemas.settings import (
    SettingsRead,
    SettingUpdate,
    SettingToggleResult,
)
from jobboard.schemas.analytics import (
    AnalyticsReport,
    PlatformReport,
)

__all__ = [
    # Job
    "JobBase",
    "JobCreate",
    "JobUpdate",
    "JobRead",
    "JobSummary",
    "RecommendedJob",
    "ReactivateRequest",
    "StatusChange",
    "TrackClickRequest",
    # Account
    "UserRoleRead",
    "LoginRequest",
    "TokenResponse",
    "RegisterRep",
    "RegisterStudent",
    "PasswordChange",
    "PasswordResetRequest",
    "PasswordResetConfirm",
    "ProfileUpdate",
    "AccountDelete",
    "UserStatusChange",
    "DeletedUserRead",
    "UserRoleChange",
    "StatusLogRead",
    # Student
    "StudentProfileBase",
    "StudentProfileRead",
    "ApplicationRead",
    "ApplicationWithDetails",
    "ApplicationStatusUpdate",
    # Settings
    "SettingsRead",
    "SettingUpdate",
    "SettingToggleResult",
    # Analytics
    "AnalyticsReport",
    "PlatformReport",
]
