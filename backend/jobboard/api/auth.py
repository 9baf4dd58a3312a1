"""Auth API endpoints — registration, bearer login/logout, password change and reset."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.dependencies.auth import get_current_user
from jobboard.models.base import get_db
from jobboard.models.user import User
from jobboard.schemas.account import (
    LoginRequest,
    PasswordChange,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRep,
    RegisterStudent,
    TokenResponse,
)
from jobboard.services import account_service
from jobboard.services.auth_service import (
    create_access_token,
    create_password_reset_token,
    read_password_reset_token,
    reset_token_matches,
    verify_password,
)
from jobboard.services.errors import ValidationError

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register-rep", status_code=201)
async def register_rep(body: RegisterRep, db: AsyncSession = Depends(get_db)):
    """Create a rep identity; the role stays inactive until an admin approves it."""
    if not body.company_name.strip():
        raise ValidationError("Email, password, and company name are required.")
    user, role = await account_service.create_account(
        db,
        body.email,
        body.password,
        "rep",
        is_active=False,
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        company_name=body.company_name.strip(),
        job_title=body.job_title,
        phone_number=body.phone_number,
    )
    return {"message": "Account created successfully. Awaiting admin approval.", "user_id": str(user.id)}


@router.post("/register-student", status_code=201)
async def register_student(body: RegisterStudent, db: AsyncSession = Depends(get_db)):
    user, role = await account_service.create_account(
        db,
        body.email,
        body.password,
        "student",
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        major=body.major,
        graduation_year=body.graduation_year,
    )
    return {"message": "Account created successfully.", "user_id": str(user.id)}


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Check credentials; raises ValidationError or HTTPException(403) on failure."""
    user = await account_service.get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise ValidationError("Invalid email or password.")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="This account has been deactivated.")
    role = user.role_record
    if role is None or not role.is_active:
        raise HTTPException(status_code=403, detail="This account is pending approval or has been disabled.")
    return user


@router.post("/login", response_model=TokenResponse)
async def login(request: Request, body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, body.email, body.password)
    await account_service.record_login(db, user)
    request.session["user_id"] = str(user.id)
    return TokenResponse(
        access_token=create_access_token(user.id),
        role=user.role_record.role,
        user_id=user.id,
    )


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.post("/password")
async def change_password(
    body: PasswordChange,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_current_user),
):
    if user is None:
        raise HTTPException(status_code=401, detail="Login required")
    await account_service.change_password(db, user, body.password, body.confirm_password)
    return {"success": True, "message": "Password updated successfully."}


@router.post("/password-reset/request")
async def request_password_reset(body: PasswordResetRequest, db: AsyncSession = Depends(get_db)):
    """Issue a reset link. The response is the same whether or not the email exists."""
    user = await account_service.get_user_by_email(db, body.email)
    if user and user.is_active:
        token = create_password_reset_token(user.id, user.email, user.hashed_password)
        # No mail transport is configured; operators relay the link from the log
        logger.info(
            "Password reset requested for %s: %s/reset-password?token=%s",
            user.email, settings.public_base_url, token,
        )
    return {"message": "If an account exists for that email, a password reset link has been sent."}


@router.post("/password-reset/confirm")
async def confirm_password_reset(body: PasswordResetConfirm, db: AsyncSession = Depends(get_db)):
    claims = read_password_reset_token(body.token)
    if claims is None:
        raise HTTPException(status_code=400, detail="Reset link is invalid or has expired.")
    user = await db.get(User, claims[0])
    if not reset_token_matches(user, claims):
        raise HTTPException(status_code=400, detail="Reset link is invalid or has expired.")
    await account_service.change_password(db, user, body.password, body.confirm_password)
    return {"success": True, "message": "Password has been reset. You can now log in."}
