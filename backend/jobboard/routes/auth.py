"""Authentication web routes — login, signup, logout, password reset, profile settings."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import get_settings
from jobboard.models.base import get_db
from jobboard.models.user import User
from jobboard.models.user_role import UserRole
from jobboard.services import account_service
from jobboard.services.auth_service import (
    create_password_reset_token,
    read_password_reset_token,
    reset_token_matches,
)
from jobboard.services.errors import ValidationError
from jobboard.api.auth import authenticate
from jobboard.dependencies.auth import (
    get_current_user,
    require_role,
    ensure_csrf_token,
    validate_csrf_token,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")

ROLE_HOME = {
    "student": "/student/dashboard",
    "faculty": "/faculty/dashboard",
    "rep": "/rep/dashboard",
    "admin": "/admin/dashboard",
    "staff": "/faculty/dashboard",
}


def safe_next_path(next_path: str | None) -> str | None:
    """Only same-site relative paths are honored as post-login targets."""
    if next_path and next_path.startswith("/") and not next_path.startswith("//"):
        return next_path
    return None


def _render(request: Request, name: str, **extra):
    ctx = {"request": request, "csrf_token": ensure_csrf_token(request), "error": None, "success": None}
    ctx.update(extra)
    return templates.TemplateResponse(request, name, ctx)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, next: str | None = None, db: AsyncSession = Depends(get_db)):
    user = await get_current_user(request, db)
    if user:
        return RedirectResponse("/", status_code=303)
    return _render(request, "auth/login.html", next=safe_next_path(next))


@router.post("/login", response_class=HTMLResponse)
async def login_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    email = form.get("email", "").strip().lower()
    password = form.get("password", "")
    next_path = safe_next_path(form.get("next"))

    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "auth/login.html", next=next_path, error="Invalid request. Please try again.")

    try:
        user = await authenticate(db, email, password)
    except ValidationError as e:
        return _render(request, "auth/login.html", next=next_path, email=email, error=e.message)
    except HTTPException as e:
        return _render(request, "auth/login.html", next=next_path, email=email, error=e.detail)

    await account_service.record_login(db, user)
    request.session["user_id"] = str(user.id)
    return RedirectResponse(next_path or ROLE_HOME.get(user.role_record.role, "/"), status_code=303)


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    return _render(request, "auth/signup.html")


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(request: Request, db: AsyncSession = Depends(get_db)):
    """Student self-registration."""
    form = await request.form()
    values = {k: form.get(k, "").strip() for k in ("email", "first_name", "last_name", "major")}

    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "auth/signup.html", form=values, error="Invalid request. Please try again.")

    if not values["first_name"] or not values["last_name"]:
        return _render(request, "auth/signup.html", form=values, error="All fields are required.")

    try:
        account_service.validate_password(form.get("password", ""), form.get("confirm_password", ""))
        user, _ = await account_service.create_account(
            db,
            values["email"],
            form.get("password", ""),
            "student",
            first_name=values["first_name"],
            last_name=values["last_name"],
            major=values["major"] or None,
        )
    except ValidationError as e:
        return _render(request, "auth/signup.html", form=values, error=e.message)

    request.session["user_id"] = str(user.id)
    return RedirectResponse(ROLE_HOME["student"], status_code=303)


@router.get("/signup/rep", response_class=HTMLResponse)
async def signup_rep_page(request: Request):
    return _render(request, "auth/signup_rep.html")


@router.post("/signup/rep", response_class=HTMLResponse)
async def signup_rep_submit(request: Request, db: AsyncSession = Depends(get_db)):
    """Company representative registration; the account waits for admin approval."""
    form = await request.form()
    values = {
        k: form.get(k, "").strip()
        for k in ("email", "first_name", "last_name", "company_name", "job_title", "phone_number")
    }

    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "auth/signup_rep.html", form=values, error="Invalid request. Please try again.")

    if not values["company_name"] or not values["first_name"] or not values["last_name"]:
        return _render(request, "auth/signup_rep.html", form=values, error="All fields are required.")

    try:
        account_service.validate_password(form.get("password", ""), form.get("confirm_password", ""))
        await account_service.create_account(
            db,
            values["email"],
            form.get("password", ""),
            "rep",
            is_active=False,
            first_name=values["first_name"],
            last_name=values["last_name"],
            company_name=values["company_name"],
            job_title=values["job_title"] or None,
            phone_number=values["phone_number"] or None,
        )
    except ValidationError as e:
        return _render(request, "auth/signup_rep.html", form=values, error=e.message)

    return _render(
        request,
        "auth/signup_rep.html",
        form={},
        success="Account created successfully. An administrator will review your registration.",
    )


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/login", status_code=303)


@router.get("/forgot-password", response_class=HTMLResponse)
async def forgot_password_page(request: Request):
    return _render(request, "auth/forgot_password.html")


@router.post("/forgot-password", response_class=HTMLResponse)
async def forgot_password_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "auth/forgot_password.html", error="Invalid request. Please try again.")

    user = await account_service.get_user_by_email(db, form.get("email", ""))
    if user and user.is_active:
        token = create_password_reset_token(user.id, user.email, user.hashed_password)
        logger.info("Password reset link for %s: %s/reset-password?token=%s", user.email, settings.public_base_url, token)

    return _render(
        request,
        "auth/forgot_password.html",
        success="If an account exists for that email, a password reset link has been sent.",
    )


@router.get("/reset-password", response_class=HTMLResponse)
async def reset_password_page(request: Request, token: str = ""):
    if read_password_reset_token(token) is None:
        return _render(request, "auth/reset_password.html", token="", error="Reset link is invalid or has expired.")
    return _render(request, "auth/reset_password.html", token=token)


@router.post("/reset-password", response_class=HTMLResponse)
async def reset_password_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    token = form.get("token", "")

    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "auth/reset_password.html", token=token, error="Invalid request. Please try again.")

    claims = read_password_reset_token(token)
    user = await db.get(User, claims[0]) if claims else None
    if not reset_token_matches(user, claims):
        return _render(request, "auth/reset_password.html", token="", error="Reset link is invalid or has expired.")

    try:
        await account_service.change_password(db, user, form.get("password", ""), form.get("confirm_password", ""))
    except ValidationError as e:
        return _render(request, "auth/reset_password.html", token=token, error=e.message)

    return RedirectResponse("/login", status_code=303)


# --- Profile settings (all roles) ---

def _settings_ctx(role: UserRole, **extra) -> dict:
    return {"role": role, "current_user": role, "confirm_text": settings.delete_confirmation_text, **extra}


@router.get("/profile/settings", response_class=HTMLResponse)
async def profile_settings_page(request: Request, role: UserRole = Depends(require_role())):
    return _render(request, "profile/settings.html", **_settings_ctx(role))


@router.post("/profile/settings", response_class=HTMLResponse)
async def profile_settings_submit(
    request: Request,
    role: UserRole = Depends(require_role()),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "profile/settings.html", **_settings_ctx(role, error="Invalid request. Please try again."))

    # Only the fields the form rendered for this role are submitted
    profile_data = {k: v.strip() if isinstance(v, str) else v for k, v in form.items() if k not in ("csrf_token", "email")}
    try:
        role = await account_service.update_profile(db, role.user_id, form.get("email"), profile_data)
    except ValidationError as e:
        return _render(request, "profile/settings.html", **_settings_ctx(role, error=e.message))

    return _render(request, "profile/settings.html", **_settings_ctx(role, success="Profile updated successfully."))


@router.post("/profile/password", response_class=HTMLResponse)
async def profile_password_submit(
    request: Request,
    role: UserRole = Depends(require_role()),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "profile/settings.html", **_settings_ctx(role, error="Invalid request. Please try again."))

    user = await db.get(User, role.user_id)
    try:
        await account_service.change_password(db, user, form.get("new_password", ""), form.get("confirm_password", ""))
    except ValidationError as e:
        return _render(request, "profile/settings.html", **_settings_ctx(role, error=e.message))

    return _render(request, "profile/settings.html", **_settings_ctx(role, success="Password updated successfully."))


@router.post("/profile/delete", response_class=HTMLResponse)
async def profile_delete_submit(
    request: Request,
    role: UserRole = Depends(require_role()),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    if not validate_csrf_token(request, form.get("csrf_token", "")):
        return _render(request, "profile/settings.html", **_settings_ctx(role, error="Invalid request. Please try again."))

    user = await db.get(User, role.user_id)
    try:
        await account_service.delete_account(db, user, form.get("confirm_text", ""), form.get("reason") or None)
    except ValidationError as e:
        return _render(request, "profile/settings.html", **_settings_ctx(role, error=e.message))

    request.session.clear()
    return RedirectResponse("/login", status_code=303)
