"""Profile API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.dependencies.auth import require_role_api
from jobboard.models.base import get_db
from jobboard.models.user_role import UserRole
from jobboard.schemas.account import ProfileUpdate, UserRoleRead
from jobboard.services import account_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=UserRoleRead)
async def my_profile(role: UserRole = Depends(require_role_api())):
    return role


@router.put("/update", response_model=UserRoleRead)
async def update_profile(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api()),
):
    """Update a role/profile record; users may only edit their own unless admin."""
    if body.user_id != role.user_id and role.role != "admin":
        raise HTTPException(status_code=403, detail="You can only update your own profile")
    try:
        return await account_service.update_profile(db, body.user_id, body.email, body.profile_data)
    except LookupError:
        raise HTTPException(status_code=404, detail="User profile not found")
