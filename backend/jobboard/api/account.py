"""Account API endpoints — self-service deletion."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.dependencies.auth import get_current_user, require_role_api
from jobboard.models.base import get_db
from jobboard.models.user import User
from jobboard.models.user_role import UserRole
from jobboard.schemas.account import AccountDelete
from jobboard.services import account_service

router = APIRouter(prefix="/account", tags=["account"])


@router.delete("/delete")
async def delete_account(
    request: Request,
    body: AccountDelete,
    db: AsyncSession = Depends(get_db),
    role: UserRole = Depends(require_role_api()),
    user: User = Depends(get_current_user),
):
    """Anonymize and deactivate the caller's account, then sign them out."""
    await account_service.delete_account(db, user, body.confirm_text, body.reason)
    request.session.clear()
    return {"success": True, "message": "Account deleted successfully"}
