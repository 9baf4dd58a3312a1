"""API router aggregation."""

from fastapi import APIRouter

from jobboard.api.auth import router as auth_router
from jobboard.api.jobs import router as jobs_router
from jobboard.api.admin import router as admin_router
from jobboard.api.faculty import router as faculty_router
from jobboard.api.rep import router as rep_router
from jobboard.api.student import router as student_router
from jobboard.api.profile import router as profile_router
from jobboard.api.account import router as account_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(jobs_router)
router.include_router(admin_router)
router.include_router(faculty_router)
router.include_router(rep_router)
router.include_router(student_router)
router.include_router(profile_router)
router.include_router(account_router)
