"""API route registration."""

from fastapi import APIRouter
from .auth import router as auth_router
from .subjects import router as subjects_router
from .topics import router as topics_router
from .problems import router as problems_router
from .recaps import router as recaps_router
from .assessment import router as assessment_router
from .code_run import router as code_run_router
from .ai import router as ai_router
from .uploads import router as uploads_router
from .admin import router as admin_router


def register_all_routes(api_router: APIRouter):
    """Include all route modules on the main API router."""
    api_router.include_router(auth_router)
    api_router.include_router(subjects_router)
    api_router.include_router(topics_router)
    api_router.include_router(problems_router)
    api_router.include_router(recaps_router)
    api_router.include_router(assessment_router)
    api_router.include_router(code_run_router)
    api_router.include_router(ai_router)
    api_router.include_router(uploads_router)
    api_router.include_router(admin_router)
