"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.members import router as members_router

router = APIRouter()
router.include_router(members_router)
