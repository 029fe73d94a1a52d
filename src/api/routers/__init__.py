"""
API routers package.

Combines the auth, officer and user routers under one router that the
application mounts at /api.

Handlers are plain `def` functions so FastAPI runs them in its threadpool:
bcrypt, psycopg and code delivery all block.
"""

from fastapi import APIRouter

from src.api.routers.auth import router as auth_router
from src.api.routers.officer import router as officer_router
from src.api.routers.users import router as users_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(officer_router)
router.include_router(users_router)

__all__ = ["router"]
