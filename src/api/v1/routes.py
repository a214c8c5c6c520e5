"""
API v1 routes.

Aggregates the versioned routers of the identity & access API.
"""

from fastapi import APIRouter

from src.api.v1.auth import router as auth_router
from src.api.v1.playlists import router as playlists_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(playlists_router)
