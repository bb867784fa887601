"""Router package exposing all API routers."""

from fastapi import APIRouter

from .generation.router import router as generation_router
from .overlay.router import router as overlay_router

router = APIRouter()
router.include_router(overlay_router)
router.include_router(generation_router)

__all__ = ["router", "overlay_router", "generation_router"]
