"""API router definitions."""

from fastapi import APIRouter

from .equipment import router as equipment_router
from .logs import router as logs_router
from .routes import health_router

api_router = APIRouter()
api_router.include_router(equipment_router)
api_router.include_router(logs_router)

__all__ = ["api_router", "health_router"]
