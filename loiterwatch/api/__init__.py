"""API routers for LoiterWatch."""

from fastapi import APIRouter

from .aircraft import router as aircraft_router
from .health import router as health_router
from .loitering import router as loitering_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(aircraft_router)
api_router.include_router(loitering_router)

__all__ = ["api_router"]
