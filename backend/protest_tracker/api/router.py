"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from protest_tracker.api.routes import organizers, protests

api_router = APIRouter(prefix="/api")
api_router.include_router(organizers.router)
api_router.include_router(protests.router)
