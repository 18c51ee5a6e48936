"""Health check routes"""

from fastapi import APIRouter, Depends, Request
import logging

from api.dependencies import get_settings
from app.config import Settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("dailydiet.api.health")


@router.get("/health-check")
def health_check(request: Request, settings: Settings = Depends(get_settings)):
    """Basic health check endpoint"""
    database = "ok" if getattr(request.app.state, "engine", None) is not None else "unavailable"
    return {"status": "ok", "service": settings.app_name, "database": database}
