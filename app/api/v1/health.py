"""
Health check endpoint
"""

from fastapi import APIRouter
from app.core.config import settings

router = APIRouter()


@router.get("")
async def health():
    """
    Health check endpoint.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "analysis_model": settings.ANALYSIS_MODEL,
        "openai_api_key_configured": bool(settings.OPENAI_API_KEY),
        "max_upload_size_mb": settings.MAX_UPLOAD_SIZE_MB,
    }
