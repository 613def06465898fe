"""
API router
"""

from fastapi import APIRouter
from app.api.v1 import extract_text
from app.api.v1 import process_text
from app.api.v1 import analyze
from app.api.v1 import sessions
from app.api.v1 import health
from app.api.v1 import examples

api_router = APIRouter()

# Pipeline endpoints
api_router.include_router(extract_text.router, prefix="/api/extract-text", tags=["pipeline"])
api_router.include_router(process_text.router, prefix="/api/process-text", tags=["pipeline"])
api_router.include_router(analyze.router, prefix="/api/analyze", tags=["pipeline"])
api_router.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])

# Service endpoints
api_router.include_router(health.router, prefix="/health", tags=["service"])
api_router.include_router(examples.router, prefix="/example", tags=["examples"])
