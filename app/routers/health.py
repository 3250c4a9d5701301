"""
Health Router
app/routers/health.py
"""

from fastapi import APIRouter

from app.models.api import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
