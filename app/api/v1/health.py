"""Health check endpoints."""
from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe; the Intelligence API status lives at /intelligence/health."""
    return {"status": "healthy", "service": "portfolio-intelligence-api"}
