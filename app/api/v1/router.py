"""Main API v1 router."""
from fastapi import APIRouter

from app.api.v1 import health, intelligence

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(intelligence.router)  # Intelligence Data Proxy
