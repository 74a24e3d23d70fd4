"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from technicals.api.v1.endpoints import technical

router = APIRouter()

# Include all endpoint routers
router.include_router(technical.router, prefix="/technical", tags=["Technical Analysis"])
