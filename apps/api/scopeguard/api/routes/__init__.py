"""
API routes aggregation.
"""

from fastapi import APIRouter

from .access import router as access_router

router = APIRouter()

router.include_router(access_router, prefix="/access", tags=["access"])
