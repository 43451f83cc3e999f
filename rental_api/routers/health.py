"""
Health check endpoint.
"""

from datetime import datetime, timezone
from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Liveness check with the current server time."""
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat()
    }
