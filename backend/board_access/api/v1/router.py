"""API v1 router aggregator.

Mounted twice by the application: at the root (the paths browser clients
were built against) and under /api/v1.
"""

from fastapi import APIRouter

from board_access.api.v1 import activation, session

router = APIRouter()

# =============================================================================
# Access
# =============================================================================

router.include_router(activation.router, tags=["access"])
router.include_router(session.router, tags=["access"])
