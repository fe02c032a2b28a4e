"""
API v1 Router

All API endpoints.
"""

from fastapi import APIRouter

from signal_engine.api.v1.endpoints import signals, scanner

router = APIRouter()

# Scanner routes first: /signals/{instrument:path} would swallow them otherwise
router.include_router(scanner.router, prefix="/scanner", tags=["Scanner"])
router.include_router(signals.router, prefix="/signals", tags=["Signals"])
