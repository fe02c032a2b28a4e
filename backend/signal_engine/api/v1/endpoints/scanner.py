"""
Scanner API Endpoints

Inspect and trigger the periodic signal scanner.
"""

import logging

from fastapi import APIRouter, HTTPException, Request

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_scanner(request: Request):
    scanner = getattr(request.app.state, "scanner", None)
    if scanner is None:
        raise HTTPException(status_code=503, detail="Scanner not initialized")
    return scanner


@router.get("/status")
async def scanner_status(request: Request):
    """Last scan report and whether a pass is running."""
    scanner = _get_scanner(request)
    report = scanner.last_report
    return {
        "running": scanner.is_scanning,
        "last_report": report.to_dict() if report else None,
    }


@router.post("/run")
async def run_scan(request: Request):
    """Run one pass now. 409 if a pass is already in progress."""
    scanner = _get_scanner(request)
    report = await scanner.scan_once()
    if report is None:
        raise HTTPException(status_code=409, detail="Scan already in progress")
    return report.to_dict()
