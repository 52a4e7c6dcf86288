"""Health check endpoints."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from movebridge.config import get_settings
from movebridge.ledger.database import ping_db

logger = logging.getLogger(__name__)

router = APIRouter()

_started_at = time.monotonic()


def _uptime_sec() -> int:
    return round(time.monotonic() - _started_at)


@router.get("/health")
async def health_check():
    """Liveness: cheap and fast, no dependency checks."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": "movebridge",
        "uptimeSec": _uptime_sec(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "env": settings.environment,
    }


@router.get("/health/ready")
async def readiness():
    """Readiness: checks the database, timeboxed so the probe never hangs."""
    settings = get_settings()
    try:
        await asyncio.wait_for(ping_db(), timeout=settings.ledger_timeout_seconds)
        db_ok = True
    except Exception as e:
        logger.warning(f"Readiness check failed: {e!r}")
        db_ok = False

    payload = {
        "status": "ok" if db_ok else "degraded",
        "dependencies": {"db": "ok" if db_ok else "down"},
        "uptimeSec": _uptime_sec(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(payload, status_code=200 if db_ok else 503)


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with configuration info."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": "movebridge",
        "version": "0.1.0",
        "uptimeSec": _uptime_sec(),
        "config": settings.get_safe_dict(),
    }
