"""
Health check routes.
Probes for container/load-balancer readiness.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from datetime import datetime, timezone
import time
import logging

from travel_assist.db.database import check_db, get_db
from travel_assist.core.rate_limiting import limiter, HEALTH_LIMIT
from travel_assist.services.catalog_service import current_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

# Track startup time for uptime reporting
_STARTUP_TIME = time.time()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
@limiter.limit(HEALTH_LIMIT)
async def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Check system health: catalog size, database connectivity, uptime.
    """
    catalog = current_catalog()
    db_ok = check_db(db)
    health = {
        "status": "healthy",
        "database": "available" if db_ok else "unavailable",
        "packages": len(catalog.packages) if catalog else 0,
        "hospitals": len(catalog.hospitals) if catalog else 0,
        "uptime_seconds": int(time.time() - _STARTUP_TIME),
        "timestamp": _now(),
    }
    if catalog is None or not db_ok:
        health["status"] = "degraded"
    return health


@router.get("/ready")
@limiter.limit(HEALTH_LIMIT)
async def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Ready only when the catalog is loaded and the database answers."""
    if current_catalog() is None:
        return {"ready": False, "error": "catalog not loaded", "timestamp": _now()}
    if not check_db(db):
        return {"ready": False, "error": "database unavailable", "timestamp": _now()}
    return {"ready": True, "timestamp": _now()}


@router.get("/live")
async def liveness_check():
    """Liveness probe. Returns 200 if service is running."""
    return {"alive": True, "uptime_seconds": int(time.time() - _STARTUP_TIME), "timestamp": _now()}
