# parking_tracker/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + in-memory registry.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from parking_tracker.database import get_db
from parking_tracker.routers.lot import get_registry
from parking_tracker.services.registry import ParkingRegistry
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), registry: ParkingRegistry = Depends(get_registry)):
    """
    Returns:
    - Backend status
    - Database connectivity (snapshot writes fail while this is degraded)
    - Registry counts
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "registry": {
            "capacity": registry.capacity,
            "total_spots": registry.total_spots,
            "available_spots": registry.available_count,
        },
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
