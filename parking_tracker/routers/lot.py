# parking_tracker/routers/lot.py
"""
Parking lot endpoints — the former browser UI actions.
Each mutating call runs one registry operation, then writes the snapshot.
Registry errors propagate to the ParkingError handler in main.py.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from parking_tracker.config import settings
from parking_tracker.database import get_db
from parking_tracker.schemas.lot import LotOut, CapacityUpdate
from parking_tracker.schemas.spot import SpotOut, SpotUpdate, OccupyRequest
from parking_tracker.services.persistence import clear_snapshot, persist
from parking_tracker.services.registry import ParkingRegistry
from parking_tracker.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def get_registry(request: Request) -> ParkingRegistry:
    """FastAPI dependency — the registry opened at startup."""
    return request.app.state.registry


def _counts(registry: ParkingRegistry) -> dict:
    return {
        "capacity": registry.capacity,
        "total_spots": registry.total_spots,
        "available_spots": registry.available_count,
    }


def _spot_out(spot) -> dict:
    return SpotOut.model_validate(spot).model_dump()


@router.get("/lot", response_model=LotOut, summary="Lot counts and every spot")
def get_lot(registry: ParkingRegistry = Depends(get_registry)):
    return LotOut(
        capacity=registry.capacity,
        total_spots=registry.total_spots,
        available_spots=registry.available_count,
        occupied_spots=registry.occupied_count,
        spots=[SpotOut.model_validate(s) for s in registry.spots],
    )


@router.post("/lot/spots", summary="Add one spot at the end of the lot")
def add_spot(registry: ParkingRegistry = Depends(get_registry), db: Session = Depends(get_db)):
    spot = registry.add_spot()
    return {"status": "added", "spot": _spot_out(spot), **_counts(registry),
            "persisted": persist(db, registry)}


@router.delete("/lot/spots/last", summary="Remove the highest-numbered spot")
def remove_last_spot(registry: ParkingRegistry = Depends(get_registry), db: Session = Depends(get_db)):
    """Removes the last spot even if a vehicle is parked there."""
    spot = registry.remove_last_spot()
    return {"status": "removed", "spot": _spot_out(spot), **_counts(registry),
            "persisted": persist(db, registry)}


@router.put("/lot/capacity", summary="Resize the lot to exactly N spots")
def set_capacity(body: CapacityUpdate, registry: ParkingRegistry = Depends(get_registry),
                 db: Session = Depends(get_db)):
    """
    Grows or shrinks the lot so it holds exactly `capacity` spots.
    Shrinking drops tail spots even when occupied; they are listed in `discarded_vehicles`.
    """
    discarded = registry.set_capacity(body.capacity)
    return {
        "status": "updated",
        **_counts(registry),
        "discarded_vehicles": [
            {"index": s.index, "vehicle_number": s.vehicle_number} for s in discarded if s.occupied
        ],
        "persisted": persist(db, registry),
    }


@router.post("/lot/reset", summary="Discard stored data and start a fresh lot")
def reset_lot(request: Request, db: Session = Depends(get_db)):
    """Drops the stored snapshot and bootstraps DEFAULT_CAPACITY empty spots."""
    clear_snapshot(db)
    registry = ParkingRegistry.bootstrap(settings.DEFAULT_CAPACITY)
    request.app.state.registry = registry
    logger.info(f"Lot reset to {registry.capacity} empty spots")
    return {"status": "reset", **_counts(registry), "persisted": persist(db, registry)}


@router.get("/lot/spots/{index}", response_model=SpotOut, summary="Spot details")
def get_spot(index: int, registry: ParkingRegistry = Depends(get_registry)):
    return SpotOut.model_validate(registry.get_spot(index))


@router.put("/lot/spots/{index}", summary="Set or clear the vehicle in a spot")
def update_spot(index: int, body: SpotUpdate, registry: ParkingRegistry = Depends(get_registry),
                db: Session = Depends(get_db)):
    """A blank vehicle number frees the spot; otherwise the vehicle is parked (or its number corrected)."""
    spot = registry.update_spot(index, body.vehicle_number)
    return {"status": "updated", "spot": _spot_out(spot), **_counts(registry),
            "persisted": persist(db, registry)}


@router.post("/lot/spots/{index}/occupy", summary="Park a vehicle in a spot")
def occupy_spot(index: int, body: OccupyRequest, registry: ParkingRegistry = Depends(get_registry),
                db: Session = Depends(get_db)):
    spot = registry.occupy(index, body.vehicle_number)
    logger.info(f"{spot.label} occupied by {spot.vehicle_number}")
    return {"status": "occupied", "spot": _spot_out(spot), **_counts(registry),
            "persisted": persist(db, registry)}


@router.post("/lot/spots/{index}/vacate", summary="Free a spot")
def vacate_spot(index: int, registry: ParkingRegistry = Depends(get_registry),
                db: Session = Depends(get_db)):
    spot = registry.vacate(index)
    logger.info(f"{spot.label} vacated")
    return {"status": "vacated", "spot": _spot_out(spot), **_counts(registry),
            "persisted": persist(db, registry)}
