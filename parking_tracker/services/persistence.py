# parking_tracker/services/persistence.py
"""
Persistence bridge between the in-memory registry and the snapshot slot table.
Written after every successful mutation, read once at startup.
Writes are best-effort: a failed write never undoes the in-memory mutation.
"""

from datetime import datetime
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parking_tracker.config import settings
from parking_tracker.errors import PersistenceUnavailable
from parking_tracker.models.snapshot_slot import SnapshotSlot
from parking_tracker.schemas.snapshot import RegistrySnapshot
from parking_tracker.services.registry import ParkingRegistry
from parking_tracker.utils.logger import get_logger

logger = get_logger(__name__)


def _slot_name(slot: Optional[str]) -> str:
    return slot or settings.SNAPSHOT_SLOT


def save_snapshot(db: Session, registry: ParkingRegistry, slot: str = None) -> None:
    """
    Overwrite the slot with the full registry snapshot. Raises PersistenceUnavailable when
    the snapshot cannot be built or the DB write fails.
    The registry lock is held across snapshot and commit, so the last commit always carries the newest state.
    """
    name = _slot_name(slot)
    with registry.lock:
        try:
            payload = registry.snapshot().to_json()
        except ValueError as e:
            logger.error(f"Snapshot of {registry!r} could not be built: {e}")
            raise PersistenceUnavailable(f"Could not serialize parking data: {e}") from e
        try:
            row = db.query(SnapshotSlot).filter(SnapshotSlot.slot_name == name).first()
            if row is None:
                row = SnapshotSlot(slot_name=name, payload=payload, updated_at=datetime.utcnow())
                db.add(row)
            else:
                row.payload = payload
                row.updated_at = datetime.utcnow()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Snapshot write to '{name}' failed: {e}")
            raise PersistenceUnavailable(f"Could not save parking data: {e}") from e
    logger.debug(f"Snapshot saved to '{name}' ({len(payload)} bytes)")


def persist(db: Session, registry: ParkingRegistry, slot: str = None) -> bool:
    """Save after a mutation. Returns False instead of raising so the applied mutation still reports success."""
    try:
        save_snapshot(db, registry, slot)
    except PersistenceUnavailable:
        return False
    return True


def load_snapshot(db: Session, slot: str = None) -> Optional[RegistrySnapshot]:
    """
    Read the slot. Returns None if the slot is absent or its payload is malformed
    (bad JSON, wrong shape, or a snapshot that breaks the registry invariants).
    """
    name = _slot_name(slot)
    try:
        row = db.query(SnapshotSlot).filter(SnapshotSlot.slot_name == name).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Snapshot read from '{name}' failed: {e}")
        raise PersistenceUnavailable(f"Could not load parking data: {e}") from e

    if row is None:
        return None
    try:
        return RegistrySnapshot.model_validate_json(row.payload)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed snapshot in '{name}': {e.error_count()} error(s)")
        return None


def clear_snapshot(db: Session, slot: str = None) -> bool:
    """Delete the slot. Returns True if a stored snapshot was removed."""
    name = _slot_name(slot)
    try:
        deleted = db.query(SnapshotSlot).filter(SnapshotSlot.slot_name == name).delete()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceUnavailable(f"Could not clear parking data: {e}") from e
    return bool(deleted)


def open_registry(db: Session, default_capacity: int = None, slot: str = None) -> ParkingRegistry:
    """Restore the registry from the slot, or bootstrap a fresh lot at the default capacity."""
    capacity = default_capacity or settings.DEFAULT_CAPACITY
    try:
        snapshot = load_snapshot(db, slot)
    except PersistenceUnavailable:
        logger.warning(f"Snapshot storage unavailable; starting with {capacity} empty spots (not saved)")
        return ParkingRegistry.bootstrap(capacity)

    if snapshot is not None:
        registry = ParkingRegistry.from_snapshot(snapshot)
        logger.info(f"Restored {registry.total_spots} spots ({registry.available_count} available) "
                    f"from '{_slot_name(slot)}'")
        return registry

    registry = ParkingRegistry.bootstrap(capacity)
    persist(db, registry, slot)
    logger.info(f"Bootstrapped new lot with {capacity} spots")
    return registry
