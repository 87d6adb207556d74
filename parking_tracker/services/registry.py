# parking_tracker/services/registry.py
"""
Capacity-bounded spot registry.

Owns the ordered list of spots and the capacity bound. Every mutation checks
its preconditions first, so a failing call never leaves a half-applied change.
Spots handed out are frozen values; the registry is the only writer.

Route handlers run in FastAPI's threadpool, so each mutation and each
snapshot holds `lock` for its whole duration.
"""

import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Optional

from parking_tracker.config import settings
from parking_tracker.errors import (
    CapacityReached,
    EmptyRegistry,
    IndexOutOfRange,
    InvalidCapacity,
    InvalidVehicleNumber,
)
from parking_tracker.schemas.snapshot import RegistrySnapshot, SpotRecord
from parking_tracker.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class Spot:
    index: int
    occupied: bool = False
    vehicle_number: Optional[str] = None
    entry_time: Optional[datetime] = None

    @property
    def label(self) -> str:
        return f"Spot {self.index + 1}"


def parse_capacity(raw: Any, maximum: Optional[int] = None) -> int:
    """
    Parse user-supplied capacity. Raises InvalidCapacity for anything but a positive integer
    no larger than `maximum` (settings.MAX_CAPACITY when omitted, no upper bound when 0).
    """
    if isinstance(raw, bool):
        raise InvalidCapacity("Please enter a valid positive number for capacity.")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            raise InvalidCapacity("Please enter a valid positive number for capacity.") from None
    else:
        raise InvalidCapacity("Please enter a valid positive number for capacity.")
    if value < 1:
        raise InvalidCapacity("Please enter a valid positive number for capacity.")

    limit = settings.MAX_CAPACITY if maximum is None else maximum
    if limit and value > limit:
        raise InvalidCapacity(f"Capacity cannot exceed {limit} spots.")
    return value


def _clean_vehicle_number(raw: Optional[str]) -> str:
    return (raw or "").strip()


class ParkingRegistry:
    """The whole lot: ordered spots, capacity bound and a cached free-spot counter."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, clock: Callable[[], datetime] = datetime.utcnow) -> None:
        # Stored snapshots are trusted up to their own capacity; the upper bound applies to user input
        self._capacity = parse_capacity(capacity, maximum=0)
        self._spots: list[Spot] = []
        self._available = 0
        self._clock = clock
        self.lock = threading.RLock()

    # -------------------------
    # Constructors
    # -------------------------
    @classmethod
    def bootstrap(cls, capacity: int = DEFAULT_CAPACITY, **kwargs) -> "ParkingRegistry":
        """Fresh lot filled with `capacity` empty spots."""
        registry = cls(capacity, **kwargs)
        while len(registry._spots) < registry._capacity:
            registry._append_empty()
        return registry

    @classmethod
    def from_snapshot(cls, snapshot: RegistrySnapshot, **kwargs) -> "ParkingRegistry":
        registry = cls(snapshot.current_capacity, **kwargs)
        registry.restore(snapshot)
        return registry

    # -------------------------
    # Read access
    # -------------------------
    @property
    def spots(self) -> tuple[Spot, ...]:
        with self.lock:
            return tuple(self._spots)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total_spots(self) -> int:
        return len(self._spots)

    @property
    def available_count(self) -> int:
        return self._available

    @property
    def occupied_count(self) -> int:
        with self.lock:
            return len(self._spots) - self._available

    def get_spot(self, index: int) -> Spot:
        with self.lock:
            self._check_index(index)
            return self._spots[index]

    # -------------------------
    # Spot list / capacity
    # -------------------------
    def add_spot(self) -> Spot:
        with self.lock:
            if len(self._spots) >= self._capacity:
                raise CapacityReached("Maximum capacity reached. Cannot add more spots.")
            spot = self._append_empty()
            logger.debug(f"Added {spot.label} ({len(self._spots)}/{self._capacity})")
            return spot

    def remove_last_spot(self) -> Spot:
        with self.lock:
            if not self._spots:
                raise EmptyRegistry("No spots to remove.")
            spot = self._pop_last()
        if spot.occupied:
            logger.warning(f"Removed occupied {spot.label}; vehicle {spot.vehicle_number} discarded")
        return spot

    def set_capacity(self, raw: Any) -> list[Spot]:
        """
        Resize the lot to exactly `raw` spots and set the capacity bound.

        Shrinking truncates from the tail even when those spots are occupied;
        the discarded spots are returned (highest index first).
        """
        new_capacity = parse_capacity(raw)

        discarded: list[Spot] = []
        with self.lock:
            while len(self._spots) > new_capacity:
                discarded.append(self._pop_last())
            while len(self._spots) < new_capacity:
                self._append_empty()
            self._capacity = new_capacity
            available = self._available

        for spot in discarded:
            if spot.occupied:
                logger.warning(f"Capacity shrink discarded occupied {spot.label} (vehicle {spot.vehicle_number})")
        logger.info(f"Capacity set to {new_capacity}; {available} available")
        return discarded

    # -------------------------
    # Occupancy
    # -------------------------
    def occupy(self, index: int, vehicle_number: str) -> Spot:
        """
        Park `vehicle_number` in spot `index`.
        An already occupied spot only gets its vehicle number corrected; the entry time is kept.
        """
        with self.lock:
            self._check_index(index)
            cleaned = _clean_vehicle_number(vehicle_number)
            if not cleaned:
                raise InvalidVehicleNumber("Vehicle number must not be empty.")

            spot = self._spots[index]
            if spot.occupied:
                updated = replace(spot, vehicle_number=cleaned)
            else:
                updated = replace(spot, occupied=True, vehicle_number=cleaned, entry_time=self._clock())
                self._available -= 1
            self._spots[index] = updated
            return updated

    def vacate(self, index: int) -> Spot:
        with self.lock:
            self._check_index(index)
            spot = self._spots[index]
            if not spot.occupied:
                return spot
            updated = replace(spot, occupied=False, vehicle_number=None, entry_time=None)
            self._spots[index] = updated
            self._available += 1
            return updated

    def update_spot(self, index: int, raw_vehicle_number: Optional[str]) -> Spot:
        """Details-dialog semantics: blank text frees the spot, anything else parks that vehicle."""
        if _clean_vehicle_number(raw_vehicle_number):
            return self.occupy(index, raw_vehicle_number)
        return self.vacate(index)

    # -------------------------
    # Snapshot
    # -------------------------
    def snapshot(self) -> RegistrySnapshot:
        with self.lock:
            return RegistrySnapshot(
                spots=[
                    SpotRecord(
                        index=s.index,
                        is_occupied=s.occupied,
                        vehicle_number=s.vehicle_number,
                        entry_time=s.entry_time,
                    )
                    for s in self._spots
                ],
                total_spots=len(self._spots),
                available_spots=self._available,
                current_capacity=self._capacity,
            )

    def restore(self, snapshot: RegistrySnapshot) -> None:
        """Replace the whole in-memory state. The free-spot counter is recomputed, not trusted."""
        spots = [
            Spot(
                index=r.index,
                occupied=r.is_occupied,
                vehicle_number=r.vehicle_number,
                entry_time=r.entry_time,
            )
            for r in snapshot.spots
        ]
        available = sum(1 for s in spots if not s.occupied)
        if available != snapshot.available_spots:
            logger.warning(
                f"Snapshot availableSpots={snapshot.available_spots} disagrees with spots ({available}); using {available}"
            )
        with self.lock:
            self._spots = spots
            self._available = available
            self._capacity = snapshot.current_capacity

    # -------------------------
    # Internal
    # -------------------------
    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._spots):
            raise IndexOutOfRange(f"No spot at index {index} (lot has {len(self._spots)} spots)")

    def _append_empty(self) -> Spot:
        spot = Spot(index=len(self._spots))
        self._spots.append(spot)
        self._available += 1
        return spot

    def _pop_last(self) -> Spot:
        spot = self._spots.pop()
        if not spot.occupied:
            self._available -= 1
        return spot

    def __repr__(self):
        return f"<ParkingRegistry spots={len(self._spots)}/{self._capacity} available={self._available}>"
