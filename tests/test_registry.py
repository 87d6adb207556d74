# tests/test_registry.py
"""Unit tests for the parking spot registry."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import time
import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from unittest.mock import patch
from parking_tracker.config import settings
from parking_tracker.errors import (
    CapacityReached, EmptyRegistry, IndexOutOfRange, InvalidCapacity, InvalidVehicleNumber,
)
from parking_tracker.services.registry import ParkingRegistry, Spot, parse_capacity

NOW = datetime(2026, 10, 19, 9, 30)


def make_registry(capacity=3, spots=None):
    registry = ParkingRegistry(capacity, clock=lambda: NOW)
    for _ in range(capacity if spots is None else spots):
        registry.add_spot()
    return registry


def free_spots(registry):
    return sum(1 for s in registry.spots if not s.occupied)


class TestBootstrap:
    def test_bootstrap_fills_capacity_with_empty_spots(self):
        registry = ParkingRegistry.bootstrap(4)
        assert registry.capacity == 4
        assert [s.index for s in registry.spots] == [0, 1, 2, 3]
        assert registry.available_count == 4
        assert not any(s.occupied for s in registry.spots)

    def test_bootstrap_default_capacity(self):
        assert ParkingRegistry.bootstrap().total_spots == 100

    def test_constructor_rejects_zero_capacity(self):
        with pytest.raises(InvalidCapacity):
            ParkingRegistry(0)

    def test_spot_label_is_one_based(self):
        assert Spot(index=0).label == "Spot 1"


class TestAddRemove:
    def test_add_spot_appends_next_index(self):
        registry = make_registry(capacity=3, spots=1)
        spot = registry.add_spot()
        assert spot.index == 1
        assert registry.total_spots == 2
        assert registry.available_count == 2

    def test_add_spot_at_capacity_fails_without_change(self):
        registry = make_registry(capacity=2)
        before = registry.snapshot()
        with pytest.raises(CapacityReached):
            registry.add_spot()
        assert registry.snapshot() == before
        assert registry.total_spots <= registry.capacity

    def test_remove_last_spot_on_empty_registry(self):
        registry = make_registry(capacity=2, spots=0)
        with pytest.raises(EmptyRegistry):
            registry.remove_last_spot()

    def test_remove_free_spot_decrements_available(self):
        registry = make_registry(capacity=3)
        removed = registry.remove_last_spot()
        assert removed.index == 2
        assert registry.available_count == 2

    def test_remove_occupied_spot_keeps_available_count(self):
        registry = make_registry(capacity=2)
        registry.occupy(0, "AAA-111")
        registry.occupy(1, "BBB-222")

        removed = registry.remove_last_spot()

        assert removed.vehicle_number == "BBB-222"
        assert registry.total_spots == 1
        assert registry.available_count == 0

    def test_indices_stay_contiguous_after_remove_and_add(self):
        registry = make_registry(capacity=3)
        registry.remove_last_spot()
        registry.remove_last_spot()
        registry.add_spot()
        assert [s.index for s in registry.spots] == [0, 1]


class TestOccupancy:
    def test_occupy_marks_spot_and_stamps_entry_time(self):
        registry = make_registry()
        spot = registry.occupy(1, "  ABC-123 ")
        assert spot.occupied
        assert spot.vehicle_number == "ABC-123"
        assert spot.entry_time == NOW
        assert registry.available_count == 2

    def test_occupy_blank_vehicle_number_rejected(self):
        registry = make_registry()
        with pytest.raises(InvalidVehicleNumber):
            registry.occupy(0, "   ")
        assert registry.available_count == 3

    @pytest.mark.parametrize("index", [-1, 3, 42])
    def test_occupy_out_of_range(self, index):
        registry = make_registry()
        with pytest.raises(IndexOutOfRange):
            registry.occupy(index, "ABC-123")

    def test_correcting_vehicle_number_keeps_entry_time(self):
        times = iter([NOW, NOW + timedelta(hours=2)])
        registry = ParkingRegistry.bootstrap(2, clock=lambda: next(times))
        registry.occupy(0, "ABC-123")
        spot = registry.occupy(0, "ABC-128")
        assert spot.vehicle_number == "ABC-128"
        assert spot.entry_time == NOW
        assert registry.available_count == 1

    def test_occupy_then_vacate_restores_free_spot(self):
        registry = make_registry()
        registry.occupy(2, "XYZ-789")
        spot = registry.vacate(2)
        assert not spot.occupied
        assert spot.vehicle_number is None
        assert spot.entry_time is None
        assert registry.available_count == 3

    def test_vacate_twice_is_noop(self):
        registry = make_registry()
        registry.occupy(0, "XYZ-789")
        registry.vacate(0)
        registry.vacate(0)
        assert registry.available_count == 3

    def test_vacate_out_of_range(self):
        with pytest.raises(IndexOutOfRange):
            make_registry().vacate(5)

    def test_update_spot_blank_text_vacates(self):
        registry = make_registry()
        registry.update_spot(0, "ABC-123")
        spot = registry.update_spot(0, "  ")
        assert not spot.occupied
        assert registry.available_count == 3

    def test_update_spot_none_on_free_spot_is_noop(self):
        registry = make_registry()
        assert registry.update_spot(0, None) == Spot(index=0)

    def test_returned_spots_are_read_only(self):
        registry = make_registry()
        with pytest.raises(Exception):
            registry.spots[0].occupied = True
        assert registry.available_count == 3


class TestSetCapacity:
    @pytest.mark.parametrize("capacity", [1, 3, 7, "4", " 10 "])
    def test_resize_matches_capacity_exactly(self, capacity):
        registry = make_registry(capacity=3)
        registry.set_capacity(capacity)
        expected = int(str(capacity).strip())
        assert registry.total_spots == expected == registry.capacity
        assert registry.available_count == free_spots(registry)

    @pytest.mark.parametrize("raw", [0, -3, "0", "abc", "", "2.5", None, True, 2.0])
    def test_invalid_capacity_leaves_state_unchanged(self, raw):
        registry = make_registry(capacity=3)
        registry.occupy(0, "ABC-123")
        before = registry.snapshot()
        with pytest.raises(InvalidCapacity):
            registry.set_capacity(raw)
        assert registry.snapshot() == before

    def test_shrink_discards_occupied_spots(self):
        registry = make_registry(capacity=3)
        registry.occupy(1, "ABC-123")
        assert registry.available_count == 2

        discarded = registry.set_capacity(1)

        assert [s.index for s in registry.spots] == [0]
        assert not registry.spots[0].occupied
        assert registry.available_count == 1
        assert [s.vehicle_number for s in discarded if s.occupied] == ["ABC-123"]

    def test_grow_below_capacity_fills_to_new_capacity(self):
        registry = make_registry(capacity=5, spots=2)
        registry.set_capacity(4)
        assert registry.total_spots == 4
        assert registry.capacity == 4

    def test_same_capacity_is_noop(self):
        registry = make_registry(capacity=3)
        before = registry.snapshot()
        assert registry.set_capacity(3) == []
        assert registry.snapshot() == before

    def test_parse_capacity_accepts_padded_text(self):
        assert parse_capacity(" 12 ") == 12


class TestSnapshot:
    def test_snapshot_reports_counts(self):
        registry = make_registry(capacity=4, spots=3)
        registry.occupy(0, "ABC-123")
        snap = registry.snapshot()
        assert snap.total_spots == 3
        assert snap.available_spots == 2
        assert snap.current_capacity == 4
        assert snap.spots[0].vehicle_number == "ABC-123"

    def test_restore_reproduces_registry(self):
        registry = make_registry(capacity=4, spots=3)
        registry.occupy(2, "ABC-123")

        restored = ParkingRegistry.from_snapshot(registry.snapshot())

        assert restored.spots == registry.spots
        assert restored.capacity == 4
        assert restored.available_count == 2

    def test_restore_recomputes_available_count(self):
        snap = make_registry(capacity=2).snapshot()
        snap.available_spots = 0
        registry = make_registry(capacity=9, spots=9)
        registry.restore(snap)
        assert registry.available_count == 2
        assert registry.capacity == 2


class TestLimits:
    def test_capacity_above_maximum_rejected(self):
        registry = make_registry(capacity=3)
        with pytest.raises(InvalidCapacity):
            registry.set_capacity(settings.MAX_CAPACITY + 1)
        assert registry.total_spots == 3

    def test_capacity_at_maximum_accepted(self):
        assert parse_capacity(str(settings.MAX_CAPACITY)) == settings.MAX_CAPACITY

    def test_explicit_maximum(self):
        with pytest.raises(InvalidCapacity):
            parse_capacity(11, maximum=10)

    def test_boolean_index_rejected(self):
        registry = make_registry()
        with pytest.raises(IndexOutOfRange):
            registry.get_spot(True)
        with pytest.raises(IndexOutOfRange):
            registry.occupy(False, "ABC-123")
        assert registry.available_count == 3


class TestConcurrency:
    def test_concurrent_adds_never_exceed_capacity(self):
        registry = make_registry(capacity=5, spots=4)
        append = ParkingRegistry._append_empty

        def slow_append(self):
            time.sleep(0.05)
            return append(self)

        outcomes = []
        with patch.object(ParkingRegistry, "_append_empty", slow_append):
            with ThreadPoolExecutor(max_workers=3) as pool:
                futures = [pool.submit(registry.add_spot) for _ in range(3)]
            for future in futures:
                try:
                    future.result()
                    outcomes.append("added")
                except CapacityReached:
                    outcomes.append("full")

        assert sorted(outcomes) == ["added", "full", "full"]
        assert registry.total_spots == registry.capacity == 5
        assert [s.index for s in registry.spots] == [0, 1, 2, 3, 4]
        assert registry.snapshot().total_spots == 5

    def test_concurrent_occupy_keeps_available_count(self):
        registry = make_registry(capacity=20)
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: registry.occupy(i % 10, f"CAR-{i}"), range(40)))
        assert registry.available_count == 10 == free_spots(registry)
