# Parking Tracker — Database Models
# Import all models here for SQLAlchemy discovery

from parking_tracker.models.snapshot_slot import SnapshotSlot   # noqa
