# parking_tracker/models/snapshot_slot.py
"""
Durable key-value slot table.
One row per named slot; payload holds the JSON registry snapshot.
Overwritten after every successful registry mutation (last writer wins).
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from parking_tracker.database import Base


class SnapshotSlot(Base):
    __tablename__ = "snapshot_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_name = Column(String(100), unique=True, nullable=False, index=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<SnapshotSlot {self.slot_name} bytes={len(self.payload or '')}>"
