# parking_tracker/schemas/spot.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SpotOut(BaseModel):
    index: int
    label: str
    occupied: bool
    vehicle_number: Optional[str]
    entry_time: Optional[datetime]

    class Config:
        from_attributes = True


class SpotUpdate(BaseModel):
    vehicle_number: Optional[str] = None   # blank or missing vacates the spot


class OccupyRequest(BaseModel):
    vehicle_number: str
