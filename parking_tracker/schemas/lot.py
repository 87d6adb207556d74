# parking_tracker/schemas/lot.py
from pydantic import BaseModel
from typing import Any

from parking_tracker.schemas.spot import SpotOut


class LotOut(BaseModel):
    capacity: int
    total_spots: int
    available_spots: int
    occupied_spots: int
    spots: list[SpotOut]

    class Config:
        from_attributes = True


class CapacityUpdate(BaseModel):
    capacity: Any    # raw user input, left uncoerced so the registry can reject bools and floats
