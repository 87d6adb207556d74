# parking_tracker/schemas/snapshot.py
"""
Persisted registry snapshot.
Field aliases keep the camelCase JSON shape written by the browser version
(localStorage key "parkingData"), so old payloads stay readable.
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional


class SpotRecord(BaseModel):
    index: int = Field(ge=0)
    is_occupied: bool = Field(alias="isOccupied")
    vehicle_number: Optional[str] = Field(default=None, alias="vehicleNumber")
    entry_time: Optional[datetime] = Field(default=None, alias="entryTime")

    class Config:
        populate_by_name = True

    @field_validator("vehicle_number")
    @classmethod
    def blank_vehicle_is_none(cls, value):
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def check_occupancy(self):
        has_vehicle = self.vehicle_number is not None
        has_entry = self.entry_time is not None
        if self.is_occupied != has_vehicle or self.is_occupied != has_entry:
            raise ValueError(
                f"spot {self.index}: occupied={self.is_occupied} needs matching vehicle number and entry time"
            )
        return self


class RegistrySnapshot(BaseModel):
    # Browser payloads stored the list under "parkingSpots"
    spots: list[SpotRecord] = Field(validation_alias=AliasChoices("spots", "parkingSpots"))
    total_spots: int = Field(alias="totalSpots", ge=0)
    available_spots: int = Field(alias="availableSpots", ge=0)
    current_capacity: int = Field(alias="currentCapacity", ge=1)

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_registry_shape(self):
        for position, spot in enumerate(self.spots):
            if spot.index != position:
                raise ValueError(f"spot at position {position} has index {spot.index}")
        if len(self.spots) > self.current_capacity:
            raise ValueError(f"{len(self.spots)} spots exceed capacity {self.current_capacity}")
        if self.total_spots != len(self.spots):
            raise ValueError(f"totalSpots={self.total_spots} but {len(self.spots)} spots stored")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
