# app/schemas/shelter.py
from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime

from schemas.common import CamelModel, Location


class ShelterCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    capacity: int = Field(..., ge=0)
    current_occupancy: int = Field(0, ge=0)
    location: Location
    phone: str = Field(..., min_length=1)
    facilities: List[str] = []
    is_active: bool = True

    @model_validator(mode="after")
    def _occupancy_within_capacity(self):
        if self.current_occupancy > self.capacity:
            raise ValueError("Occupancy cannot exceed shelter capacity")
        return self


class ShelterUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    capacity: Optional[int] = Field(None, ge=0)
    current_occupancy: Optional[int] = Field(None, ge=0)
    location: Optional[Location] = None
    phone: Optional[str] = Field(None, min_length=1)
    facilities: Optional[List[str]] = None
    is_active: Optional[bool] = None


class OccupancyUpdate(CamelModel):
    current_occupancy: int = Field(..., ge=0)


class ShelterRead(CamelModel):
    id: int
    name: str
    capacity: int
    current_occupancy: int
    location: Location
    phone: str
    facilities: List[str] = []
    is_active: bool
    created_at: Optional[datetime] = None
