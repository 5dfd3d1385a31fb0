# app/models/shelter.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func, JSON, CheckConstraint

from models.base import Base


class Shelter(Base):
    __tablename__ = "shelters"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)

    capacity = Column(Integer, nullable=False)
    current_occupancy = Column(Integer, default=0, nullable=False)

    location = Column(JSON, nullable=False)  # {lat, lng, address}
    phone = Column(String(30), nullable=False)
    facilities = Column(JSON, default=list)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_shelters_capacity_non_negative"),
        CheckConstraint("current_occupancy >= 0", name="ck_shelters_occupancy_non_negative"),
        CheckConstraint("current_occupancy <= capacity", name="ck_shelters_occupancy_within_capacity"),
    )

    @property
    def available_space(self) -> int:
        return max(0, (self.capacity or 0) - (self.current_occupancy or 0))
