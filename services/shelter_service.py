# app/services/shelter_service.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from models.shelter import Shelter
from models.user import User
from core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

OCCUPANCY_ERROR = "Occupancy cannot exceed shelter capacity"
NEARLY_FULL_RATIO = 0.8


class ShelterService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_shelter(self, shelter_id: int) -> Shelter:
        result = await self.db.execute(
            select(Shelter)
            .where(Shelter.id == shelter_id)
            .execution_options(populate_existing=True)
        )
        shelter = result.scalar_one_or_none()
        if not shelter:
            raise NotFoundError("Shelter not found")
        return shelter

    async def list_shelters(self, is_active: Optional[bool] = None) -> List[Shelter]:
        query = select(Shelter)
        if is_active is not None:
            query = query.where(Shelter.is_active == is_active)

        result = await self.db.execute(
            query.order_by(Shelter.name.asc(), Shelter.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_shelter(self, shelter_data, admin: User) -> Shelter:
        data = shelter_data.model_dump()
        shelter = Shelter(**data)

        self.db.add(shelter)
        await self.db.commit()

        logger.info(f"Shelter {shelter.id} created by admin {admin.id}")
        return await self.get_shelter(shelter.id)

    async def update_shelter(self, shelter_id: int, update_data, admin: User) -> Shelter:
        shelter = await self.get_shelter(shelter_id)
        data = {
            key: value
            for key, value in update_data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        # the invariant is checked on the merged state
        capacity = data.get("capacity", shelter.capacity)
        occupancy = data.get("current_occupancy", shelter.current_occupancy)
        if occupancy > capacity:
            raise ValidationError(OCCUPANCY_ERROR)

        for key, value in data.items():
            setattr(shelter, key, value)

        await self.db.commit()
        return await self.get_shelter(shelter_id)

    async def delete_shelter(self, shelter_id: int, admin: User) -> None:
        shelter = await self.get_shelter(shelter_id)
        await self.db.delete(shelter)
        await self.db.commit()
        logger.info(f"Shelter {shelter_id} deleted by admin {admin.id}")

    async def update_occupancy(self, shelter_id: int, occupancy: int, admin: User) -> Shelter:
        """Single conditional write; nothing is persisted when it would exceed capacity."""
        result = await self.db.execute(
            update(Shelter)
            .where(
                Shelter.id == shelter_id,
                Shelter.capacity >= occupancy,
            )
            .values(current_occupancy=occupancy)
        )
        await self.db.commit()

        if result.rowcount == 0:
            # tells "missing" apart from "too many"
            await self.get_shelter(shelter_id)
            raise ValidationError(OCCUPANCY_ERROR)

        logger.info(f"Shelter {shelter_id} occupancy set to {occupancy} by admin {admin.id}")
        return await self.get_shelter(shelter_id)

    async def get_stats(self) -> Dict[str, Any]:
        """Aggregates over active shelters only."""
        shelters = await self.list_shelters(is_active=True)

        total_capacity = sum(s.capacity for s in shelters)
        total_occupied = sum(s.current_occupancy for s in shelters)
        occupancy_rate = round(total_occupied / total_capacity * 100, 1) if total_capacity else 0

        return {
            "totalShelters": len(shelters),
            "totalCapacity": total_capacity,
            "totalOccupied": total_occupied,
            "availableSpace": total_capacity - total_occupied,
            "occupancyRate": occupancy_rate,
            "fullShelters": sum(1 for s in shelters if s.current_occupancy >= s.capacity),
            "nearlyFullShelters": sum(
                1 for s in shelters
                if s.capacity * NEARLY_FULL_RATIO <= s.current_occupancy < s.capacity
            ),
        }
