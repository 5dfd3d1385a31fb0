from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import get_current_user, require_admin
from models.user import User
from schemas.shelter import OccupancyUpdate, ShelterCreate, ShelterRead, ShelterUpdate
from services.shelter_service import ShelterService
from utils.response import ApiResponse, ok, ok_list

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ShelterRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_shelter(
        data: ShelterCreate,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    shelter = await ShelterService(db).create_shelter(data, admin)
    return ok(ShelterRead.model_validate(shelter))


@router.get("", response_model=ApiResponse[List[ShelterRead]], response_model_exclude_none=True)
async def list_shelters(
        is_active: Optional[bool] = Query(None, alias="isActive"),
        db: AsyncSession = Depends(get_db),
):
    shelters = await ShelterService(db).list_shelters(is_active=is_active)
    return ok_list(ShelterRead.model_validate(s) for s in shelters)


@router.get("/stats", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def shelter_stats(
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    return ok(await ShelterService(db).get_stats())


@router.get("/{shelter_id}", response_model=ApiResponse[ShelterRead], response_model_exclude_none=True)
async def get_shelter(shelter_id: int, db: AsyncSession = Depends(get_db)):
    shelter = await ShelterService(db).get_shelter(shelter_id)
    return ok(ShelterRead.model_validate(shelter))


@router.put("/{shelter_id}", response_model=ApiResponse[ShelterRead], response_model_exclude_none=True)
async def update_shelter(
        shelter_id: int,
        data: ShelterUpdate,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    shelter = await ShelterService(db).update_shelter(shelter_id, data, admin)
    return ok(ShelterRead.model_validate(shelter))


@router.delete("/{shelter_id}", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def delete_shelter(
        shelter_id: int,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    await ShelterService(db).delete_shelter(shelter_id, admin)
    return ok({}, message="Shelter deleted successfully")


@router.put("/{shelter_id}/occupancy", response_model=ApiResponse[ShelterRead], response_model_exclude_none=True)
async def update_occupancy(
        shelter_id: int,
        data: OccupancyUpdate,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    shelter = await ShelterService(db).update_occupancy(shelter_id, data.current_occupancy, admin)
    return ok(ShelterRead.model_validate(shelter), message="Occupancy updated successfully")
