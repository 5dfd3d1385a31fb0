from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import get_current_user, require_admin
from models.sos_request import SOSStatus, SOSType
from models.user import User
from schemas.sos import SOSCreate, SOSRead, SOSUpdate
from services.sos_service import SOSService
from utils.response import ApiResponse, ok, ok_list

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[SOSRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_sos_request(
        data: SOSCreate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    sos = await SOSService(db).create_request(data, user)
    return ok(SOSRead.model_validate(sos))


@router.get("", response_model=ApiResponse[List[SOSRead]], response_model_exclude_none=True)
async def list_sos_requests(
        status: Optional[SOSStatus] = None,
        sos_type: Optional[SOSType] = Query(None, alias="type"),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    requests = await SOSService(db).list_requests(user, status=status, sos_type=sos_type)
    return ok_list(SOSRead.model_validate(r) for r in requests)


@router.get("/stats", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def sos_stats(
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    return ok(await SOSService(db).get_stats())


@router.get("/{sos_id}", response_model=ApiResponse[SOSRead], response_model_exclude_none=True)
async def get_sos_request(
        sos_id: int,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    sos = await SOSService(db).get_request(sos_id, user)
    return ok(SOSRead.model_validate(sos))


@router.put("/{sos_id}", response_model=ApiResponse[SOSRead], response_model_exclude_none=True)
async def update_sos_request(
        sos_id: int,
        data: SOSUpdate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    sos = await SOSService(db).update_request(sos_id, data, user)
    return ok(SOSRead.model_validate(sos))


@router.delete("/{sos_id}", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def delete_sos_request(
        sos_id: int,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await SOSService(db).delete_request(sos_id, user)
    return ok({}, message="SOS request deleted successfully")


# ---------- lifecycle ----------

@router.put("/{sos_id}/accept", response_model=ApiResponse[SOSRead], response_model_exclude_none=True)
async def accept_sos_request(
        sos_id: int,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    sos = await SOSService(db).accept_request(sos_id, admin)
    return ok(SOSRead.model_validate(sos), message="SOS request accepted")


@router.put("/{sos_id}/complete", response_model=ApiResponse[SOSRead], response_model_exclude_none=True)
async def complete_sos_request(
        sos_id: int,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    sos = await SOSService(db).complete_request(sos_id, user)
    return ok(SOSRead.model_validate(sos), message="SOS request marked as completed")
