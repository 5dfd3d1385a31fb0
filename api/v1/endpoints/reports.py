from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import get_current_user, require_admin
from models.flood_report import ReportStatus, WaterLevel
from models.user import User
from schemas.common import Location
from schemas.report import ReportCreate, ReportRead, ReportUpdate
from services.report_service import ReportService
from utils.response import ApiResponse, ok, ok_list

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ReportRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_report(
        lat: float = Form(..., alias="location[lat]", ge=-90, le=90),
        lng: float = Form(..., alias="location[lng]", ge=-180, le=180),
        address: str = Form(..., alias="location[address]", min_length=1),
        water_level: WaterLevel = Form(..., alias="waterLevel"),
        description: str = Form(..., min_length=1),
        image: Optional[UploadFile] = File(None),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    report_data = ReportCreate(
        location=Location(lat=lat, lng=lng, address=address),
        water_level=water_level,
        description=description,
    )
    report = await ReportService(db).create_report(report_data, user, image=image)
    return ok(ReportRead.model_validate(report))


@router.get("", response_model=ApiResponse[List[ReportRead]], response_model_exclude_none=True)
async def list_reports(
        status: Optional[ReportStatus] = None,
        water_level: Optional[WaterLevel] = Query(None, alias="waterLevel"),
        limit: int = Query(100, ge=1, le=1000),
        db: AsyncSession = Depends(get_db),
):
    reports = await ReportService(db).list_reports(status=status, water_level=water_level, limit=limit)
    return ok_list(ReportRead.model_validate(r) for r in reports)


@router.get("/stats", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def report_stats(
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    return ok(await ReportService(db).get_stats())


@router.get("/{report_id}", response_model=ApiResponse[ReportRead], response_model_exclude_none=True)
async def get_report(report_id: int, db: AsyncSession = Depends(get_db)):
    report = await ReportService(db).get_report(report_id)
    return ok(ReportRead.model_validate(report))


@router.put("/{report_id}", response_model=ApiResponse[ReportRead], response_model_exclude_none=True)
async def update_report(
        report_id: int,
        data: ReportUpdate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    report = await ReportService(db).update_report(report_id, data, user)
    return ok(ReportRead.model_validate(report))


@router.delete("/{report_id}", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def delete_report(
        report_id: int,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await ReportService(db).delete_report(report_id, user)
    return ok({}, message="Report deleted successfully")


@router.put("/{report_id}/verify", response_model=ApiResponse[ReportRead], response_model_exclude_none=True)
async def verify_report(
        report_id: int,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    report = await ReportService(db).verify_report(report_id, admin)
    return ok(ReportRead.model_validate(report), message="Report verified successfully")
