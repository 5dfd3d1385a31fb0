from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import require_admin
from models.user import User
from schemas.admin import RecentActivities
from schemas.report import BulkReportIds
from services.report_service import ReportService
from services.statistics_service import StatisticsService
from utils.response import ApiResponse, ok

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def admin_stats(
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    return ok(await StatisticsService(db).get_admin_statistics())


@router.get("/activities", response_model=ApiResponse[RecentActivities], response_model_exclude_none=True)
async def recent_activities(
        limit: int = Query(10, ge=1, le=100),
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    activities = await StatisticsService(db).get_recent_activities(limit=limit)
    return ok(RecentActivities.model_validate(activities))


@router.post("/reports/bulk-verify", response_model=ApiResponse[Dict[str, int]], response_model_exclude_none=True)
async def bulk_verify_reports(
        data: BulkReportIds,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    modified = await ReportService(db).bulk_verify(data.report_ids, admin)
    return ok({"modifiedCount": modified}, message=f"{modified} reports verified successfully")


@router.delete("/reports/bulk-delete", response_model=ApiResponse[Dict[str, int]], response_model_exclude_none=True)
async def bulk_delete_reports(
        data: BulkReportIds,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    deleted = await ReportService(db).bulk_delete(data.report_ids, admin)
    return ok({"deletedCount": deleted}, message=f"{deleted} reports deleted successfully")
