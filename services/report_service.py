# app/services/report_service.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update, delete

from models.flood_report import FloodReport, ReportStatus, WaterLevel
from models.user import User
from core.exceptions import NotFoundError, ValidationError
from core.permissions import ensure_owner_or_admin
from services.file_service import FileService
from utils.dates import start_of_today

logger = logging.getLogger(__name__)

# columns that may not be cleared by an update
REQUIRED_FIELDS = ("location", "water_level", "description")


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- read ----------
    async def get_report(self, report_id: int) -> FloodReport:
        result = await self.db.execute(
            select(FloodReport)
            .where(FloodReport.id == report_id)
            .execution_options(populate_existing=True)
        )
        report = result.scalar_one_or_none()
        if not report:
            raise NotFoundError("Report not found")
        return report

    async def list_reports(
            self,
            status: Optional[ReportStatus] = None,
            water_level: Optional[WaterLevel] = None,
            limit: int = 100,
    ) -> List[FloodReport]:
        query = select(FloodReport)
        if status:
            query = query.where(FloodReport.status == status)
        if water_level:
            query = query.where(FloodReport.water_level == water_level)

        query = (
            query.order_by(FloodReport.timestamp.desc(), FloodReport.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ---------- write ----------
    async def create_report(
            self,
            report_data,
            user: User,
            image: Optional[UploadFile] = None,
    ) -> FloodReport:
        image_url = None
        if image is not None and image.filename:
            image_url = await FileService().save_image(image, folder="reports")

        report = FloodReport(
            user_id=user.id,
            location=report_data.location.model_dump(),
            water_level=report_data.water_level,
            description=report_data.description,
            image_url=image_url,
            status=ReportStatus.PENDING,
        )
        self.db.add(report)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            FileService().delete_image(image_url)
            raise

        logger.info(f"Report {report.id} created by user {user.id}")
        return await self.get_report(report.id)

    async def update_report(self, report_id: int, update_data, user: User) -> FloodReport:
        report = await self.get_report(report_id)
        ensure_owner_or_admin(user, report.user_id, "update this report")

        for key, value in update_data.model_dump(exclude_unset=True).items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            setattr(report, key, value)

        await self.db.commit()
        return await self.get_report(report_id)

    async def delete_report(self, report_id: int, user: User) -> None:
        report = await self.get_report(report_id)
        ensure_owner_or_admin(user, report.user_id, "delete this report")

        image_url = report.image_url
        await self.db.delete(report)
        await self.db.commit()

        FileService().delete_image(image_url)
        logger.info(f"Report {report_id} deleted by user {user.id}")

    async def verify_report(self, report_id: int, admin: User) -> FloodReport:
        """pending -> verified; verifying a verified report changes nothing."""
        await self.get_report(report_id)

        result = await self.db.execute(
            update(FloodReport)
            .where(
                FloodReport.id == report_id,
                FloodReport.status == ReportStatus.PENDING,
            )
            .values(status=ReportStatus.VERIFIED)
        )
        await self.db.commit()

        if result.rowcount:
            logger.info(f"Report {report_id} verified by admin {admin.id}")
        return await self.get_report(report_id)

    # ---------- bulk (admin) ----------
    @staticmethod
    def _require_ids(report_ids: Optional[List[int]]) -> List[int]:
        if not report_ids:
            raise ValidationError("Please provide an array of report IDs")
        return list(set(report_ids))

    async def bulk_verify(self, report_ids: Optional[List[int]], admin: User) -> int:
        """Unknown ids are skipped; only reports that actually changed are counted."""
        ids = self._require_ids(report_ids)

        result = await self.db.execute(
            update(FloodReport)
            .where(
                FloodReport.id.in_(ids),
                FloodReport.status != ReportStatus.VERIFIED,
            )
            .values(status=ReportStatus.VERIFIED)
        )
        await self.db.commit()

        logger.info(f"Admin {admin.id} bulk-verified {result.rowcount} reports")
        return result.rowcount

    async def bulk_delete(self, report_ids: Optional[List[int]], admin: User) -> int:
        ids = self._require_ids(report_ids)
        image_urls = await self.image_urls(FloodReport.id.in_(ids))

        result = await self.db.execute(
            delete(FloodReport).where(FloodReport.id.in_(ids))
        )
        await self.db.commit()

        FileService().delete_images(image_urls)

        logger.info(f"Admin {admin.id} bulk-deleted {result.rowcount} reports")
        return result.rowcount

    async def image_urls(self, *criteria) -> List[str]:
        """Stored image paths of matching reports, read before the rows go away."""
        result = await self.db.execute(
            select(FloodReport.image_url).where(FloodReport.image_url.is_not(None), *criteria)
        )
        return list(result.scalars().all())

    # ---------- stats ----------
    async def get_stats(self) -> Dict[str, Any]:
        async def count(*criteria) -> int:
            return await self.db.scalar(
                select(func.count(FloodReport.id)).where(*criteria)
            ) or 0

        return {
            "totalReports": await count(),
            "verifiedReports": await count(FloodReport.status == ReportStatus.VERIFIED),
            "pendingReports": await count(FloodReport.status == ReportStatus.PENDING),
            "todayReports": await count(FloodReport.timestamp >= start_of_today()),
            "severityCounts": {
                level.value: await count(FloodReport.water_level == level)
                for level in WaterLevel
            },
        }
