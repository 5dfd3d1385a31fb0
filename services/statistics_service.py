# app/services/statistics_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case
from typing import Dict, Any, List

from models.flood_report import FloodReport, ReportStatus, WaterLevel
from models.sos_request import SOSRequest, SOSStatus, SOSType
from models.shelter import Shelter
from models.user import User, UserRole
from utils.dates import start_of_today, days_ago


class StatisticsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- admin dashboard ----------
    async def get_admin_statistics(self) -> Dict[str, Any]:
        return {
            "users": await self._user_stats(),
            "reports": await self._report_stats(),
            "sosRequests": await self._sos_stats(),
            "shelters": await self._shelter_stats(),
        }

    async def _user_stats(self) -> Dict[str, Any]:
        today = start_of_today()
        row = (await self.db.execute(
            select(
                func.count(User.id).label("total"),
                func.count(case((User.role == UserRole.ADMIN, 1))).label("admins"),
                func.count(case((User.role == UserRole.USER, 1))).label("regular"),
                func.count(case((User.is_safe.is_(True), 1))).label("safe"),
                func.count(case((User.is_safe.is_(False), 1))).label("unsafe"),
                func.count(case((User.created_at >= today, 1))).label("new_today"),
            )
        )).one()

        return {
            "total": row.total,
            "admins": row.admins,
            "regular": row.regular,
            "safe": row.safe,
            "unsafe": row.unsafe,
            "newToday": row.new_today,
        }

    async def _report_stats(self) -> Dict[str, Any]:
        today = start_of_today()
        week_ago = days_ago(7)

        row = (await self.db.execute(
            select(
                func.count(FloodReport.id).label("total"),
                func.count(case((FloodReport.status == ReportStatus.VERIFIED, 1))).label("verified"),
                func.count(case((FloodReport.status == ReportStatus.PENDING, 1))).label("pending"),
                func.count(case((FloodReport.timestamp >= today, 1))).label("today"),
                func.count(case((FloodReport.timestamp >= week_ago, 1))).label("last_week"),
            )
        )).one()

        by_severity = await self._count_by(FloodReport.water_level, WaterLevel)

        # reports per day over the last week
        day = func.date(FloodReport.timestamp)
        daily = await self.db.execute(
            select(day.label("date"), func.count(FloodReport.id).label("count"))
            .where(FloodReport.timestamp >= week_ago)
            .group_by(day)
            .order_by(day)
        )

        return {
            "total": row.total,
            "verified": row.verified,
            "pending": row.pending,
            "bySeverity": by_severity,
            "today": row.today,
            "lastWeek": row.last_week,
            "byDay": [{"date": str(r.date), "count": r.count} for r in daily],
        }

    async def _sos_stats(self) -> Dict[str, Any]:
        today = start_of_today()
        week_ago = days_ago(7)

        row = (await self.db.execute(
            select(
                func.count(SOSRequest.id).label("total"),
                func.count(case((SOSRequest.status == SOSStatus.PENDING, 1))).label("pending"),
                func.count(case((SOSRequest.status == SOSStatus.ACCEPTED, 1))).label("accepted"),
                func.count(case((SOSRequest.status == SOSStatus.COMPLETED, 1))).label("completed"),
                func.count(case((SOSRequest.timestamp >= today, 1))).label("today"),
                func.count(case((SOSRequest.timestamp >= week_ago, 1))).label("last_week"),
            )
        )).one()

        return {
            "total": row.total,
            "pending": row.pending,
            "accepted": row.accepted,
            "completed": row.completed,
            "byType": await self._count_by(SOSRequest.type, SOSType),
            "today": row.today,
            "lastWeek": row.last_week,
        }

    async def _shelter_stats(self) -> Dict[str, Any]:
        row = (await self.db.execute(
            select(
                func.count(Shelter.id).label("total"),
                func.count(case((Shelter.is_active.is_(True), 1))).label("active"),
                func.coalesce(func.sum(Shelter.capacity), 0).label("capacity"),
                func.coalesce(func.sum(Shelter.current_occupancy), 0).label("occupancy"),
            )
        )).one()

        return {
            "total": row.total,
            "active": row.active,
            "totalCapacity": row.capacity,
            "totalOccupancy": row.occupancy,
            "availableSpace": row.capacity - row.occupancy,
        }

    async def _count_by(self, column, enum_cls) -> Dict[str, int]:
        """Counts per enum value, zero-filled."""
        result = await self.db.execute(
            select(column, func.count()).group_by(column)
        )
        counts = {member.value: 0 for member in enum_cls}
        for value, count in result.all():
            counts[enum_cls(value).value] = count
        return counts

    # ---------- recent activity ----------
    async def get_recent_activities(self, limit: int = 10) -> Dict[str, List[Any]]:
        reports = await self.db.execute(
            select(FloodReport)
            .order_by(FloodReport.timestamp.desc(), FloodReport.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        sos_requests = await self.db.execute(
            select(SOSRequest)
            .order_by(SOSRequest.timestamp.desc(), SOSRequest.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        users = await self.db.execute(
            select(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .limit(limit)
        )

        return {
            "recent_reports": list(reports.scalars().all()),
            "recent_sos_requests": list(sos_requests.scalars().all()),
            "recent_users": list(users.scalars().all()),
        }
