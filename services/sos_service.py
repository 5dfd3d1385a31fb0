# app/services/sos_service.py
"""
SOS request lifecycle.

    pending --accept (admin)--> accepted --complete (admin | volunteer)--> completed

Transitions are compare-and-set updates guarded on the current status, so two
concurrent accepts cannot both succeed.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update

from models.sos_request import SOSRequest, SOSStatus, SOSType, SOS_TRANSITIONS
from models.user import User
from core.exceptions import AuthorizationError, InvalidStateError, NotFoundError
from core.permissions import ensure_owner_or_admin, is_owner_or_admin
from utils.dates import start_of_today

logger = logging.getLogger(__name__)


class SOSService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, sos_id: int) -> SOSRequest:
        result = await self.db.execute(
            select(SOSRequest)
            .where(SOSRequest.id == sos_id)
            .execution_options(populate_existing=True)
        )
        sos = result.scalar_one_or_none()
        if not sos:
            raise NotFoundError("SOS request not found")
        return sos

    # ---------- read ----------
    async def get_request(self, sos_id: int, user: User) -> SOSRequest:
        sos = await self._fetch(sos_id)
        if not is_owner_or_admin(user, sos.user_id):
            raise AuthorizationError("Not authorized to view this request")
        return sos

    async def list_requests(
            self,
            user: User,
            status: Optional[SOSStatus] = None,
            sos_type: Optional[SOSType] = None,
    ) -> List[SOSRequest]:
        query = select(SOSRequest)
        if status:
            query = query.where(SOSRequest.status == status)
        if sos_type:
            query = query.where(SOSRequest.type == sos_type)

        # regular users only see their own requests
        if not user.is_admin:
            query = query.where(SOSRequest.user_id == user.id)

        query = query.order_by(
            SOSRequest.timestamp.desc(), SOSRequest.id.desc()
        ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ---------- write ----------
    async def create_request(self, sos_data, user: User) -> SOSRequest:
        sos = SOSRequest(
            user_id=user.id,
            type=sos_data.type,
            location=sos_data.location.model_dump(),
            description=sos_data.description,
            status=SOSStatus.PENDING,
        )
        self.db.add(sos)
        await self.db.commit()

        logger.info(f"SOS {sos.id} ({sos.type.value}) raised by user {user.id}")
        return await self._fetch(sos.id)

    async def update_request(self, sos_id: int, update_data, user: User) -> SOSRequest:
        """Edits type/location/description only; status moves through accept/complete."""
        sos = await self._fetch(sos_id)
        ensure_owner_or_admin(user, sos.user_id, "update this request")

        for key, value in update_data.model_dump(exclude_unset=True).items():
            if value is None and key in ("type", "location"):
                continue
            setattr(sos, key, value)

        await self.db.commit()
        return await self._fetch(sos_id)

    async def delete_request(self, sos_id: int, user: User) -> None:
        sos = await self._fetch(sos_id)
        ensure_owner_or_admin(user, sos.user_id, "delete this request")

        await self.db.delete(sos)
        await self.db.commit()
        logger.info(f"SOS {sos_id} deleted by user {user.id}")

    # ---------- lifecycle ----------
    async def _advance(self, sos_id: int, current: SOSStatus, **values) -> bool:
        """Move to the next state only if the row is still in ``current``."""
        result = await self.db.execute(
            update(SOSRequest)
            .where(
                SOSRequest.id == sos_id,
                SOSRequest.status == current,
            )
            .values(status=SOS_TRANSITIONS[current], **values)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def accept_request(self, sos_id: int, admin: User) -> SOSRequest:
        await self._fetch(sos_id)

        if not await self._advance(sos_id, SOSStatus.PENDING, assigned_volunteer_id=admin.id):
            raise InvalidStateError("This request has already been processed", status_code=409)

        logger.info(f"SOS {sos_id} accepted by {admin.id}")
        return await self._fetch(sos_id)

    async def complete_request(self, sos_id: int, user: User) -> SOSRequest:
        sos = await self._fetch(sos_id)

        if sos.status != SOSStatus.ACCEPTED:
            raise InvalidStateError("Only accepted requests can be marked as completed")

        if not user.is_admin and sos.assigned_volunteer_id != user.id:
            raise AuthorizationError("Only the assigned volunteer or admin can complete this request")

        # lost a race with another completion
        if not await self._advance(sos_id, SOSStatus.ACCEPTED):
            raise InvalidStateError("Only accepted requests can be marked as completed")

        logger.info(f"SOS {sos_id} completed by {user.id}")
        return await self._fetch(sos_id)

    # ---------- stats ----------
    async def get_stats(self) -> Dict[str, Any]:
        async def count(*criteria) -> int:
            return await self.db.scalar(
                select(func.count(SOSRequest.id)).where(*criteria)
            ) or 0

        return {
            "totalRequests": await count(),
            "pendingRequests": await count(SOSRequest.status == SOSStatus.PENDING),
            "acceptedRequests": await count(SOSRequest.status == SOSStatus.ACCEPTED),
            "completedRequests": await count(SOSRequest.status == SOSStatus.COMPLETED),
            "todayRequests": await count(SOSRequest.timestamp >= start_of_today()),
            "typeCounts": {
                sos_type.value: await count(SOSRequest.type == sos_type)
                for sos_type in SOSType
            },
        }
