# app/services/user.py
import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from models.flood_report import FloodReport
from models.user import User, UserRole
from core.exceptions import NotFoundError, ValidationError
from services.file_service import FileService
from services.report_service import ReportService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- self-service ----------
    async def update_profile(self, user: User, update_data) -> User:
        data = update_data.model_dump(exclude_unset=True)

        for key, value in data.items():
            # explicit null on a required column is ignored
            if value is None and key in ("name", "is_safe"):
                continue
            setattr(user, key, value)

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def set_safety(self, user: User, is_safe: bool) -> User:
        user.is_safe = is_safe
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User {user.id} marked {'safe' if is_safe else 'needing help'}")
        return user

    # ---------- admin ----------
    async def list_users(self) -> List[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    async def safety_status(self) -> Dict[str, Any]:
        """Everyone's safety flag, people needing help first."""
        result = await self.db.execute(
            select(User).order_by(User.is_safe.asc(), User.name.asc())
        )
        users = list(result.scalars().all())
        safe = sum(1 for u in users if u.is_safe)

        return {
            "stats": {"total": len(users), "safe": safe, "needs_help": len(users) - safe},
            "users": users,
        }

    async def update_role(self, user_id: int, role: str) -> User:
        try:
            new_role = UserRole(role)
        except ValueError:
            raise ValidationError("Invalid role")

        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        user.role = new_role
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User {user_id} role changed to {new_role.value}")
        return user

    async def promote_by_email(self, email: str) -> User:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found")
        return await self.update_role(user.id, UserRole.ADMIN.value)

    async def delete_user(self, user_id: int, current_user: User) -> None:
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        if user.id == current_user.id:
            raise ValidationError("Cannot delete your own account")

        await self.remove_user(user)
        logger.info(f"Admin {current_user.id} deleted user {user_id}")

    async def remove_user(self, user: User) -> None:
        """Delete the account; owned rows cascade in the database, uploaded images are removed here."""
        image_urls = await ReportService(self.db).image_urls(FloodReport.user_id == user.id)

        await self.db.delete(user)
        await self.db.commit()

        FileService().delete_images(image_urls)
