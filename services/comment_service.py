import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from models.comment import Comment
from models.flood_report import FloodReport
from models.user import User
from core.exceptions import NotFoundError
from core.permissions import ensure_owner_or_admin

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, comment_id: int) -> Comment:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        comment = result.scalar_one_or_none()
        if not comment:
            raise NotFoundError("Comment not found")
        return comment

    async def list_comments(self, report_id: int) -> List[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.report_id == report_id)
            .order_by(Comment.timestamp.desc(), Comment.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def add_comment(self, report_id: int, text: str, user: User) -> Comment:
        report = await self.db.get(FloodReport, report_id)
        if not report:
            raise NotFoundError("Flood report not found")

        comment = Comment(report_id=report_id, user_id=user.id, text=text)
        self.db.add(comment)
        await self.db.commit()
        return await self._fetch(comment.id)

    async def update_comment(self, comment_id: int, text: str, user: User) -> Comment:
        comment = await self._fetch(comment_id)
        ensure_owner_or_admin(user, comment.user_id, "update this comment")

        comment.text = text
        await self.db.commit()
        return await self._fetch(comment_id)

    async def delete_comment(self, comment_id: int, user: User) -> None:
        comment = await self._fetch(comment_id)
        ensure_owner_or_admin(user, comment.user_id, "delete this comment")

        await self.db.delete(comment)
        await self.db.commit()
        logger.info(f"Comment {comment_id} deleted by user {user.id}")
