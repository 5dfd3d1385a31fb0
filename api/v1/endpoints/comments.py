from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import get_current_user
from models.user import User
from schemas.comment import CommentCreate, CommentRead, CommentUpdate
from services.comment_service import CommentService
from utils.response import ApiResponse, ok, ok_list

router = APIRouter()


@router.get("/{report_id}", response_model=ApiResponse[List[CommentRead]], response_model_exclude_none=True)
async def list_comments(report_id: int, db: AsyncSession = Depends(get_db)):
    comments = await CommentService(db).list_comments(report_id)
    return ok_list(CommentRead.model_validate(c) for c in comments)


@router.post(
    "/{report_id}",
    response_model=ApiResponse[CommentRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
        report_id: int,
        data: CommentCreate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).add_comment(report_id, data.text, user)
    return ok(CommentRead.model_validate(comment))


# path parameter is the comment id from here on
@router.put("/{comment_id}", response_model=ApiResponse[CommentRead], response_model_exclude_none=True)
async def update_comment(
        comment_id: int,
        data: CommentUpdate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).update_comment(comment_id, data.text, user)
    return ok(CommentRead.model_validate(comment))


@router.delete("/{comment_id}", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def delete_comment(
        comment_id: int,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await CommentService(db).delete_comment(comment_id, user)
    return ok(message="Comment deleted successfully")
