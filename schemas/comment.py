from pydantic import AliasChoices, Field
from typing import Optional
from datetime import datetime

from schemas.common import CamelModel, AuthorSummary


class CommentCreate(CamelModel):
    # older clients send "content"
    text: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        validation_alias=AliasChoices("text", "content"),
    )


class CommentUpdate(CommentCreate):
    pass


class CommentRead(CamelModel):
    id: int
    report_id: int
    user_id: int
    user: Optional[AuthorSummary] = None
    text: str
    timestamp: datetime
