# utils/response.py
from typing import TypeVar, Generic, Optional

from pydantic import BaseModel

T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    count: Optional[int] = None


def ok(data=None, message: Optional[str] = None, count: Optional[int] = None) -> dict:
    return {"success": True, "data": data, "message": message, "count": count}


def ok_list(items, message: Optional[str] = None) -> dict:
    items = list(items)
    return ok(items, message=message, count=len(items))
