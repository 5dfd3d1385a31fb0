# app/schemas/common.py
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = Field(..., min_length=1)


class UserLocation(BaseModel):
    """Location on a user profile; address may be missing"""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None


class UserSummary(CamelModel):
    """Owner/volunteer reference embedded in other entities"""
    id: int
    name: str
    email: str
    phone_number: Optional[str] = None


class AuthorSummary(CamelModel):
    id: int
    name: str


def reject_fields(data: Any, fields: Iterable[str], hint: str) -> Any:
    """Used by update schemas whose payload must not touch lifecycle/ownership fields."""
    if isinstance(data, dict):
        present = sorted(f for f in fields if f in data)
        if present:
            raise ValueError(f"{', '.join(present)} cannot be changed here; {hint}")
    return data
