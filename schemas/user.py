from pydantic import ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime

from models.user import UserRole
from schemas.common import CamelModel, UserLocation


# ---------- registration / login ----------
class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone_number: Optional[str] = None
    location: Optional[UserLocation] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Nimal Perera",
            "email": "nimal@example.com",
            "password": "StrongPass123",
            "phoneNumber": "+94771234567",
        }
    })


class UserLogin(CamelModel):
    email: EmailStr
    password: str


# ---------- output ----------
class UserRead(CamelModel):
    id: int
    name: str
    email: str
    role: UserRole
    phone_number: Optional[str] = None
    location: Optional[UserLocation] = None
    is_safe: bool
    created_at: Optional[datetime] = None


class AuthResponse(UserRead):
    token: str


class SafetyStatusStats(CamelModel):
    total: int
    safe: int
    needs_help: int


class SafetyStatusResponse(CamelModel):
    success: bool = True
    stats: SafetyStatusStats
    data: List[UserRead]


# ---------- self-service ----------
class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = None
    location: Optional[UserLocation] = None
    is_safe: Optional[bool] = None


class SafetyUpdate(CamelModel):
    is_safe: bool


class ChangePassword(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class DeleteAccount(CamelModel):
    password: Optional[str] = None


# ---------- admin ----------
class RoleUpdate(CamelModel):
    role: str
