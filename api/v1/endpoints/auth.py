# app/api/v1/endpoints/auth.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import get_current_user, require_admin
from models.user import User
from schemas.user import (
    UserCreate, UserLogin, UserRead, AuthResponse, ProfileUpdate, SafetyUpdate,
    ChangePassword, DeleteAccount, RoleUpdate, SafetyStatusResponse,
)
from services.auth_service import AuthService
from services.user import UserService
from utils.response import ApiResponse, ok, ok_list

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    service = AuthService(db)
    user = await service.register_user(user_data)
    return ok(service.build_auth_response(user))


@router.post("/login", response_model=ApiResponse[AuthResponse], response_model_exclude_none=True)
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    service = AuthService(db)
    user = await service.authenticate_user(email=data.email, password=data.password)
    return ok(service.build_auth_response(user))


@router.get("/me", response_model=ApiResponse[UserRead], response_model_exclude_none=True)
async def get_me(user: User = Depends(get_current_user)):
    return ok(UserRead.model_validate(user))


@router.put("/profile", response_model=ApiResponse[UserRead], response_model_exclude_none=True)
async def update_profile(
        data: ProfileUpdate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_profile(user, data)
    return ok(UserRead.model_validate(user))


@router.put("/mark-safe", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def mark_safe(
        data: SafetyUpdate,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).set_safety(user, data.is_safe)
    return ok(
        {"isSafe": user.is_safe},
        message=f"You have been marked as {'safe' if user.is_safe else 'needing help'}",
    )


@router.put("/change-password", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def change_password(
        data: ChangePassword,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await AuthService(db).change_password(user, data.current_password, data.new_password)
    return ok(message="Password changed successfully")


@router.delete("/account", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def delete_own_account(
        data: Optional[DeleteAccount] = None,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await AuthService(db).delete_account(user, data.password if data else None)
    return ok(message="Account deleted successfully")


# ---------- admin ----------

@router.get("/safety-status", response_model=SafetyStatusResponse, response_model_exclude_none=True)
async def safety_status(
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    result = await UserService(db).safety_status()
    return SafetyStatusResponse(
        stats=result["stats"],
        data=[UserRead.model_validate(u) for u in result["users"]],
    )


@router.get("/users", response_model=ApiResponse[List[UserRead]], response_model_exclude_none=True)
async def list_users(
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    users = await UserService(db).list_users()
    return ok_list(UserRead.model_validate(u) for u in users)


@router.put("/users/{user_id}/role", response_model=ApiResponse[UserRead], response_model_exclude_none=True)
async def update_user_role(
        user_id: int,
        data: RoleUpdate,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_role(user_id, data.role)
    return ok(UserRead.model_validate(user), message=f"User role updated to {user.role.value}")


@router.delete("/users/{user_id}", response_model=ApiResponse[Any], response_model_exclude_none=True)
async def delete_user(
        user_id: int,
        admin: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    await UserService(db).delete_user(user_id, admin)
    return ok(message="User deleted successfully")
