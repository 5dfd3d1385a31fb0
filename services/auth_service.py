import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from models.user import User, UserRole
from core.security import hash_password, verify_password, create_access_token
from core.config import settings
from core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from schemas.user import AuthResponse, UserRead
from services.user import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------
    # REGISTER
    # ------------------------------------------------
    async def register_user(self, user_data) -> User:
        email = user_data.email.lower()

        # duplicate check
        result = await self.db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            raise ConflictError("User already exists")

        # public registration never grants admin
        user = User(
            name=user_data.name,
            email=email,
            hashed_password=hash_password(user_data.password),
            phone_number=user_data.phone_number,
            location=user_data.location.model_dump() if user_data.location else None,
            role=UserRole.USER,
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User registered: {user.id}")
        return user

    # ------------------------------------------------
    # LOGIN
    # ------------------------------------------------
    async def authenticate_user(self, email: str, password: str) -> User:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationError("Invalid credentials")

        return user

    @staticmethod
    def build_auth_response(user: User) -> AuthResponse:
        token = create_access_token(subject=user.id)
        return AuthResponse(**UserRead.model_validate(user).model_dump(), token=token)

    # ------------------------------------------------
    # PASSWORD / ACCOUNT
    # ------------------------------------------------
    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("Please provide current and new password")

        if len(new_password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )

        # token alone is not enough here
        if not verify_password(current_password, user.hashed_password):
            logger.warning(f"Password change rejected for user {user.id}")
            raise AuthenticationError("Current password is incorrect")

        user.hashed_password = hash_password(new_password)
        self.db.add(user)
        await self.db.commit()
        logger.info(f"Password changed for user {user.id}")

    async def delete_account(self, user: User, password: str) -> None:
        """Self-service deletion; owned reports, SOS requests and comments go with it."""
        if not password:
            raise ValidationError("Please provide your password to confirm deletion")

        if not verify_password(password, user.hashed_password):
            logger.warning(f"Account deletion rejected for user {user.id}")
            raise AuthenticationError("Incorrect password")

        user_id = user.id
        await UserService(self.db).remove_user(user)
        logger.info(f"User {user_id} deleted own account")

    async def reset_password(self, email: str, new_password: str) -> User:
        """Operator reset from the command line; no current password required."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found")

        if len(new_password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )

        user.hashed_password = hash_password(new_password)
        await self.db.commit()
        return user
