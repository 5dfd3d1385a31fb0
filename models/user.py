# app/models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func, Enum, JSON
from sqlalchemy.orm import relationship
import enum
from models.base import Base


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    # ---------- identity ----------
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # ---------- auth ----------
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.USER,
        nullable=False,
    )

    # ---------- profile ----------
    phone_number = Column(String(30), nullable=True)
    location = Column(JSON, nullable=True)  # {lat, lng, address}
    is_safe = Column(Boolean, default=True, nullable=False)

    # ---------- timestamps ----------
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # ========== relationships ==========

    reports = relationship(
        "FloodReport",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    sos_requests = relationship(
        "SOSRequest",
        foreign_keys="SOSRequest.user_id",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    comments = relationship(
        "Comment",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
