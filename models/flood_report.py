# app/models/flood_report.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func, ForeignKey, Enum, JSON, Index
from sqlalchemy.orm import relationship
import enum

from models.base import Base


class WaterLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    SEVERE = "severe"


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"  # terminal


def _values(enum_cls):
    return [m.value for m in enum_cls]


class FloodReport(Base):
    __tablename__ = "flood_reports"

    id = Column(Integer, primary_key=True)

    # creator, set once at creation
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    location = Column(JSON, nullable=False)  # {lat, lng, address}
    water_level = Column(Enum(WaterLevel, name="water_level", values_callable=_values), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(500), nullable=True)

    status = Column(
        Enum(ReportStatus, name="report_status", values_callable=_values),
        default=ReportStatus.PENDING,
        nullable=False,
    )

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # relationships
    user = relationship("User", back_populates="reports", lazy="selectin")
    comments = relationship(
        "Comment",
        back_populates="report",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_flood_reports_timestamp", "timestamp"),
    )
