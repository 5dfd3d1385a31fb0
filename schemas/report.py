# app/schemas/report.py
from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime

from models.flood_report import WaterLevel, ReportStatus
from schemas.common import CamelModel, Location, UserSummary, reject_fields


class ReportCreate(CamelModel):
    location: Location
    water_level: WaterLevel
    description: str = Field(..., min_length=1)


class ReportUpdate(CamelModel):
    """Editable fields only; status moves through the verify operation"""
    location: Optional[Location] = None
    water_level: Optional[WaterLevel] = None
    description: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _no_lifecycle_fields(cls, data):
        return reject_fields(
            data,
            ("status", "userId", "user_id", "timestamp", "imageUrl", "image_url"),
            "status moves through verify and the image is set on upload",
        )


class ReportRead(CamelModel):
    id: int
    user_id: int
    user: Optional[UserSummary] = None
    location: Location
    water_level: WaterLevel
    description: str
    image_url: Optional[str] = None
    status: ReportStatus
    timestamp: datetime


class BulkReportIds(CamelModel):
    report_ids: Optional[List[int]] = None
