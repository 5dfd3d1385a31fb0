# app/schemas/sos.py
from pydantic import model_validator
from typing import Optional
from datetime import datetime

from models.sos_request import SOSType, SOSStatus
from schemas.common import CamelModel, Location, UserSummary, reject_fields


class SOSCreate(CamelModel):
    type: SOSType
    location: Location
    description: Optional[str] = None


class SOSUpdate(CamelModel):
    """Editable fields only; status and volunteer move through accept/complete"""
    type: Optional[SOSType] = None
    location: Optional[Location] = None
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _no_lifecycle_fields(cls, data):
        return reject_fields(
            data,
            (
                "status", "assignedVolunteer", "assigned_volunteer",
                "assignedVolunteerId", "assigned_volunteer_id",
                "userId", "user_id", "timestamp",
            ),
            "use the accept/complete operations to change request status",
        )


class SOSRead(CamelModel):
    id: int
    user_id: int
    user: Optional[UserSummary] = None
    type: SOSType
    location: Location
    description: Optional[str] = None
    status: SOSStatus
    assigned_volunteer_id: Optional[int] = None
    assigned_volunteer: Optional[UserSummary] = None
    timestamp: datetime
