# app/schemas/ai.py
from pydantic import Field
from typing import Optional

from schemas.common import CamelModel


class WarningMessageRequest(CamelModel):
    area: str = Field(..., min_length=1)
    severity: str = Field(..., min_length=1)
    specific_details: Optional[str] = None


class EmergencyMessageRequest(CamelModel):
    area: Optional[str] = None
    severity: Optional[str] = None
    language: str = "english"
