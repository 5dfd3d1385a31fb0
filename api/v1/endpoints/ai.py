# app/api/v1/endpoints/ai.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import require_admin
from models.user import User
from schemas.ai import EmergencyMessageRequest, WarningMessageRequest
from services.ai_providers import TextGenerator
from services.ai_service import AIService, get_text_generator
from utils.response import ApiResponse, ok

router = APIRouter()


def get_ai_service(
        db: AsyncSession = Depends(get_db),
        generator: Optional[TextGenerator] = Depends(get_text_generator),
) -> AIService:
    return AIService(db, generator)


@router.post("/summary", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def generate_summary(
        admin: User = Depends(require_admin),
        service: AIService = Depends(get_ai_service),
):
    return ok(await service.generate_summary())


@router.post("/warning-message", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def generate_warning_message(
        data: WarningMessageRequest,
        admin: User = Depends(require_admin),
        service: AIService = Depends(get_ai_service),
):
    return ok(await service.generate_warning_message(data.area, data.severity, data.specific_details))


@router.get("/daily-summary", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def generate_daily_summary(
        admin: User = Depends(require_admin),
        service: AIService = Depends(get_ai_service),
):
    return ok(await service.generate_daily_summary())


@router.post("/emergency-message", response_model=ApiResponse[Dict[str, Any]], response_model_exclude_none=True)
async def generate_emergency_message(
        data: EmergencyMessageRequest,
        admin: User = Depends(require_admin),
        service: AIService = Depends(get_ai_service),
):
    return ok(await service.generate_emergency_message(data.area, data.severity, data.language))
