# app/services/ai_service.py
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from models.flood_report import FloodReport, WaterLevel
from core.exceptions import UpstreamError, ValidationError
from services.ai_providers import TextGenerator
from utils.dates import start_of_today

logger = logging.getLogger(__name__)

NOT_CONFIGURED = (
    "AI integration not configured. "
    "Please set AI_API_KEY and AI_PROVIDER in environment variables."
)
SUMMARY_REPORT_LIMIT = 50
SMS_LIMIT = 160


def get_text_generator(request: Request) -> Optional[TextGenerator]:
    """Generator chosen at startup; tests override this dependency."""
    return getattr(request.app.state, "text_generator", None)


class AIService:
    def __init__(self, db: AsyncSession, generator: Optional[TextGenerator] = None):
        self.db = db
        self.generator = generator

    @property
    def configured(self) -> bool:
        return self.generator is not None

    async def _generate(self, prompt: str, max_tokens: int, failure_message: str) -> str:
        try:
            return await self.generator.generate(prompt, max_tokens=max_tokens)
        except UpstreamError as e:
            logger.error(f"{failure_message}: {e.message}")
            raise type(e)(failure_message, details={"provider": e.message})

    # ---------- situation summary ----------
    async def generate_summary(self) -> Dict[str, Any]:
        result = await self.db.execute(
            select(FloodReport)
            .order_by(FloodReport.timestamp.desc(), FloodReport.id.desc())
            .limit(SUMMARY_REPORT_LIMIT)
        )
        reports = list(result.scalars().all())

        if not reports:
            return {"summary": "No flood reports available for analysis."}

        report_data = [
            {
                "location": r.location.get("address"),
                "waterLevel": r.water_level.value,
                "description": r.description,
                "timestamp": r.timestamp,
            }
            for r in reports
        ]

        prompt = (
            "Analyze the following flood situation reports from Sri Lanka and provide a "
            "comprehensive summary including:\n"
            "1. Overall severity assessment\n"
            "2. Most affected areas\n"
            "3. Recommended actions and warnings\n"
            "4. Key patterns or trends\n\n"
            f"Reports data:\n{json.dumps(report_data, indent=2, default=str)}\n\n"
            "Please provide a concise but informative summary suitable for emergency management."
        )

        if self.configured:
            summary = await self._generate(prompt, 500, "Failed to generate AI summary")
        else:
            summary = NOT_CONFIGURED

        return {
            "summary": summary,
            "reportsAnalyzed": len(reports),
            "aiConfigured": self.configured,
            "generatedAt": datetime.utcnow(),
        }

    # ---------- public warning ----------
    async def generate_warning_message(
            self, area: str, severity: str, specific_details: Optional[str] = None
    ) -> Dict[str, Any]:
        prompt = (
            f"Generate a clear and urgent warning message for residents of {area} "
            f"regarding a {severity} flood situation.\n"
            f"Additional context: {specific_details or 'None provided'}\n\n"
            "The message should:\n"
            "1. Be in English and suitable for public broadcast\n"
            "2. Include safety instructions\n"
            "3. Mention evacuation if necessary\n"
            "4. Provide emergency contact information template\n"
            "5. Be concise (under 200 words)"
        )

        if self.configured:
            message = await self._generate(prompt, 300, "Failed to generate warning message")
        else:
            message = NOT_CONFIGURED

        return {
            "message": message,
            "aiConfigured": self.configured,
            "generatedAt": datetime.utcnow(),
        }

    # ---------- today's situation ----------
    @staticmethod
    def overall_severity(counts: Dict[str, int]) -> str:
        for level in (WaterLevel.SEVERE, WaterLevel.HIGH, WaterLevel.MEDIUM):
            if counts.get(level.value):
                return level.value.capitalize()
        return "Low"

    @staticmethod
    def high_risk_areas(reports: List[FloodReport]) -> List[str]:
        """Distinct addresses of high/severe reports, newest first."""
        areas = []
        for r in reports:
            address = r.location.get("address")
            if r.water_level in (WaterLevel.HIGH, WaterLevel.SEVERE) and address not in areas:
                areas.append(address)
        return areas

    async def generate_daily_summary(self) -> Dict[str, Any]:
        result = await self.db.execute(
            select(FloodReport)
            .where(FloodReport.timestamp >= start_of_today())
            .order_by(FloodReport.timestamp.desc(), FloodReport.id.desc())
        )
        reports = list(result.scalars().all())

        if not reports:
            return {
                "summary": "No flood reports recorded today.",
                "reportsCount": 0,
                "highRiskAreas": [],
                "overallSeverity": "None",
            }

        counts = {level.value: 0 for level in WaterLevel}
        for r in reports:
            counts[r.water_level.value] += 1
        areas = self.high_risk_areas(reports)
        areas_text = ", ".join(areas) or "None"

        details = "\n".join(
            f"- {r.location.get('address')}: {r.water_level.value} level - {r.description}"
            for r in reports[:10]
        )
        prompt = (
            "You are a disaster management AI analyzing today's flood situation in Sri Lanka.\n\n"
            "Today's Flood Report Statistics:\n"
            f"- Total Reports: {len(reports)}\n"
            f"- Low: {counts['low']}\n"
            f"- Medium: {counts['medium']}\n"
            f"- High: {counts['high']}\n"
            f"- Severe: {counts['severe']}\n\n"
            f"High-Risk Areas: {areas_text}\n\n"
            f"Recent Report Details:\n{details}\n\n"
            "Please provide:\n"
            "1. Overall flood condition assessment (one sentence)\n"
            "2. High-risk areas and warnings (bullet points)\n"
            "3. Recommended immediate actions for authorities\n"
            "4. Safety advice for residents\n\n"
            "Keep it concise and actionable."
        )

        if self.configured:
            summary = await self._generate(prompt, 600, "Failed to generate daily summary")
        else:
            summary = (
                "Daily Summary (AI not configured):\n"
                f"Total reports: {len(reports)}\n"
                f"High-risk areas: {areas_text}"
            )

        return {
            "summary": summary,
            "statistics": counts,
            "highRiskAreas": areas,
            "reportsCount": len(reports),
            "overallSeverity": self.overall_severity(counts),
            "aiConfigured": self.configured,
            "generatedAt": datetime.utcnow(),
        }

    # ---------- SMS ----------
    async def generate_emergency_message(
            self, area: Optional[str], severity: Optional[str], language: str = "english"
    ) -> Dict[str, Any]:
        if not area or not severity:
            raise ValidationError("Area and severity are required")

        prompt = (
            f"Generate a SHORT emergency SMS message (max {SMS_LIMIT} characters) for:\n"
            f"Area: {area}\n"
            f"Flood Severity: {severity}\n"
            f"Language: {language}\n\n"
            "Requirements:\n"
            f"- Must be under {SMS_LIMIT} characters (SMS limit)\n"
            "- Clear and urgent\n"
            "- Include safety action\n"
            "- No special formatting\n\n"
            'Example format: "FLOOD ALERT: High water in [area]. '
            'Evacuate to higher ground. Call 119 for help."'
        )

        if self.configured:
            message = await self._generate(prompt, 100, "Failed to generate emergency message")
        else:
            message = f"FLOOD ALERT: {severity.upper()} flood in {area}. Evacuate immediately. Call 119."
        message = message.strip()

        return {
            "message": message,
            "characterCount": len(message),
            "area": area,
            "severity": severity,
            "aiConfigured": self.configured,
            "generatedAt": datetime.utcnow(),
        }
