"""
Error taxonomy for the Flood Alert API.

Services raise these instead of building HTTP responses themselves; the
handlers registered by ``register_exception_handlers`` turn every failure
into the standard envelope ``{"success": false, "message": ...}``.

Usage:
    from core.exceptions import NotFoundError, InvalidStateError

    if not sos:
        raise NotFoundError("SOS request not found")
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FloodAlertError(Exception):
    """Base exception for all Flood Alert API errors"""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"success": False, "message": self.message}
        if self.details:
            body["error"] = self.details
        return body


# ============================================
# Client errors
# ============================================

class ValidationError(FloodAlertError):
    """Malformed or missing input"""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(FloodAlertError):
    """Missing or invalid credentials"""

    status_code = 401
    code = "AUTH_FAILED"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class AuthorizationError(FloodAlertError):
    """Authenticated but not entitled to the operation"""

    status_code = 403
    code = "NOT_AUTHORIZED"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(FloodAlertError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(FloodAlertError):
    status_code = 409
    code = "CONFLICT"


class InvalidStateError(FloodAlertError):
    """Operation is illegal for the entity's current lifecycle state"""

    status_code = 400
    code = "INVALID_STATE"


# ============================================
# Upstream / infrastructure errors
# ============================================

class UpstreamError(FloodAlertError):
    """AI provider call failed or returned an unexpected shape"""

    status_code = 500
    code = "UPSTREAM_ERROR"


class UpstreamUnavailableError(UpstreamError):
    """AI provider timed out or could not be reached"""

    status_code = 503
    code = "UPSTREAM_UNAVAILABLE"


class DatabaseUnavailableError(FloodAlertError):
    status_code = 503
    code = "DATABASE_UNAVAILABLE"

    def __init__(self, message: str = "Database unavailable"):
        super().__init__(message)


# ============================================
# Handlers
# ============================================

def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:

    @app.exception_handler(FloodAlertError)
    async def flood_alert_error_handler(request: Request, exc: FloodAlertError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": _format_validation_errors(exc)},
        )

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def database_error_handler(request: Request, exc: Exception):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content=DatabaseUnavailableError().to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": str(exc) if debug else "Internal server error",
            },
        )
