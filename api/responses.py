"""
Standardized API response models.
Provides consistent response formatting across all endpoints.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(default_factory=_now, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    timestamp: datetime = Field(default_factory=_now, description="Check timestamp")


# OpenAPI documentation for the errors every authenticated route can return
AUTH_ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing, expired or signed-out session"},
    403: {"model": ErrorResponse, "description": "Denied by an access policy"},
    404: {"model": ErrorResponse, "description": "Not found or not visible to the caller"},
    409: {"model": ErrorResponse, "description": "Integrity constraint violated"},
}


def error_response(code: str, message: str, details: Optional[dict] = None) -> dict:
    """Create a standardized error payload"""
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "timestamp": _now().isoformat(),
    }
