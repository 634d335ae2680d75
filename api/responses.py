"""
Standardized API response models.
Documents the error envelope produced by api.middleware.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    field: Optional[str] = Field(None, description="Field that caused the error")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Error timestamp"
    )


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    store_backend: str = Field(..., description="Configured document store")


# Error responses every user-scoped endpoint can return
USER_ERRORS = {
    401: {"model": ErrorResponse, "description": "Not signed in"},
    403: {"model": ErrorResponse, "description": "Store permission denied"},
    503: {"model": ErrorResponse, "description": "Store unavailable"},
}

WRITE_ERRORS = {
    **USER_ERRORS,
    400: {"model": ErrorResponse, "description": "Invalid form input"},
    502: {"model": ErrorResponse, "description": "Write failed"},
}
