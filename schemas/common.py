"""Common response schemas."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    cache: str = Field(..., description="Cache store state: up, down or disabled")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "ok",
                "service": "storefront",
                "version": "1.0.0",
                "cache": "up",
            }
        }


class MessageResponse(BaseModel):
    """Generic success message response."""

    success: bool = Field(True, description="Operation success status")
    message: str = Field(..., description="Success message")
    data: Optional[Any] = Field(None, description="Optional additional data")


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Additional error details")

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "not_found",
                "message": "Product not found",
                "details": None,
            }
        }
