"""
Response envelope shared by every endpoint.
"""

from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{success, data?, message?}``."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Failure envelope: ``{success: false, error}``."""
    success: bool = False
    error: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "Event is full"
            }
        }
    )


class Pagination(BaseModel):
    """Pagination metadata for list responses."""
    total: int
    page: int
    limit: int
    total_pages: int
