import math
from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

from learnhub.schemas.base import APISchema

DataType = TypeVar("DataType")

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)

class APIResponse(BaseModel, Generic[DataType]):
    """Generic API response model for consistent output."""
    success: bool = Field(True, description="Whether the request succeeded.")
    message: Optional[str] = Field(None, description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The actual data returned by the API, if any.")
    pagination: Optional[Pagination] = Field(None, description="Paging information for list endpoints.")

class ErrorDetail(APISchema):
    """Standardized error detail model."""
    code: str = Field(..., description="Error code for client handling")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")

class ErrorResponse(APISchema):
    """Standardized error response model."""
    success: bool = False
    message: str = Field(..., description="Human-readable error message")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: str = Field(..., description="ISO 8601 timestamp of error")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Unique request identifier for debugging")
