from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppException(HTTPException):
    """HTTPException carrying a stable error code for the response envelope."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None, details: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)
        self.details = details


class ValidationFailed(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_detail = "Invalid request"


class Unauthenticated(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(detail, details, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "You do not have permission to perform this action."


class NotFound(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_detail = "Resource not found"


class Conflict(AppException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "Resource already exists"
