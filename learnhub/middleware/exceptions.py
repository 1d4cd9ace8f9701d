from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from learnhub.core.exceptions import AppException
from learnhub.schemas.response import ErrorResponse, ErrorDetail
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "VALIDATION_ERROR",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def _error_response(request: Request, status_code: int, message: str, code: str, details=None, headers=None) -> JSONResponse:
    error_response = ErrorResponse(
        message=message,
        error=ErrorDetail(code=code, details=details),
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=request.url.path,
        request_id=_request_id(request)
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_response.model_dump(by_alias=True)),
        headers=headers
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    logger.warning(f"[{request_id}] Validation error: {errors}", extra={"request_id": request_id})
    return _error_response(request, 400, "Request validation failed", "VALIDATION_ERROR", details={"errors": errors})

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = _request_id(request)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if isinstance(exc, AppException):
        code, details = exc.error_code, exc.details
    else:
        code, details = _get_error_code(exc.status_code), None
    logger.warning(f"[{request_id}] HTTP {exc.status_code}: {message}", extra={"request_id": request_id})
    return _error_response(request, exc.status_code, message, code, details=details, headers=getattr(exc, "headers", None))

async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return _error_response(
        request, 500, "An unexpected error occurred", "INTERNAL_SERVER_ERROR",
        details={"errorType": type(exc).__name__}
    )
