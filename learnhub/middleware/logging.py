import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id (reusing the caller's ``X-Request-ID``)
    and logs one line per request with its outcome and duration."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        context = {"request_id": request_id, "method": request.method, "path": request.url.path}
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            context["duration_ms"] = _elapsed_ms(started)
            logger.error(
                f"[{request_id}] {context['method']} {context['path']} failed after {context['duration_ms']}ms: {exc}",
                extra=context,
            )
            raise

        context["duration_ms"] = _elapsed_ms(started)
        context["status_code"] = response.status_code
        level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            level,
            f"[{request_id}] {context['method']} {context['path']} -> {response.status_code} ({context['duration_ms']}ms)",
            extra=context,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
