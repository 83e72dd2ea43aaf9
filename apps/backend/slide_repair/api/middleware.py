"""
Request tracking middleware for the repair API
"""
import time
import uuid
from typing import Callable, Iterable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and reports its duration in the response headers.

    A caller-supplied X-Request-ID is reused so repair warnings can be
    correlated with the generator run that produced the slide.
    """

    def __init__(self, app: ASGIApp, log_requests: bool = True, quiet_paths: Iterable[str] = ("/health",)):
        super().__init__(app)
        self.log_requests = log_requests
        self.quiet_paths = tuple(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        should_log = self.log_requests and not request.url.path.endswith(self.quiet_paths)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logger.error(f"[HTTP] {route} failed after {elapsed_ms}ms ({request_id}): {e}")
            raise

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        if should_log:
            logger.info(f"[HTTP] {route} -> {response.status_code} in {elapsed_ms}ms ({request_id})")

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = str(elapsed_ms)
        return response
