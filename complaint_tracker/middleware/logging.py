"""Access log and request id propagation.

Each request gets an id, taken from an inbound ``X-Request-ID`` header when it
is well formed and generated otherwise. The id is echoed on every response,
including the 500 produced for an unhandled exception, and is part of the
JSON access line so client reports can be matched to server logs.
"""

import json
import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger("complaint_tracker.access")

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(inbound: str | None) -> str:
    if inbound and _REQUEST_ID_RE.fullmatch(inbound):
        return inbound
    return uuid.uuid4().hex[:8]


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error in %s %s (request_id=%s)",
                request.method, request.url.path, request_id,
            )
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})

        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - start_time) * 1000, 1),
            "client": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
        }
        logger.log(_level_for(response.status_code), json.dumps(log_data))

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
