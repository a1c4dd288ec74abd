"""Fail fast with 503 on API routes until every store is initialized."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from complaint_tracker.lifecycle import Lifecycle


class ReadinessGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, lifecycle: Lifecycle, prefix: str = "/api"):
        super().__init__(app)
        self.lifecycle = lifecycle
        self.prefix = prefix

    def _gated(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")

    async def dispatch(self, request: Request, call_next) -> Response:
        if self._gated(request.url.path) and not self.lifecycle.is_ready():
            return JSONResponse(
                status_code=503,
                content={"error": "Service temporarily unavailable. Databases are initializing..."},
            )
        return await call_next(request)
