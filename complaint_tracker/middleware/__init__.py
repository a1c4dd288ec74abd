from complaint_tracker.middleware.logging import RequestLoggingMiddleware
from complaint_tracker.middleware.readiness import ReadinessGateMiddleware

__all__ = ["RequestLoggingMiddleware", "ReadinessGateMiddleware"]
