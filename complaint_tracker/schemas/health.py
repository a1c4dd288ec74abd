from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness and per-store readiness.

    ``databases`` is keyed by store: ``identity`` holds users and login
    sessions (the relational account store), ``complaints`` holds complaints,
    their logs and attachments (the complaint document store). Each value is
    ``connected`` or ``disconnected``.
    """

    status: str
    timestamp: datetime
    databases: dict[str, str]
    uptime: float
