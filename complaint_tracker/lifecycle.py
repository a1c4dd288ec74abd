"""Process-wide lifecycle state.

Tracks whether each store has finished schema initialization. API requests are
only served once every registered store is ready; see
``complaint_tracker.middleware.readiness``.
"""

import enum
import logging
import time

logger = logging.getLogger(__name__)


class ServiceState(str, enum.Enum):
    STARTING = "starting"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"


class Lifecycle:
    def __init__(self, store_names: tuple[str, ...]):
        self.store_names = store_names
        self.started_at = time.monotonic()
        self.state = ServiceState.STARTING
        self._ready: dict[str, bool] = {name: False for name in store_names}

    def mark_store_ready(self, name: str) -> None:
        if name not in self._ready:
            raise KeyError(f"Unknown store: {name}")
        self._ready[name] = True
        logger.info("Store '%s' ready", name)
        if self.state == ServiceState.STARTING and all(self._ready.values()):
            self.state = ServiceState.READY
            logger.info("All stores ready; accepting requests")

    def begin_shutdown(self) -> bool:
        """Move to SHUTTING_DOWN. Returns False if shutdown already began."""
        if self.state == ServiceState.SHUTTING_DOWN:
            return False
        self.state = ServiceState.SHUTTING_DOWN
        for name in self._ready:
            self._ready[name] = False
        return True

    def reset(self) -> None:
        self.state = ServiceState.STARTING
        self.started_at = time.monotonic()
        for name in self._ready:
            self._ready[name] = False

    def is_ready(self) -> bool:
        return self.state == ServiceState.READY

    def store_status(self) -> dict[str, str]:
        return {
            name: "connected" if ready else "disconnected"
            for name, ready in self._ready.items()
        }

    def uptime(self) -> float:
        return round(time.monotonic() - self.started_at, 3)


IDENTITY_STORE = "identity"
COMPLAINT_STORE = "complaints"

lifecycle = Lifecycle((IDENTITY_STORE, COMPLAINT_STORE))
