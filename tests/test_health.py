import logging
from unittest.mock import AsyncMock, patch

import pytest

from complaint_tracker.lifecycle import COMPLAINT_STORE, IDENTITY_STORE, Lifecycle, ServiceState, lifecycle


@pytest.mark.asyncio
async def test_health_endpoint_returns_200(client):
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_endpoint_has_required_fields(client):
    data = (await client.get("/health")).json()
    assert data["status"] == "ok"
    assert "timestamp" in data
    assert data["uptime"] >= 0
    assert data["databases"] == {IDENTITY_STORE: "connected", COMPLAINT_STORE: "connected"}


@pytest.mark.asyncio
async def test_health_is_served_while_starting(client):
    lifecycle.reset()

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["databases"] == {
        IDENTITY_STORE: "disconnected",
        COMPLAINT_STORE: "disconnected",
    }


@pytest.mark.asyncio
async def test_api_gated_until_all_stores_ready(client):
    lifecycle.reset()
    lifecycle.mark_store_ready(IDENTITY_STORE)

    response = await client.post("/api/auth/login", json={"username": "a", "password": "b"})

    assert response.status_code == 503
    assert response.json() == {
        "error": "Service temporarily unavailable. Databases are initializing..."
    }


@pytest.mark.asyncio
async def test_unknown_route(client):
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}


@pytest.mark.asyncio
async def test_request_id_header(client):
    response = await client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 8


class TestLifecycle:
    def test_ready_only_after_every_store(self):
        state = Lifecycle(("a", "b"))
        state.mark_store_ready("a")
        assert not state.is_ready()
        state.mark_store_ready("b")
        assert state.is_ready()
        assert state.state == ServiceState.READY

    def test_unknown_store(self):
        with pytest.raises(KeyError):
            Lifecycle(("a",)).mark_store_ready("b")

    def test_shutdown_runs_once(self):
        state = Lifecycle(("a",))
        state.mark_store_ready("a")
        assert state.begin_shutdown() is True
        assert state.begin_shutdown() is False
        assert not state.is_ready()
        assert state.store_status() == {"a": "disconnected"}

    def test_no_readiness_after_shutdown(self):
        state = Lifecycle(("a",))
        state.begin_shutdown()
        state.mark_store_ready("a")
        assert not state.is_ready()


@pytest.fixture
def fresh_lifecycle():
    lifecycle.reset()
    yield lifecycle
    lifecycle.reset()


class TestProcessLifecycle:
    @pytest.mark.asyncio
    async def test_startup_failure_is_fatal(self, fresh_lifecycle):
        from complaint_tracker.database import Store
        from complaint_tracker.main import app, lifespan

        init_schema = AsyncMock(side_effect=ConnectionRefusedError("identity store down"))
        with patch.object(Store, "init_schema", init_schema), \
                patch.object(Store, "dispose", AsyncMock()):
            with pytest.raises(ConnectionRefusedError):
                async with lifespan(app):
                    pytest.fail("lifespan must not yield after a failed start-up")

        # Stores are initialized in order; the first failure stops the rest
        assert init_schema.await_count == 1
        assert not fresh_lifecycle.is_ready()

    @pytest.mark.asyncio
    async def test_startup_marks_ready(self, fresh_lifecycle):
        from complaint_tracker.database import Store
        from complaint_tracker.main import startup

        with patch.object(Store, "init_schema", AsyncMock()):
            await startup()

        assert fresh_lifecycle.is_ready()

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self, fresh_lifecycle):
        from complaint_tracker.database import Store
        from complaint_tracker.main import STORES, shutdown

        fresh_lifecycle.mark_store_ready(IDENTITY_STORE)
        fresh_lifecycle.mark_store_ready(COMPLAINT_STORE)

        dispose = AsyncMock()
        with patch.object(Store, "dispose", dispose):
            await shutdown()
            await shutdown()

        assert dispose.await_count == len(STORES)
        assert fresh_lifecycle.state == ServiceState.SHUTTING_DOWN
        assert not fresh_lifecycle.is_ready()

    @pytest.mark.asyncio
    async def test_shutdown_continues_past_failing_store(self, fresh_lifecycle, caplog):
        from complaint_tracker.database import Store
        from complaint_tracker.main import STORES, shutdown

        dispose = AsyncMock(side_effect=[OSError("socket closed"), None])
        with patch.object(Store, "dispose", dispose):
            with caplog.at_level(logging.ERROR, logger="complaint_tracker.main"):
                await shutdown()

        assert dispose.await_count == len(STORES)
        assert any("failed closing store" in r.getMessage() for r in caplog.records)
