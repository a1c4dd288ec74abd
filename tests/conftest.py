import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from complaint_tracker.models.base import ComplaintBase, IdentityBase
# Import all models so they register with their metadata for create_all
import complaint_tracker.models  # noqa: F401
from complaint_tracker.auth.context import Identity
from complaint_tracker.config import Settings, settings
from complaint_tracker.lifecycle import COMPLAINT_STORE, IDENTITY_STORE, lifecycle
from complaint_tracker.models.identity import UserRole


# One SQLite file per store per test (no Postgres dependency needed for tests)
async def _make_engine(path, metadata):
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    return engine


@pytest.fixture
async def identity_session(tmp_path):
    engine = await _make_engine(tmp_path / "identity.db", IdentityBase.metadata)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
async def db_session(tmp_path):
    engine = await _make_engine(tmp_path / "complaints.db", ComplaintBase.metadata)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(upload_dir) -> Settings:
    return Settings(upload_dir=str(upload_dir), bcrypt_rounds=4, _env_file=None)


@pytest.fixture
async def client(identity_session, db_session, upload_dir, monkeypatch):
    from complaint_tracker.database import get_complaint_db, get_identity_db
    from complaint_tracker.main import app

    # Override upload dir to temp; cheap hashing for speed
    monkeypatch.setattr(settings, "upload_dir", str(upload_dir))
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)

    async def override_identity_db():
        yield identity_session

    async def override_complaint_db():
        yield db_session

    app.dependency_overrides[get_identity_db] = override_identity_db
    app.dependency_overrides[get_complaint_db] = override_complaint_db

    lifecycle.reset()
    lifecycle.mark_store_ready(IDENTITY_STORE)
    lifecycle.mark_store_ready(COMPLAINT_STORE)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    lifecycle.reset()


@pytest.fixture
def login_as(client, identity_session):
    """Create a user (optionally an admin) and return bearer headers for it."""
    from complaint_tracker.auth.service import IdentityService

    async def _login(username: str = "alice", role: UserRole = UserRole.USER, password: str = "secret1"):
        await IdentityService(settings).register(
            identity_session,
            username=username,
            email=f"{username}@example.com",
            password=password,
            full_name=username.title(),
            role=role,
        )
        response = await client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def citizen() -> Identity:
    return Identity(id=1, username="alice", role=UserRole.USER)


@pytest.fixture
def other_citizen() -> Identity:
    return Identity(id=2, username="bob", role=UserRole.USER)


@pytest.fixture
def admin() -> Identity:
    return Identity(id=99, username="root", role=UserRole.ADMIN)
