"""Shared test fixtures."""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient

# In-memory SQLite shared through a StaticPool; must be set before the app is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["MERCADO_PAGO_WEBHOOK_SECRET"] = ""
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("S3_BUCKET", "hopeshare-test")
os.environ.setdefault("S3_PUBLIC_URL", "https://files.test")

import hopeshare.models  # noqa: E402, F401
from hopeshare.core.dependencies import get_payment_gateway  # noqa: E402
from hopeshare.db.base import Base  # noqa: E402
from hopeshare.db.session import engine as app_engine  # noqa: E402
from hopeshare.main import app  # noqa: E402
from hopeshare.services import storage  # noqa: E402
from tests.helpers import FakeGateway, FakeStorage  # noqa: E402


@pytest.fixture(autouse=True)
async def schema() -> AsyncGenerator[None, None]:
    """Fresh schema per test. Disposing the pool drops the in-memory database."""
    async with app_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await app_engine.dispose()


@pytest.fixture(autouse=True)
def gateway() -> Generator[FakeGateway, None, None]:
    """Fake Mercado Pago client injected into every route."""
    fake = FakeGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_payment_gateway, None)


@pytest.fixture(autouse=True)
def fake_storage(monkeypatch: pytest.MonkeyPatch) -> FakeStorage:
    """Keeps boto3 out of the tests."""
    fake = FakeStorage()
    monkeypatch.setattr(storage, "upload_object", fake.upload_object)
    monkeypatch.setattr(storage, "delete_object", fake.delete_object)
    monkeypatch.setattr(storage, "delete_prefix", fake.delete_prefix)
    return fake


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP test client for the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
