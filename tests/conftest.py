"""Shared fixtures: a throwaway SQLite database and stubbed webhook endpoints."""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="wedding-hooks-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"

from typing import AsyncGenerator, Callable  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from src.storage.database import models, webhook_models  # noqa: E402, F401
from src.storage.database.base import AsyncSessionLocal, Base, async_engine  # noqa: E402
from src.storage.database.models import Wedding  # noqa: E402
from src.storage.database.webhook_models import WebhookLog  # noqa: E402
from src.webhooks.dispatcher import WebhookDispatcher  # noqa: E402


class EndpointStub:
    """Routes outbound webhook requests to per-URL handlers and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, url: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handlers[url] = handler

    def respond(self, url: str, status_code: int = 200, text: str = "ok") -> None:
        self.on(url, lambda request: httpx.Response(status_code, text=text))

    def refuse(self, url: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        self.on(url, handler)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(str(request.url))
        if handler is None:
            return httpx.Response(404, text="no handler")
        return handler(request)

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [request for request in self.requests if str(request.url) == url]


@pytest.fixture
async def database() -> AsyncGenerator[None, None]:
    """Create all tables for one test and drop them afterwards."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await async_engine.dispose()


@pytest.fixture
async def session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Database session for test setup and assertions."""
    async with AsyncSessionLocal() as db_session:
        yield db_session


@pytest.fixture
async def wedding(session: AsyncSession) -> Wedding:
    """A committed wedding tenant."""
    wedding = Wedding(id="wedding-1", name="Ana & Bruno")
    session.add(wedding)
    await session.commit()
    return wedding


@pytest.fixture
async def other_wedding(session: AsyncSession) -> Wedding:
    """A second tenant, used to check isolation."""
    wedding = Wedding(id="wedding-2", name="Carla & Diego")
    session.add(wedding)
    await session.commit()
    return wedding


@pytest.fixture
def endpoint_stub() -> EndpointStub:
    """Stubbed third-party endpoints."""
    return EndpointStub()


@pytest.fixture
def dispatcher(database: None, endpoint_stub: EndpointStub) -> WebhookDispatcher:
    """Dispatcher whose HTTP calls go to the endpoint stub."""
    return WebhookDispatcher(
        session_factory=AsyncSessionLocal,
        transport=httpx.MockTransport(endpoint_stub),
        timeout=10.0,
    )


async def fetch_logs(endpoint_id: int) -> list[WebhookLog]:
    """Read delivery logs in a fresh session so no read transaction stays open."""
    async with AsyncSessionLocal() as db_session:
        result = await db_session.execute(
            select(WebhookLog).where(WebhookLog.endpoint_id == endpoint_id).order_by(WebhookLog.id)
        )
        return list(result.scalars().all())
