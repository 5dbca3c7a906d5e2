from collections.abc import AsyncGenerator, Iterable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from notesearch.api.deps import get_embedding_generator
from notesearch.core.config import Settings
from notesearch.core.errors import ConfigurationError, GenerationError
from notesearch.db.session import get_session
from notesearch.main import app
from notesearch.models import Note, NoteEmbedding  # noqa: F401

DEFAULT_AXES = ("python", "javascript", "garden")


class FakeEmbeddingService:
    """Counts axis words in the text; one vector component per axis."""

    model = "fake-embedding"

    def __init__(
        self,
        *,
        configured: bool = True,
        axes: Iterable[str] = DEFAULT_AXES,
        fail_on: Iterable[str] = (),
        fail_calls: Iterable[int] = (),
    ) -> None:
        self.configured = configured
        self.axes = tuple(axes)
        self.fail_on = set(fail_on)
        self.fail_calls = set(fail_calls)
        self.calls: list[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def embed_text(self, text: str) -> list[float]:
        if not self.configured:
            raise ConfigurationError("fake embedder has no credential")
        self.calls.append(text)
        if len(self.calls) in self.fail_calls or any(marker in text for marker in self.fail_on):
            raise GenerationError(f"fake failure for call {len(self.calls)}")
        lowered = text.lower()
        return [float(lowered.count(axis)) for axis in self.axes]


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def settings() -> Settings:
    return Settings(openai_api_key=None, bulk_embedding_delay=0.0, embedding_retry_attempts=1)


@pytest.fixture()
def embedder_factory():
    return FakeEmbeddingService


@pytest.fixture()
def fake_embedder() -> FakeEmbeddingService:
    return FakeEmbeddingService()


@pytest_asyncio.fixture()
async def session() -> AsyncGenerator[AsyncSession, None]:
    engine: AsyncEngine = create_async_engine("sqlite+aiosqlite:///:memory:", connect_args={"check_same_thread": False})
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    async_session = AsyncSession(engine, expire_on_commit=False)
    try:
        yield async_session
    finally:
        await async_session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(session: AsyncSession, fake_embedder: FakeEmbeddingService) -> AsyncGenerator[AsyncClient, None]:
    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_embedding_generator] = lambda: fake_embedder
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()
