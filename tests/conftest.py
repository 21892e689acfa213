"""
Pytest configuration and shared fixtures.

Provides in-memory collaborators for the chat service and an SQLite-backed
async session factory for repository and HTTP tests.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.shared.entities.registry import BaseEntity
from tests.fakes import FakeCompletionClient, InMemoryConversationRepository


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def repository():
    return InMemoryConversationRepository()


@pytest_asyncio.fixture
async def session_factory():
    """Async session factory over a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
