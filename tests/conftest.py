"""Pytest configuration and shared fixtures.

Every test gets its own store in a temp directory and a failover client
built from scripted providers, so nothing touches data/ or the network.
"""

import os
import random
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Configure logging BEFORE importing the app
os.environ.setdefault("NEURACARE_LOG_FORMAT", "text")

from neuracare.core.scoring import ScoringEngine
from neuracare.database import AtomicDocumentStore, get_store, reset_store
from neuracare.main import app
from neuracare.services.ai_failover import (
    ProviderFailoverClient,
    get_failover_client,
    reset_failover_client,
)
from neuracare.services.analysis import get_scoring_engine
from tests.fakes import ScriptedClient


@pytest.fixture
def store(tmp_path) -> AtomicDocumentStore:
    """Document store backed by a file in a fresh temp directory."""
    return AtomicDocumentStore(tmp_path / "data" / "db.json")


@pytest.fixture
def engine() -> ScoringEngine:
    """Scoring engine with a seeded RNG."""
    return ScoringEngine(rng=random.Random(1234))


@pytest.fixture
def ai_clients() -> list[ScriptedClient]:
    """Providers used by the app under test. Override per test module."""
    return [ScriptedClient("openai", "Take short breaks between focused blocks.")]


@pytest.fixture
def failover(ai_clients) -> ProviderFailoverClient:
    return ProviderFailoverClient(ai_clients, rng=random.Random(1234))


@pytest_asyncio.fixture
async def client(store, engine, failover) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with test collaborators injected."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_scoring_engine] = lambda: engine
    app.dependency_overrides[get_failover_client] = lambda: failover

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Keep process-wide instances from leaking between tests."""
    yield
    reset_store()
    reset_failover_client()
