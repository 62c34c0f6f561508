"""Shared test fixtures for all test modules."""

import logging
import random
from collections.abc import AsyncGenerator

import pytest
from tests.helpers import ScriptedRandom

from synthmetrics.adapters.storage.ring_buffer import RingBufferLogStorage
from synthmetrics.app import Telemetry, create_app
from synthmetrics.config import Settings
from synthmetrics.core.logs import EventLogEmitter
from synthmetrics.core.metrics import create_registry
from synthmetrics.core.registry import MetricRegistry
from synthmetrics.core.scenarios import ScenarioEngine
from synthmetrics.core.snapshot import AggregateSnapshot

try:
    import httpx
except ImportError:
    httpx = None


@pytest.fixture(scope="session", autouse=True)
def _quiet_event_logger() -> None:
    """Keep event NDJSON lines out of the captured test output."""
    logging.getLogger("synthmetrics.events").setLevel(logging.WARNING)


@pytest.fixture
def registry() -> MetricRegistry:
    """Registry with the full simulator taxonomy declared."""
    return create_registry()


@pytest.fixture
def snapshot() -> AggregateSnapshot:
    return AggregateSnapshot()


@pytest.fixture
def log_storage() -> RingBufferLogStorage:
    """Empty log buffer large enough to keep every event in a test."""
    return RingBufferLogStorage(max_size=10_000)


@pytest.fixture
def emitter(log_storage: RingBufferLogStorage) -> EventLogEmitter:
    return EventLogEmitter(log_storage)


@pytest.fixture
def engine_factory(
    registry: MetricRegistry,
    snapshot: AggregateSnapshot,
    emitter: EventLogEmitter,
):
    """Factory fixture building a ScenarioEngine over the shared fixtures.

    Usage:
        def test_something(engine_factory):
            engine = engine_factory(ScriptedRandom(value=0.0))
    """

    def _engine(rng=None) -> ScenarioEngine:
        return ScenarioEngine(
            registry, snapshot, emitter, rng if rng is not None else random.Random(1234)
        )

    return _engine


@pytest.fixture
def engine(engine_factory) -> ScenarioEngine:
    """Scenario engine with a seeded random source."""
    return engine_factory()


@pytest.fixture
def never_fail_engine(engine_factory) -> ScenarioEngine:
    """Engine whose probability draws never trigger failures or extras."""
    return engine_factory(ScriptedRandom(value=0.99))


@pytest.fixture
def always_fail_engine(engine_factory) -> ScenarioEngine:
    """Engine whose probability draws always trigger failures and extras."""
    return engine_factory(ScriptedRandom(value=0.0))


# === HTTP Test Fixtures ===


@pytest.fixture
def settings() -> Settings:
    """Settings with short intervals for runtime tests."""
    return Settings(
        system_sample_interval=0.05,
        business_sample_interval=0.05,
        traffic_burst_interval=0.05,
        log_buffer_size=10_000,
        seed=42,
    )


@pytest.fixture
def telemetry(settings: Settings) -> Telemetry:
    return Telemetry(settings)


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_app(settings)
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


@pytest.fixture
async def api_client(telemetry: Telemetry, asgi_test_client) -> AsyncGenerator:
    """Client for an app built around the ``telemetry`` fixture.

    The ASGI transport does not run the lifespan, so samplers stay idle
    unless a test starts them explicitly.
    """
    app = create_app(telemetry=telemetry)
    async with asgi_test_client(app) as client:
        yield client
    telemetry.traffic.stop()
    await telemetry.stop()
    await telemetry.scheduler.stop()
