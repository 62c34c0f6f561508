"""BDD step definitions for scenario engine features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when
from tests.helpers import ScriptedRandom

from synthmetrics.adapters.storage.ring_buffer import RingBufferLogStorage
from synthmetrics.core import catalog
from synthmetrics.core.exceptions import InvalidRequestError, UnknownScenarioError
from synthmetrics.core.logs import EventLogEmitter
from synthmetrics.core.metrics import create_registry
from synthmetrics.core.ports import RandomSource
from synthmetrics.core.registry import MetricRegistry
from synthmetrics.core.scenarios import ScenarioEngine
from synthmetrics.core.snapshot import AggregateSnapshot


@dataclass
class ScenarioContext:
    """State shared between the steps of one BDD scenario."""

    registry: MetricRegistry = field(default_factory=create_registry)
    snapshot: AggregateSnapshot = field(default_factory=AggregateSnapshot)
    log_storage: RingBufferLogStorage = field(default_factory=RingBufferLogStorage)
    rng: RandomSource | None = None
    engine: ScenarioEngine | None = None
    error: Exception | None = None

    def build_engine(self) -> ScenarioEngine:
        if self.engine is None:
            self.engine = ScenarioEngine(
                self.registry,
                self.snapshot,
                EventLogEmitter(self.log_storage),
                self.rng or ScriptedRandom(value=0.99),
            )
        return self.engine


@pytest.fixture
def ctx() -> ScenarioContext:
    """Fresh scenario context for each test."""
    return ScenarioContext()


# === Given ===


@given("a fresh simulator")
def given_fresh_simulator(ctx: ScenarioContext) -> None:
    assert ctx.snapshot.get("requestCount") == 0


@given("every probability draw fails")
def given_draws_fail(ctx: ScenarioContext) -> None:
    ctx.rng = ScriptedRandom(value=0.0)


@given("every probability draw succeeds")
def given_draws_succeed(ctx: ScenarioContext) -> None:
    ctx.rng = ScriptedRandom(value=0.99)


@given(parsers.parse('every catalog pick is "{product_name}"'))
def given_catalog_pick(ctx: ScenarioContext, product_name: str) -> None:
    """Make every random choice land on the index of the named product."""
    names = [product.name for product in catalog.PRODUCTS]
    value = ctx.rng.random() if ctx.rng is not None else 0.99
    ctx.rng = ScriptedRandom(value=value, pick=names.index(product_name))


# === When ===


@when(parsers.parse('the "{name}" scenario runs with count {count}'))
def when_scenario_runs(ctx: ScenarioContext, name: str, count: str) -> None:
    engine = ctx.build_engine()
    try:
        engine.run(name, {"count": count})
    except (InvalidRequestError, UnknownScenarioError) as e:
        ctx.error = e


@when(parsers.parse("the error endpoint is called {n:d} times"))
def when_error_endpoint_called(ctx: ScenarioContext, n: int) -> None:
    engine = ctx.build_engine()
    for _ in range(n):
        engine.record_api_error()


# === Then ===


@then(parsers.parse('the snapshot field "{field_name}" should be {expected:g}'))
def then_snapshot_field(ctx: ScenarioContext, field_name: str, expected: float) -> None:
    actual = ctx.snapshot.get(field_name)
    assert actual == pytest.approx(expected), f"{field_name}: expected {expected}, got {actual}"


@then(parsers.parse('the metric "{name}" should total {expected:g}'))
def then_metric_total(ctx: ScenarioContext, name: str, expected: float) -> None:
    assert ctx.registry.total(name) == pytest.approx(expected)


@then(parsers.parse('{n:d} log records at level "{level}" should be stored'))
def then_log_records(ctx: ScenarioContext, n: int, level: str) -> None:
    records = list(ctx.log_storage.read(level=level))
    assert len(records) == n, f"Expected {n} {level} records, got {len(records)}"


@then("the request should be rejected as invalid")
def then_rejected(ctx: ScenarioContext) -> None:
    assert isinstance(ctx.error, InvalidRequestError)


@then("the scenario should be reported as unknown")
def then_unknown(ctx: ScenarioContext) -> None:
    assert isinstance(ctx.error, UnknownScenarioError)
