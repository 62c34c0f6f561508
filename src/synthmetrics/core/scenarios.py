"""Scenario engine: named generators of randomized business events.

Each generator runs ``count`` independent trials in sequence. A trial picks
catalog entities at random, bumps the relevant snapshot field together
with its metric counter, records a simulated latency and emits one log
record. With a fixed per-scenario probability the trial is recorded as a
synthetic failure instead: the error counter is incremented and an ERROR
record replaces the success record. Synthetic failures are ordinary
results, never exceptions.
"""

import logging
import math
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from synthmetrics.core import catalog
from synthmetrics.core import metrics as m
from synthmetrics.core.exceptions import InvalidRequestError, UnknownScenarioError
from synthmetrics.core.logs import EventLogEmitter
from synthmetrics.core.models import ScenarioResult
from synthmetrics.core.ports import RandomSource
from synthmetrics.core.registry import MetricRegistry
from synthmetrics.core.snapshot import AggregateSnapshot

if TYPE_CHECKING:
    from synthmetrics.core.traffic import TrafficSimulation

logger = logging.getLogger(__name__)

REGISTRATION_FAILURE_RATE = 0.10
LOGIN_FAILURE_RATE = 0.15
SEARCH_RATE = 0.30
CART_FAILURE_RATE = 0.05
PAYMENT_FAILURE_RATE = 0.20
INVENTORY_FAILURE_RATE = 0.08
SHIPPING_FAILURE_RATE = 0.10
ESCALATION_RATE = 0.20

HIGH_TRAFFIC = "high-traffic"

# Generators run inline on the request path
MAX_COUNT = 10_000


@dataclass(frozen=True)
class ScenarioInfo:
    """Public description of a scenario.

    Attributes:
        name: URL-safe scenario name.
        parameter: Request body field that sizes the run ("count" or "duration").
        default: Value used when the parameter is omitted.
        description: One-line description.
    """

    name: str
    parameter: str
    default: int
    description: str


SCENARIOS: tuple[ScenarioInfo, ...] = (
    ScenarioInfo("user-registration", "count", 10, "New user sign-ups"),
    ScenarioInfo("user-login", "count", 15, "User login attempts"),
    ScenarioInfo("product-browsing", "count", 25, "Product page views and searches"),
    ScenarioInfo("shopping-cart", "count", 20, "Cart add/remove/update operations"),
    ScenarioInfo("checkout-payment", "count", 12, "Checkouts with payment authorization"),
    ScenarioInfo("inventory-management", "count", 15, "Stock updates and low-stock alerts"),
    ScenarioInfo("shipping-fulfillment", "count", 18, "Shipments handed to carriers"),
    ScenarioInfo("customer-support", "count", 8, "Support tickets and escalations"),
    ScenarioInfo("system-errors", "count", 5, "Infrastructure failures across services"),
    ScenarioInfo(HIGH_TRAFFIC, "duration", 30, "Elevated CPU and repeated product views"),
)

_SCENARIOS_BY_NAME = {info.name: info for info in SCENARIOS}


def parse_count(value: Any, default: int) -> int:
    """Validate a requested trial count.

    Args:
        value: Raw value from the request body (None means "use default").
        default: Count used when ``value`` is None.

    Returns:
        Integer count between 0 and ``MAX_COUNT``.

    Raises:
        InvalidRequestError: If the value is negative, fractional, not a
            number or above ``MAX_COUNT``.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidRequestError(f"count must be a non-negative integer, got {value!r}")
    if isinstance(value, int):
        count = value
    elif isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, str):
        try:
            count = int(value.strip())
        except ValueError:
            raise InvalidRequestError(
                f"count must be a non-negative integer, got {value!r}"
            ) from None
    else:
        raise InvalidRequestError(f"count must be a non-negative integer, got {value!r}")
    if count < 0:
        raise InvalidRequestError(f"count must be a non-negative integer, got {value!r}")
    if count > MAX_COUNT:
        raise InvalidRequestError(f"count must be at most {MAX_COUNT}, got {value!r}")
    return count


def parse_duration(value: Any, default: float) -> float:
    """Validate a requested simulation duration in seconds.

    Raises:
        InvalidRequestError: If the value is not a positive finite number.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidRequestError(f"duration must be a positive number, got {value!r}")
    try:
        duration = float(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(
            f"duration must be a positive number, got {value!r}"
        ) from None
    if not math.isfinite(duration) or duration <= 0:
        raise InvalidRequestError(f"duration must be a positive number, got {value!r}")
    return duration


class ScenarioEngine:
    """Runs scenario generators against a registry, snapshot and emitter.

    Args:
        registry: Registry with the simulator taxonomy declared.
        snapshot: Aggregate snapshot mirrored alongside business counters.
        emitter: Event log emitter.
        rng: Random source (default: a fresh ``random.Random``).
    """

    def __init__(
        self,
        registry: MetricRegistry,
        snapshot: AggregateSnapshot,
        emitter: EventLogEmitter,
        rng: RandomSource | None = None,
    ) -> None:
        self.registry = registry
        self.snapshot = snapshot
        self.emitter = emitter
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.traffic: TrafficSimulation | None = None
        self._generators: dict[str, Callable[[int], ScenarioResult]] = {
            "user-registration": self.user_registration,
            "user-login": self.user_login,
            "product-browsing": self.product_browsing,
            "shopping-cart": self.shopping_cart,
            "checkout-payment": self.checkout_payment,
            "inventory-management": self.inventory_management,
            "shipping-fulfillment": self.shipping_fulfillment,
            "customer-support": self.customer_support,
            "system-errors": self.system_errors,
        }

    @staticmethod
    def scenarios() -> tuple[ScenarioInfo, ...]:
        return SCENARIOS

    def run(self, name: str, params: Mapping[str, Any] | None = None) -> ScenarioResult:
        """Run a scenario by name.

        Args:
            name: Scenario name (e.g. "user-registration").
            params: Optional request body; ``count`` for event scenarios,
                ``duration`` (seconds) for high-traffic.

        Raises:
            UnknownScenarioError: If no scenario has that name.
            InvalidRequestError: If the parameters are invalid.
        """
        info = _SCENARIOS_BY_NAME.get(name)
        if info is None:
            raise UnknownScenarioError(name)
        params = params or {}
        if name == HIGH_TRAFFIC:
            return self.high_traffic(parse_duration(params.get("duration"), info.default))
        return self._generators[name](parse_count(params.get("count"), info.default))

    # === Bookkeeping ===

    def _count(
        self,
        field: str,
        metric: str,
        labels: tuple[str, ...],
        delta: int | float = 1,
    ) -> None:
        """Increment a metric counter and its paired snapshot field together."""
        self.registry.increment(metric, labels, delta)
        self.snapshot.increment(field, delta)

    def _fail(self, service: str, error_type: str, message: str, **log_fields: Any) -> None:
        self._count("errorCount", m.ERRORS_TOTAL, (service, error_type))
        self.emitter.error(service, message, error_type=error_type, **log_fields)

    def _latency(self, service: str, operation: str, low: float, high: float) -> float:
        duration = round(self.rng.uniform(low, high), 4)
        self.registry.observe(m.OPERATION_DURATION_SECONDS, (service, operation), duration)
        return duration

    def _result(self, name: str, count: int | float, message: str) -> ScenarioResult:
        logger.info("Scenario %s completed", name, extra={"scenario": name, "count": count})
        return ScenarioResult(
            scenario=name, count=count, message=message, metrics=self.snapshot.to_dict()
        )

    def _validated(self, name: str, count: Any) -> int:
        return parse_count(count, _SCENARIOS_BY_NAME[name].default)

    # === Request accounting ===

    def record_request(self, method: str, endpoint: str, status: int) -> None:
        """Count one handled API request."""
        self._count("requestCount", m.HTTP_REQUESTS_TOTAL, (method, endpoint, str(status)))

    def record_api_error(self, endpoint: str = "/api/error") -> int:
        """Count a failed API request and return the new error count."""
        self.record_request("GET", endpoint, 500)
        self._fail("api", "internal_error", "Error endpoint called", endpoint=endpoint)
        return int(self.snapshot.get("errorCount"))

    # === Generators ===

    def user_registration(self, count: int | None = 10) -> ScenarioResult:
        count = self._validated("user-registration", count)
        for _ in range(count):
            user = self.rng.choice(catalog.USERS)
            source = self.rng.choice(catalog.REGISTRATION_SOURCES)
            self._count("userRegistrations", m.USER_REGISTRATIONS_TOTAL, (source,))
            self._latency("auth", "register", 0.05, 0.5)
            if self.rng.random() < REGISTRATION_FAILURE_RATE:
                self._fail(
                    "auth",
                    "registration_failed",
                    f"User registration failed for {user.email}: email verification error",
                    user_id=user.id,
                )
            else:
                self.emitter.info(
                    "auth",
                    f"New user registered: {user.name}",
                    user_id=user.id,
                    source=source,
                    tier=user.tier,
                )
        return self._result(
            "user-registration", count, f"Generated {count} user registration events"
        )

    def user_login(self, count: int | None = 15) -> ScenarioResult:
        count = self._validated("user-login", count)
        for _ in range(count):
            user = self.rng.choice(catalog.USERS)
            method = self.rng.choice(catalog.LOGIN_METHODS)
            self._latency("auth", "login", 0.02, 0.3)
            if self.rng.random() < LOGIN_FAILURE_RATE:
                self._count("userLogins", m.USER_LOGINS_TOTAL, (method, "failed"))
                self._fail(
                    "auth",
                    "login_failed",
                    f"Login failed for {user.email}: invalid credentials",
                    user_id=user.id,
                    method=method,
                )
            else:
                self._count("userLogins", m.USER_LOGINS_TOTAL, (method, "success"))
                self.emitter.info(
                    "auth", f"User logged in: {user.name}", user_id=user.id, method=method
                )
        return self._result("user-login", count, f"Generated {count} user login events")

    def _product_view(self, source: str) -> None:
        user = self.rng.choice(catalog.USERS)
        product = self.rng.choice(catalog.PRODUCTS)
        self._count(
            "productViews",
            m.PRODUCT_VIEWS_TOTAL,
            (product.id, product.category, source),
        )
        self._latency("catalog", "view", 0.01, 0.25)
        self.emitter.info(
            "catalog",
            f"Product viewed: {product.name}",
            user_id=user.id,
            product_id=product.id,
            category=product.category,
            traffic=source,
        )
        if self.rng.random() < SEARCH_RATE:
            self.emitter.info(
                "search",
                f"Product search performed: {product.category}",
                user_id=user.id,
                query=product.category,
                traffic=source,
            )

    def product_browsing(self, count: int | None = 25) -> ScenarioResult:
        count = self._validated("product-browsing", count)
        for _ in range(count):
            self._product_view("organic")
        return self._result(
            "product-browsing", count, f"Generated {count} product browsing events"
        )

    def high_traffic_burst(self, views: int = 5) -> None:
        """Generate one burst of product views tagged as high traffic."""
        for _ in range(views):
            self._product_view("high_traffic")

    def shopping_cart(self, count: int | None = 20) -> ScenarioResult:
        count = self._validated("shopping-cart", count)
        for _ in range(count):
            user = self.rng.choice(catalog.USERS)
            product = self.rng.choice(catalog.PRODUCTS)
            operation = self.rng.choice(catalog.CART_OPERATIONS)
            quantity = self.rng.randint(1, 3)
            self._count("cartOperations", m.CART_OPERATIONS_TOTAL, (operation,))
            self._latency("cart", operation, 0.01, 0.2)
            if self.rng.random() < CART_FAILURE_RATE:
                self._fail(
                    "cart",
                    "session_expired",
                    f"Cart session expired for {user.email}",
                    user_id=user.id,
                    product_id=product.id,
                )
            else:
                self.emitter.info(
                    "cart",
                    f"Cart {operation}: {quantity} x {product.name}",
                    user_id=user.id,
                    product_id=product.id,
                    operation=operation,
                    quantity=quantity,
                )
        return self._result(
            "shopping-cart", count, f"Generated {count} shopping cart events"
        )

    def checkout_payment(self, count: int | None = 12) -> ScenarioResult:
        count = self._validated("checkout-payment", count)
        for _ in range(count):
            user = self.rng.choice(catalog.USERS)
            product = self.rng.choice(catalog.PRODUCTS)
            method = self.rng.choice(catalog.PAYMENT_METHODS)
            quantity = self.rng.randint(1, 3)
            amount = round(product.price * quantity, 2)
            self._latency("payment", "authorize", 0.2, 2.5)
            if self.rng.random() < PAYMENT_FAILURE_RATE:
                self._count("checkouts", m.CHECKOUTS_TOTAL, (method, "declined"))
                self._fail(
                    "payment",
                    "insufficient_funds",
                    f"Payment declined for {user.email}: insufficient funds",
                    user_id=user.id,
                    product_id=product.id,
                    amount=amount,
                    payment_method=method,
                )
            else:
                self._count("checkouts", m.CHECKOUTS_TOTAL, (method, "success"))
                self._count("totalRevenue", m.REVENUE_TOTAL, (catalog.CURRENCY,), amount)
                self.emitter.info(
                    "payment",
                    f"Payment processed: ${amount:.2f} for {quantity} x {product.name}",
                    user_id=user.id,
                    product_id=product.id,
                    amount=amount,
                    payment_method=method,
                )
        return self._result(
            "checkout-payment", count, f"Generated {count} checkout and payment events"
        )

    def inventory_management(self, count: int | None = 15) -> ScenarioResult:
        count = self._validated("inventory-management", count)
        for _ in range(count):
            product = self.rng.choice(catalog.PRODUCTS)
            operation = self.rng.choice(catalog.INVENTORY_OPERATIONS)
            quantity = self.rng.randint(1, 20)
            self._count(
                "inventoryUpdates", m.INVENTORY_UPDATES_TOTAL, (product.id, operation)
            )
            self.registry.set(m.INVENTORY_STOCK_LEVEL, (product.id,), product.stock)
            self._latency("inventory", operation, 0.01, 0.5)
            if self.rng.random() < INVENTORY_FAILURE_RATE:
                self._fail(
                    "inventory",
                    "database_connection_failed",
                    f"Inventory update failed for {product.name}: database connection failed",
                    product_id=product.id,
                )
            else:
                self.emitter.info(
                    "inventory",
                    f"Inventory {operation}: {quantity} x {product.name}",
                    product_id=product.id,
                    operation=operation,
                    quantity=quantity,
                    stock=product.stock,
                )
            if product.stock < catalog.LOW_STOCK_THRESHOLD:
                self.emitter.warn(
                    "inventory",
                    f"Low inventory alert: {product.name} has {product.stock} units left",
                    product_id=product.id,
                    stock=product.stock,
                    threshold=catalog.LOW_STOCK_THRESHOLD,
                )
        return self._result(
            "inventory-management", count, f"Generated {count} inventory management events"
        )

    def shipping_fulfillment(self, count: int | None = 18) -> ScenarioResult:
        count = self._validated("shipping-fulfillment", count)
        for _ in range(count):
            user = self.rng.choice(catalog.USERS)
            product = self.rng.choice(catalog.PRODUCTS)
            carrier = self.rng.choice(catalog.CARRIERS)
            self._latency("shipping", "dispatch", 0.1, 1.0)
            if self.rng.random() < SHIPPING_FAILURE_RATE:
                self._count("shipments", m.SHIPMENTS_TOTAL, (carrier, "failed"))
                self._fail(
                    "shipping",
                    "carrier_unavailable",
                    f"Shipment failed: carrier {carrier} unavailable",
                    user_id=user.id,
                    product_id=product.id,
                    carrier=carrier,
                )
            else:
                self._count("shipments", m.SHIPMENTS_TOTAL, (carrier, "shipped"))
                self.emitter.info(
                    "shipping",
                    f"Order shipped via {carrier}: {product.name}",
                    user_id=user.id,
                    product_id=product.id,
                    carrier=carrier,
                )
        return self._result(
            "shipping-fulfillment", count, f"Generated {count} shipping fulfillment events"
        )

    def customer_support(self, count: int | None = 8) -> ScenarioResult:
        count = self._validated("customer-support", count)
        for _ in range(count):
            user = self.rng.choice(catalog.USERS)
            category = self.rng.choice(catalog.SUPPORT_CATEGORIES)
            priority = self.rng.choice(catalog.SUPPORT_PRIORITIES)
            self._count(
                "supportTickets", m.SUPPORT_TICKETS_TOTAL, (category, priority)
            )
            self.emitter.info(
                "support",
                f"Support ticket created: {category} ({priority})",
                user_id=user.id,
                category=category,
                priority=priority,
            )
            if self.rng.random() < ESCALATION_RATE:
                self.emitter.warn(
                    "support",
                    f"Support ticket escalated: {category}",
                    user_id=user.id,
                    category=category,
                    priority=priority,
                )
        return self._result(
            "customer-support", count, f"Generated {count} customer support events"
        )

    def system_errors(self, count: int | None = 5) -> ScenarioResult:
        count = self._validated("system-errors", count)
        for _ in range(count):
            fault = self.rng.choice(catalog.SYSTEM_FAULTS)
            self._fail(fault.service, fault.error_type, fault.message)
        return self._result("system-errors", count, f"Generated {count} system error events")

    def high_traffic(self, duration: float = 30) -> ScenarioResult:
        """Start (or restart) the high-traffic simulation for ``duration`` seconds."""
        if self.traffic is None:
            raise RuntimeError("No traffic simulation is attached to this engine")
        duration = parse_duration(duration, 30)
        self.traffic.start(duration)
        shown = int(duration) if duration.is_integer() else duration
        return self._result(
            HIGH_TRAFFIC, shown, f"High traffic simulation started for {shown} seconds"
        )
