"""Metric taxonomy for the simulated shop.

Every series family the service exposes is declared here, once, at
startup. Label dimensions are kept to bounded value sets (catalog ids,
fixed enums) so cardinality stays predictable.
"""

from itertools import product

from synthmetrics.core import catalog
from synthmetrics.core.models import MetricKind
from synthmetrics.core.registry import MetricRegistry

# Request accounting
HTTP_REQUESTS_TOTAL = "app_http_requests_total"

# Business counters
ERRORS_TOTAL = "ecommerce_errors_total"
USER_REGISTRATIONS_TOTAL = "ecommerce_user_registrations_total"
USER_LOGINS_TOTAL = "ecommerce_user_logins_total"
PRODUCT_VIEWS_TOTAL = "ecommerce_product_views_total"
CART_OPERATIONS_TOTAL = "ecommerce_cart_operations_total"
CHECKOUTS_TOTAL = "ecommerce_checkouts_total"
REVENUE_TOTAL = "ecommerce_revenue_total"
INVENTORY_UPDATES_TOTAL = "ecommerce_inventory_updates_total"
SHIPMENTS_TOTAL = "ecommerce_shipments_total"
SUPPORT_TICKETS_TOTAL = "ecommerce_support_tickets_total"

# Business gauges
INVENTORY_STOCK_LEVEL = "ecommerce_inventory_stock_level"
ACTIVE_USERS = "ecommerce_active_users"
CART_VALUE_AVERAGE = "ecommerce_cart_value_average"
ACTIVE_CONNECTIONS = "ecommerce_active_connections"
HIGH_TRAFFIC_ACTIVE = "ecommerce_high_traffic_active"

# Latency
OPERATION_DURATION_SECONDS = "ecommerce_operation_duration_seconds"

# Pseudo-system gauges
SYSTEM_CPU_USAGE_PERCENT = "system_cpu_usage_percent"
SYSTEM_MEMORY_BYTES = "system_memory_bytes"
SYSTEM_MEMORY_USAGE_PERCENT = "system_memory_usage_percent"
SYSTEM_LOAD_AVERAGE = "system_load_average"
SYSTEM_UPTIME_SECONDS = "system_uptime_seconds"

OPERATION_DURATION_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5)

_DECLARATIONS: tuple[tuple[str, MetricKind, tuple[str, ...], str], ...] = (
    (
        HTTP_REQUESTS_TOTAL,
        MetricKind.COUNTER,
        ("method", "endpoint", "status"),
        "Total HTTP requests handled by the simulator API",
    ),
    (
        ERRORS_TOTAL,
        MetricKind.COUNTER,
        ("service", "error_type"),
        "Total simulated errors by service and error type",
    ),
    (
        USER_REGISTRATIONS_TOTAL,
        MetricKind.COUNTER,
        ("source",),
        "Total user registration attempts",
    ),
    (
        USER_LOGINS_TOTAL,
        MetricKind.COUNTER,
        ("method", "status"),
        "Total user login attempts",
    ),
    (
        PRODUCT_VIEWS_TOTAL,
        MetricKind.COUNTER,
        ("product", "category", "source"),
        "Total product page views",
    ),
    (
        CART_OPERATIONS_TOTAL,
        MetricKind.COUNTER,
        ("operation",),
        "Total shopping cart operations",
    ),
    (
        CHECKOUTS_TOTAL,
        MetricKind.COUNTER,
        ("payment_method", "status"),
        "Total checkout attempts by payment method and outcome",
    ),
    (
        REVENUE_TOTAL,
        MetricKind.COUNTER,
        ("currency",),
        "Total revenue from successful payments",
    ),
    (
        INVENTORY_UPDATES_TOTAL,
        MetricKind.COUNTER,
        ("product", "operation"),
        "Total inventory updates",
    ),
    (
        SHIPMENTS_TOTAL,
        MetricKind.COUNTER,
        ("carrier", "status"),
        "Total shipment attempts by carrier and outcome",
    ),
    (
        SUPPORT_TICKETS_TOTAL,
        MetricKind.COUNTER,
        ("category", "priority"),
        "Total customer support tickets",
    ),
    (
        INVENTORY_STOCK_LEVEL,
        MetricKind.GAUGE,
        ("product",),
        "Catalog stock level per product",
    ),
    (ACTIVE_USERS, MetricKind.GAUGE, (), "Simulated number of active users"),
    (
        CART_VALUE_AVERAGE,
        MetricKind.GAUGE,
        (),
        "Simulated average cart value in USD",
    ),
    (
        ACTIVE_CONNECTIONS,
        MetricKind.GAUGE,
        (),
        "Simulated number of open client connections",
    ),
    (
        HIGH_TRAFFIC_ACTIVE,
        MetricKind.GAUGE,
        (),
        "1 while a high-traffic simulation is running, else 0",
    ),
    (
        SYSTEM_CPU_USAGE_PERCENT,
        MetricKind.GAUGE,
        ("type",),
        "Scripted CPU usage percentage",
    ),
    (
        SYSTEM_MEMORY_BYTES,
        MetricKind.GAUGE,
        ("type",),
        "Host memory in bytes (total, used, free)",
    ),
    (
        SYSTEM_MEMORY_USAGE_PERCENT,
        MetricKind.GAUGE,
        ("type",),
        "Host memory usage percentage",
    ),
    (
        SYSTEM_LOAD_AVERAGE,
        MetricKind.GAUGE,
        ("type",),
        "Host load average over 1, 5 and 15 minutes",
    ),
    (
        SYSTEM_UPTIME_SECONDS,
        MetricKind.GAUGE,
        ("type",),
        "Host and process uptime in seconds",
    ),
)


def counter_label_sets() -> list[tuple[str, tuple[str, ...]]]:
    """Return the (counter, label values) pairs that exist before any event."""
    products = [(p.id, p.category) for p in catalog.PRODUCTS]
    product_ids = [p.id for p in catalog.PRODUCTS]
    faults = [(f.service, f.error_type) for f in catalog.SYSTEM_FAULTS]
    sets: list[tuple[str, tuple[str, ...]]] = []
    sets += [(HTTP_REQUESTS_TOTAL, labels) for labels in catalog.BASELINE_REQUESTS]
    sets += [
        (ERRORS_TOTAL, pair)
        for pair in dict.fromkeys([*catalog.SCENARIO_FAILURES, *faults])
    ]
    sets += [(USER_REGISTRATIONS_TOTAL, (s,)) for s in catalog.REGISTRATION_SOURCES]
    sets += [
        (USER_LOGINS_TOTAL, labels)
        for labels in product(catalog.LOGIN_METHODS, catalog.LOGIN_STATUSES)
    ]
    sets += [
        (PRODUCT_VIEWS_TOTAL, (pid, category, source))
        for (pid, category), source in product(products, catalog.PRODUCT_VIEW_SOURCES)
    ]
    sets += [(CART_OPERATIONS_TOTAL, (op,)) for op in catalog.CART_OPERATIONS]
    sets += [
        (CHECKOUTS_TOTAL, labels)
        for labels in product(catalog.PAYMENT_METHODS, catalog.CHECKOUT_STATUSES)
    ]
    sets.append((REVENUE_TOTAL, (catalog.CURRENCY,)))
    sets += [
        (INVENTORY_UPDATES_TOTAL, labels)
        for labels in product(product_ids, catalog.INVENTORY_OPERATIONS)
    ]
    sets += [
        (SHIPMENTS_TOTAL, labels)
        for labels in product(catalog.CARRIERS, catalog.SHIPMENT_STATUSES)
    ]
    sets += [
        (SUPPORT_TICKETS_TOTAL, labels)
        for labels in product(catalog.SUPPORT_CATEGORIES, catalog.SUPPORT_PRIORITIES)
    ]
    return sets


def declare_metrics(registry: MetricRegistry) -> MetricRegistry:
    """Register every series family the simulator writes.

    Counter series for every known label combination are created at zero
    so they are exposed before the first event.

    Args:
        registry: An empty registry.

    Returns:
        The same registry, for chaining.

    Raises:
        DuplicateMetricError: If any family was already declared.
    """
    for name, kind, label_names, help_text in _DECLARATIONS:
        registry.register(name, kind, label_names, help_text)
    registry.register(
        OPERATION_DURATION_SECONDS,
        MetricKind.HISTOGRAM,
        ("service", "operation"),
        "Simulated duration of business operations in seconds",
        buckets=OPERATION_DURATION_BUCKETS,
    )
    for name, label_values in counter_label_sets():
        registry.increment(name, label_values, 0)
    return registry


def create_registry() -> MetricRegistry:
    """Create a registry with the full simulator taxonomy declared."""
    return declare_metrics(MetricRegistry())
