"""Static reference data used as label sources for generated events."""

from synthmetrics.core.models import Product, SystemFault, User

LOW_STOCK_THRESHOLD = 30

PRODUCTS: tuple[Product, ...] = (
    Product("prod_001", "iPhone 15 Pro", "electronics", 999.99, 50),
    Product("prod_002", "MacBook Pro", "electronics", 1999.99, 25),
    Product("prod_003", "Nike Air Max", "clothing", 129.99, 100),
    Product("prod_004", "Coffee Maker", "home", 89.99, 75),
    Product("prod_005", "Gaming Chair", "furniture", 299.99, 15),
    Product("prod_006", "Wireless Headphones", "electronics", 199.99, 40),
)

USERS: tuple[User, ...] = (
    User("user_001", "Alice Johnson", "alice@example.com", "premium"),
    User("user_002", "Bob Smith", "bob@example.com", "standard"),
    User("user_003", "Carol Davis", "carol@example.com", "premium"),
    User("user_004", "David Wilson", "david@example.com", "standard"),
    User("user_005", "Eve Brown", "eve@example.com", "basic"),
)

SYSTEM_FAULTS: tuple[SystemFault, ...] = (
    SystemFault("database", "connection_timeout", "Database connection timeout"),
    SystemFault("payment", "gateway_timeout", "Payment gateway timeout"),
    SystemFault("inventory", "sync_failed", "Inventory synchronization failed"),
    SystemFault("auth", "token_validation_failed", "Authentication token validation failed"),
    SystemFault("shipping", "api_rate_limited", "Shipping carrier API rate limit exceeded"),
)

REGISTRATION_SOURCES = ("web", "mobile", "referral")
LOGIN_METHODS = ("password", "oauth", "sso")
CART_OPERATIONS = ("add", "remove", "update")
PAYMENT_METHODS = ("credit_card", "paypal", "apple_pay")
INVENTORY_OPERATIONS = ("restock", "sale", "adjustment")
CARRIERS = ("ups", "fedex", "dhl", "usps")
SUPPORT_CATEGORIES = ("billing", "shipping", "technical", "returns")
SUPPORT_PRIORITIES = ("low", "medium", "high")

LOGIN_STATUSES = ("success", "failed")
CHECKOUT_STATUSES = ("success", "declined")
SHIPMENT_STATUSES = ("shipped", "failed")
PRODUCT_VIEW_SOURCES = ("organic", "high_traffic")
CURRENCY = "USD"

# (service, error_type) pairs raised by the business scenarios and the error endpoint
SCENARIO_FAILURES = (
    ("api", "internal_error"),
    ("auth", "registration_failed"),
    ("auth", "login_failed"),
    ("cart", "session_expired"),
    ("payment", "insufficient_funds"),
    ("inventory", "database_connection_failed"),
    ("shipping", "carrier_unavailable"),
)

# (method, endpoint, status) request series that exist before any traffic
BASELINE_REQUESTS = (
    ("GET", "/api/health", "200"),
    ("GET", "/api/error", "500"),
)
