"""Query parameter parsing for the /logs endpoint."""

import math

# Valid log levels for validation
VALID_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


def _parse_since_param(raw: str | None) -> float:
    """Parse and validate the 'since' query parameter.

    Args:
        raw: Raw query parameter value, or None if absent.

    Returns:
        Timestamp as float, defaulting to 0.0 if invalid or missing.
        Rejects negative, NaN, and infinite values, returning 0.0 for these cases.
    """
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    if value < 0 or not math.isfinite(value):
        return 0.0
    return value


def _parse_level_param(raw: str | None) -> str | None:
    """Parse and validate the 'level' query parameter.

    Returns:
        Validated level string (uppercase, WARNING folded to WARN) or None
        if invalid/missing.
    """
    if not raw or raw.upper() not in VALID_LEVELS:
        return None
    level = raw.upper()
    return "WARN" if level == "WARNING" else level
