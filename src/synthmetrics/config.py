"""Environment-driven configuration.

Variables:
    PORT                            HTTP port (default 3001)
    SYNTHMETRICS_HOST               bind address (default 0.0.0.0)
    SYNTHMETRICS_LOG_LEVEL          DEBUG, INFO, WARNING or ERROR (default INFO)
    SYNTHMETRICS_SYSTEM_INTERVAL    system sampler period, seconds (default 2)
    SYNTHMETRICS_BUSINESS_INTERVAL  business sampler period, seconds (default 5)
    SYNTHMETRICS_TRAFFIC_INTERVAL   high-traffic burst period, seconds (default 1)
    SYNTHMETRICS_LOG_BUFFER_SIZE    log records kept for /logs (default 1000)
    SYNTHMETRICS_SEED               random seed (unset: nondeterministic)

Unparseable or out-of-range values fall back to the default.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_PORT = 3001

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get(env: Mapping[str, str], key: str, default: str = "") -> str:
    return env.get(key, default).strip()


def _get_int(env: Mapping[str, str], key: str, default: int, minimum: int = 1) -> int:
    try:
        value = int(env.get(key, str(default)))
    except (ValueError, TypeError):
        return default
    return value if value >= minimum else default


def _get_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        value = float(env.get(key, str(default)))
    except (ValueError, TypeError):
        return default
    # rejects NaN too
    return value if value > 0 and value != float("inf") else default


def _get_log_level(env: Mapping[str, str], key: str, default: str) -> str:
    value = env.get(key, default).strip().upper()
    if value == "WARN":
        value = "WARNING"
    return value if value in _LOG_LEVELS else default


def _get_optional_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class Settings:
    """Service settings."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    system_sample_interval: float = 2.0
    business_sample_interval: float = 5.0
    traffic_burst_interval: float = 1.0
    log_buffer_size: int = 1000
    seed: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).
        """
        env = os.environ if environ is None else environ
        return cls(
            host=_get(env, "SYNTHMETRICS_HOST", cls.host) or cls.host,
            port=_get_int(env, "PORT", DEFAULT_PORT),
            log_level=_get_log_level(env, "SYNTHMETRICS_LOG_LEVEL", cls.log_level),
            system_sample_interval=_get_float(
                env, "SYNTHMETRICS_SYSTEM_INTERVAL", cls.system_sample_interval
            ),
            business_sample_interval=_get_float(
                env, "SYNTHMETRICS_BUSINESS_INTERVAL", cls.business_sample_interval
            ),
            traffic_burst_interval=_get_float(
                env, "SYNTHMETRICS_TRAFFIC_INTERVAL", cls.traffic_burst_interval
            ),
            log_buffer_size=_get_int(env, "SYNTHMETRICS_LOG_BUFFER_SIZE", cls.log_buffer_size),
            seed=_get_optional_int(env, "SYNTHMETRICS_SEED"),
        )
