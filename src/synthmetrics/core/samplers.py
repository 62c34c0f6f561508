"""Background samplers that refresh gauge state.

``SystemSampler`` writes pseudo-system gauges: a scripted CPU value plus
real memory, load average and uptime figures from psutil.
``BusinessSampler`` writes randomized presentation gauges. Both expose a
synchronous ``tick`` that the scheduler runs on a fixed interval.
"""

import logging
import random
import time
from collections.abc import Callable

import psutil

from synthmetrics.core import metrics as m
from synthmetrics.core.ports import RandomSource
from synthmetrics.core.registry import MetricRegistry

logger = logging.getLogger(__name__)

HIGH_TRAFFIC_CPU_PERCENT = 85.0
NORMAL_CPU_PERCENT = 15.0

# psutil raises its own Error hierarchy next to the usual OS failures
_SAMPLE_ERRORS = (OSError, AttributeError, RuntimeError, NotImplementedError, psutil.Error)


class SystemSampler:
    """Writes CPU, memory, load average and uptime gauges.

    Each sub-measurement is sampled independently; one that is unavailable
    on this platform is skipped for the tick without affecting the others.

    Args:
        registry: Registry with the simulator taxonomy declared.
        high_traffic: Callable reporting whether a traffic simulation is active.
        clock: Wall clock used for uptime (default: ``time.time``).
    """

    def __init__(
        self,
        registry: MetricRegistry,
        high_traffic: Callable[[], bool] = lambda: False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._registry = registry
        self._high_traffic = high_traffic
        self._clock = clock
        self._started_at = clock()

    def tick(self) -> None:
        """Sample every sub-measurement once."""
        for name, sample in (
            ("cpu", self._sample_cpu),
            ("memory", self._sample_memory),
            ("load_average", self._sample_load_average),
            ("uptime", self._sample_uptime),
        ):
            try:
                sample()
            except _SAMPLE_ERRORS as e:
                logger.debug("System metric %s unavailable: %s", name, e)

    def _sample_cpu(self) -> None:
        value = HIGH_TRAFFIC_CPU_PERCENT if self._high_traffic() else NORMAL_CPU_PERCENT
        self._registry.set(m.SYSTEM_CPU_USAGE_PERCENT, ("total",), value)

    def _sample_memory(self) -> None:
        mem = psutil.virtual_memory()
        self._registry.set(m.SYSTEM_MEMORY_BYTES, ("total",), float(mem.total))
        self._registry.set(m.SYSTEM_MEMORY_BYTES, ("used",), float(mem.used))
        self._registry.set(m.SYSTEM_MEMORY_BYTES, ("free",), float(mem.available))
        self._registry.set(m.SYSTEM_MEMORY_USAGE_PERCENT, ("used",), float(mem.percent))

    def _sample_load_average(self) -> None:
        one, five, fifteen = psutil.getloadavg()
        self._registry.set(m.SYSTEM_LOAD_AVERAGE, ("1m",), one)
        self._registry.set(m.SYSTEM_LOAD_AVERAGE, ("5m",), five)
        self._registry.set(m.SYSTEM_LOAD_AVERAGE, ("15m",), fifteen)

    def _sample_uptime(self) -> None:
        now = self._clock()
        self._registry.set(m.SYSTEM_UPTIME_SECONDS, ("process",), now - self._started_at)
        self._registry.set(m.SYSTEM_UPTIME_SECONDS, ("system",), now - psutil.boot_time())


class BusinessSampler:
    """Sets active users, average cart value and connection count gauges.

    Values are drawn independently on every tick and have no relation to
    real request traffic.
    """

    def __init__(self, registry: MetricRegistry, rng: RandomSource | None = None) -> None:
        self._registry = registry
        self._rng: RandomSource = rng if rng is not None else random.Random()

    def tick(self) -> None:
        active_users = self._rng.randrange(50, 500)
        cart_value = round(self._rng.uniform(25, 300), 2)
        # uniform() may return its upper bound; the range is half-open
        cart_value = min(cart_value, 299.99)
        connections = int(active_users * self._rng.uniform(0.8, 1.2))
        self._registry.set(m.ACTIVE_USERS, (), active_users)
        self._registry.set(m.CART_VALUE_AVERAGE, (), cart_value)
        self._registry.set(m.ACTIVE_CONNECTIONS, (), connections)
