"""High-traffic simulation state machine (Idle -> Active -> Idle).

While active, the system sampler reports an elevated CPU value and a
repeating burst generates product views tagged as high traffic. The
session ends when its deadline elapses or on an explicit ``stop``. A
``start`` during an active session replaces its deadline and burst.
"""

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from synthmetrics.core import metrics as m
from synthmetrics.core.scenarios import ScenarioEngine, parse_duration

if TYPE_CHECKING:
    from synthmetrics.runtime.scheduler import Scheduler

logger = logging.getLogger(__name__)

BURST_TASK = "traffic-burst"
DEADLINE_TASK = "traffic-deadline"


class TrafficSimulation:
    """Start/stop toggle with a bounded lifetime.

    Args:
        engine: Scenario engine used to generate the burst trials. The
            simulation attaches itself so the engine can run the
            high-traffic scenario.
        scheduler: Scheduler owning the burst and deadline tasks.
        burst_interval: Seconds between bursts.
        views_per_burst: Product views generated per burst.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        engine: ScenarioEngine,
        scheduler: "Scheduler",
        burst_interval: float = 1.0,
        views_per_burst: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._engine = engine
        self._scheduler = scheduler
        self._burst_interval = burst_interval
        self._views_per_burst = views_per_burst
        self._clock = clock
        self._active = False
        self._deadline: float | None = None
        engine.traffic = self

    @property
    def active(self) -> bool:
        return self._active

    @property
    def deadline(self) -> float | None:
        """Monotonic time at which the current session ends, if active."""
        return self._deadline

    def remaining(self) -> float:
        if not self._active or self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self._clock())

    def start(self, duration_seconds: float) -> None:
        """Enter (or restart) the active state for ``duration_seconds``.

        Raises:
            InvalidRequestError: If the duration is not a positive number.
            RuntimeError: If called without a running event loop.
        """
        duration = parse_duration(duration_seconds, 0)
        self._scheduler.every(BURST_TASK, self._burst_interval, self._burst)
        self._scheduler.after(DEADLINE_TASK, duration, self._expire)
        replaced = self._active
        self._active = True
        self._deadline = self._clock() + duration
        self._engine.registry.set(m.HIGH_TRAFFIC_ACTIVE, (), 1)
        logger.info(
            "High traffic simulation %s",
            "restarted" if replaced else "started",
            extra={"duration_seconds": duration},
        )

    def stop(self) -> bool:
        """Return to idle, cancelling the burst and the deadline.

        Returns:
            True if a session was active.
        """
        was_active = self._active
        self._active = False
        self._deadline = None
        self._scheduler.cancel(BURST_TASK)
        self._scheduler.cancel(DEADLINE_TASK)
        self._engine.registry.set(m.HIGH_TRAFFIC_ACTIVE, (), 0)
        if was_active:
            logger.info("High traffic simulation stopped")
        return was_active

    def _expire(self) -> None:
        logger.info("High traffic simulation deadline reached")
        self.stop()

    def _burst(self) -> None:
        if not self._active or (
            self._deadline is not None and self._clock() >= self._deadline
        ):
            self.stop()
            return
        self._engine.high_traffic_burst(self._views_per_burst)
