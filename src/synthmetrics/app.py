"""Application wiring.

``Telemetry`` owns every piece of process state (registry, snapshot, log
buffer, scenario engine, traffic simulation, samplers and the scheduler
that drives them). ``create_app`` mounts it on a FastAPI application whose
lifespan starts and stops the background samplers.

Run with:
    synthmetrics
    uvicorn --factory synthmetrics.app:create_app
"""

import logging
import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from synthmetrics.adapters.frameworks.fastapi import create_simulator_router
from synthmetrics.adapters.logging import TelemetryLogHandler
from synthmetrics.adapters.storage.ring_buffer import RingBufferLogStorage
from synthmetrics.config import Settings
from synthmetrics.core.logs import EventLogEmitter
from synthmetrics.core.metrics import create_registry
from synthmetrics.core.ports import RandomSource
from synthmetrics.core.samplers import BusinessSampler, SystemSampler
from synthmetrics.core.scenarios import ScenarioEngine
from synthmetrics.core.snapshot import AggregateSnapshot
from synthmetrics.core.traffic import TrafficSimulation
from synthmetrics.runtime.scheduler import Scheduler

logger = logging.getLogger(__name__)

SYSTEM_SAMPLER_TASK = "system-sampler"
BUSINESS_SAMPLER_TASK = "business-sampler"


class Telemetry:
    """Container for all simulator state and background tasks.

    Args:
        settings: Service settings (default: ``Settings()``).
        rng: Random source shared by scenarios and the business sampler
            (default: ``random.Random(settings.seed)``).
        scheduler: Scheduler for background tasks (default: a new one).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rng: RandomSource | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rng: RandomSource = rng if rng is not None else random.Random(self.settings.seed)
        self.registry = create_registry()
        self.snapshot = AggregateSnapshot()
        self.log_storage = RingBufferLogStorage(self.settings.log_buffer_size)
        self.emitter = EventLogEmitter(self.log_storage)
        self.engine = ScenarioEngine(self.registry, self.snapshot, self.emitter, self.rng)
        self.scheduler = scheduler or Scheduler()
        self.traffic = TrafficSimulation(
            self.engine,
            self.scheduler,
            burst_interval=self.settings.traffic_burst_interval,
        )
        self.system_sampler = SystemSampler(
            self.registry, high_traffic=lambda: self.traffic.active
        )
        self.business_sampler = BusinessSampler(self.registry, self.rng)
        self.log_handler = TelemetryLogHandler(self.log_storage)
        self._running = False
        self._previous_level = logging.NOTSET

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Attach the log bridge and start both samplers."""
        if self._running:
            return
        app_logger = logging.getLogger("synthmetrics")
        self._previous_level = app_logger.level
        app_logger.setLevel(self.settings.log_level)
        app_logger.addHandler(self.log_handler)
        self.scheduler.every(
            SYSTEM_SAMPLER_TASK,
            self.settings.system_sample_interval,
            self.system_sampler.tick,
            immediate=True,
        )
        self.scheduler.every(
            BUSINESS_SAMPLER_TASK,
            self.settings.business_sample_interval,
            self.business_sampler.tick,
            immediate=True,
        )
        self._running = True
        logger.info("Telemetry samplers started")

    async def stop(self) -> None:
        """End any traffic simulation, cancel all tasks and detach the log bridge."""
        if not self._running:
            return
        self.traffic.stop()
        await self.scheduler.stop()
        logger.info("Telemetry samplers stopped")
        app_logger = logging.getLogger("synthmetrics")
        app_logger.removeHandler(self.log_handler)
        app_logger.setLevel(self._previous_level)
        self._running = False


def create_app(
    settings: Settings | None = None,
    telemetry: Telemetry | None = None,
) -> FastAPI:
    """Create and configure the simulator FastAPI application.

    Args:
        settings: Service settings (default: read from the environment).
        telemetry: Pre-built telemetry container, mainly for tests.

    Returns:
        Configured FastAPI application instance
    """
    if telemetry is None:
        telemetry = Telemetry(settings or Settings.from_env())

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Start samplers on startup and cancel them on shutdown."""
        await telemetry.start()
        yield
        await telemetry.stop()

    app = FastAPI(title="Synthetic Telemetry Generator", lifespan=lifespan)
    app.state.telemetry = telemetry
    app.include_router(create_simulator_router(telemetry.engine, telemetry.log_storage))
    return app
