"""Runtime support: scheduling of background tasks."""

from synthmetrics.runtime.scheduler import Scheduler

__all__ = ["Scheduler"]
