"""Storage adapters implementing core ports."""

from synthmetrics.adapters.storage.ring_buffer import RingBufferLogStorage

__all__ = [
    "RingBufferLogStorage",
]
