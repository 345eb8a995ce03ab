"""
Ingestion configuration.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_DATAGRAM_BYTES = 512
MAX_DATAGRAM_BYTES = 65535

DEFAULT_DATAGRAMS = 37529
DEFAULT_CACHE_MB = 20

INTRODUCTION = b"Feed me, Seymour!"


@dataclass
class IngestConfig:
    """Ingestion session configuration."""
    datagrams: int = DEFAULT_DATAGRAMS
    """Events to collect before returning."""
    datagram_size: int = MIN_DATAGRAM_BYTES
    """Largest datagram read from the socket."""
    cache_mb: int = DEFAULT_CACHE_MB
    """MB of RAM used to buffer datagrams waiting to be decoded (min 1)."""
    poll_interval: float = 0.1
    """Seconds between cancellation checks while blocked."""
    reader_join_timeout: float = 1.0
    """Seconds a finished session waits for its reader thread to exit."""
    introduction: bytes = INTRODUCTION

    def clamped_datagram_size(self) -> int:
        """Datagram size clamped into the valid range, warning when it moves."""
        size = self.datagram_size
        if size < MIN_DATAGRAM_BYTES:
            logger.warning("%d is below the minimum datagram size; defaulting to %d",
                           size, MIN_DATAGRAM_BYTES)
            return MIN_DATAGRAM_BYTES
        if size > MAX_DATAGRAM_BYTES:
            logger.warning("%d exceeds the maximum datagram size; defaulting to %d",
                           size, MAX_DATAGRAM_BYTES)
            return MAX_DATAGRAM_BYTES
        return size

    @property
    def byte_budget(self) -> int:
        return max(1, self.cache_mb) << 20

    def queue_capacity(self, datagram_size: int) -> int:
        return max(1, self.byte_budget // datagram_size)
