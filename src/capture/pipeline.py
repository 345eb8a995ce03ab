"""
Datagram ingestion pipeline.

A reader thread receives datagrams and hands them to a bounded queue; the
caller's thread drains the queue, decoding and validating one event per
datagram. The queue is the only state shared between the two:

- a full queue blocks the reader (backpressure, memory bounded by the
  configured cache size)
- ``None`` in the queue means the connection closed
- cancellation is cooperative: the reader checks before each handoff, the
  consumer before each pop. An in-flight recv or decode is never interrupted.
"""
from __future__ import annotations

import io
import logging
import queue
import threading
from typing import BinaryIO, Callable, List, Optional

from protocol.event import Event

from .config import IngestConfig
from .exceptions import CaptureError, ConnectionClosedError, HandshakeError
from .iconnection import IDatagramConnection

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, int], None]


def _stopped(cancel: threading.Event, stop: Optional[threading.Event]) -> bool:
    return cancel.is_set() or (stop is not None and stop.is_set())


def _handoff(datagrams: "queue.Queue[Optional[BinaryIO]]",
             item: Optional[BinaryIO],
             cancel: threading.Event,
             stop: Optional[threading.Event],
             poll_interval: float) -> bool:
    """Block until ``item`` is queued. Returns False if stopped first."""
    while not _stopped(cancel, stop):
        try:
            datagrams.put(item, timeout=poll_interval)
            return True
        except queue.Full:
            continue
    return False


def read_datagrams(conn: IDatagramConnection,
                   datagrams: "queue.Queue[Optional[BinaryIO]]",
                   size: int,
                   cancel: threading.Event,
                   stop: Optional[threading.Event] = None,
                   poll_interval: float = 0.1) -> None:
    """
    Read datagrams of up to ``size`` bytes and queue each as a readable buffer.

    Returns when the connection closes (queueing ``None`` for the consumer),
    or when ``cancel`` or ``stop`` is set.
    """
    logger.debug("reading datagrams from the server")

    while True:
        try:
            data = conn.recv(size)
        except ConnectionClosedError:
            logger.debug("connection closed")
            break
        except TimeoutError:
            if _stopped(cancel, stop):
                return
            continue
        except OSError as e:
            logger.error("reading %d bytes from socket: %s", size, e)
            continue

        if not _handoff(datagrams, io.BytesIO(data), cancel, stop, poll_interval):
            return

    _handoff(datagrams, None, cancel, stop, poll_interval)


class DatagramPipeline:
    """One ingestion session over a datagram connection."""

    def __init__(self,
                 conn: IDatagramConnection,
                 config: Optional[IngestConfig] = None,
                 cancel: Optional[threading.Event] = None,
                 progress: Optional[ProgressFn] = None):
        self.conn = conn
        self.config = config or IngestConfig()
        self.cancel = cancel or threading.Event()
        self.progress = progress
        self.datagram_size = self.config.clamped_datagram_size()
        self.datagrams: "queue.Queue[Optional[BinaryIO]]" = queue.Queue(
            maxsize=self.config.queue_capacity(self.datagram_size)
        )
        self._stop = threading.Event()
        self._reader: Optional[threading.Thread] = None

    def collect(self) -> List[Event]:
        """
        Collect up to ``config.datagrams`` valid events.

        Invalid events are logged and discarded. Fewer events are returned
        if the connection closes or the session is cancelled first.

        Raises:
            CaptureError: no datagrams requested
            HandshakeError: the introduction could not be written
            EventFormatError: a datagram could not be decoded
        """
        total = self.config.datagrams
        if total < 1:
            raise CaptureError("no datagrams read from the server")

        # The server learns our address from the introduction; UDP has no
        # connection setup of its own.
        try:
            n = self.conn.send(self.config.introduction)
        except OSError as e:
            raise HandshakeError(f"writing introduction: {e}") from e
        logger.debug("wrote %d-byte introduction to the server", n)

        self._start_reader()
        try:
            return self._consume(total)
        finally:
            self._stop.set()
            self.join(timeout=self.config.reader_join_timeout)
            if self._reader.is_alive():
                logger.debug("reader still blocked in recv; it exits on its next datagram or close")

    def _start_reader(self) -> None:
        self._reader = threading.Thread(
            target=read_datagrams,
            args=(self.conn, self.datagrams, self.datagram_size, self.cancel, self._stop),
            kwargs={"poll_interval": self.config.poll_interval},
            name="datagram-reader",
            daemon=True,
        )
        self._reader.start()

    def _next_datagram(self) -> Optional[BinaryIO]:
        """Pop the next datagram; None if cancelled or the queue is closed."""
        while not self.cancel.is_set():
            try:
                r = self.datagrams.get(timeout=self.config.poll_interval)
            except queue.Empty:
                continue
            if r is None:
                logger.debug("datagram queue closed")
            return r
        return None

    def _consume(self, total: int) -> List[Event]:
        events: List[Event] = []

        for i in range(1, total + 1):
            r = self._next_datagram()
            if r is None:
                break

            if self.progress is not None:
                self.progress(i, total)

            event, _ = Event.read_from(r)
            if not event.validate():
                logger.warning("event %s is invalid; discarding it", event.event_uuid)
                continue

            events.append(event)

        return events

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the reader thread to exit."""
        if self._reader is not None:
            self._reader.join(timeout)


def collect_events(conn: IDatagramConnection,
                   config: Optional[IngestConfig] = None,
                   cancel: Optional[threading.Event] = None,
                   progress: Optional[ProgressFn] = None) -> List[Event]:
    """Run one ingestion session and return the valid events collected."""
    return DatagramPipeline(conn, config=config, cancel=cancel, progress=progress).collect()
