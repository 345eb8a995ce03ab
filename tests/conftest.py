"""
Shared fixtures: captured frames, sample events and an in-memory connection.
"""
from __future__ import annotations

import threading
from typing import List, Optional

import pytest

from capture.exceptions import ConnectionClosedError
from capture.iconnection import IDatagramConnection
from protocol.constants import Protocol
from protocol.event import Event
from protocol.event_uuid import EventUUID

# Event captured from the event server with Wireshark
SERVER_FRAME = (
    b"\x00\x04"                # node ID
    b"\x5f\x87\x91\x00"        # time stamp
    b"\x00\x92"                # size (146)
    b"5abe8522-4f60-11"        # UUID
    b"user-agent:Mozilla/5.0 (iPhone; CPU iPhone OS 10_3_3 like Mac OS X) "
    b"AppleWebKit/603.3.8 (KHTML, like Gecko) Version/9.0 Mobile/13B143 Safari/601.1"
    b"\x00\x0a"                # protocol (HTTP)
    b"\xe4\xf7\xb9\xba"        # submitter
    b"\x75\x0f\x47\x97"        # checksum
)


def make_event(payload: str,
               protocol: int = Protocol.SSH,
               submitter: str = "10.0.0.1",
               node_id: int = 1,
               timestamp: int = 1602720000,
               seq: int = 0) -> Event:
    """Build a valid event; ``seq`` varies the UUID."""
    a, b, c, d = (int(octet) for octet in submitter.split("."))
    return Event.build(
        node_id=node_id,
        timestamp=timestamp,
        event_uuid=EventUUID(
            time_low=0x66643236 + seq,
            time_mid=0x3039,
            time_hi_and_version=0x3063,
            clock_seq_hi_and_res=0x2D,
            clock_seq_low=0x35,
            node=b"0dc-11",
        ),
        payload_bytes=payload,
        protocol=protocol,
        submitter=(a << 24) | (b << 16) | (c << 8) | d,
    )


def sample_events() -> List[Event]:
    """One or more events for every protocol the report asks about."""
    return [
        make_event("username:joseph,password:Stingercoconut", Protocol.SSH, "47.120.102.76", seq=1),
        make_event("username:root,password:123456", Protocol.SSH, "106.54.93.84", seq=2),
        make_event("username:root,password:toor", Protocol.SSH, "106.54.93.84", seq=3),
        make_event("username:admin,password:admin", Protocol.TELNET, "1.2.3.4", seq=4),
        make_event("username:pi,password:raspberry", Protocol.TELNET, "47.120.102.76", seq=5),
        make_event("user-agent:Mozilla/5.0 (X11; Linux x86_64)", Protocol.HTTP, "1.2.3.4", seq=6),
        make_event("user-agent:curl/7.68.0", Protocol.HTTP, "8.8.8.8", seq=7),
        make_event("email:chloesmith263@test.net", Protocol.SMTP, "106.54.93.84", seq=8),
        make_event("email:liamwilson186@example.net", Protocol.SMTP, "9.9.9.9", seq=9),
    ]


class MockConnection(IDatagramConnection):
    """
    Serves encoded frames from a list, then reports a closed connection.

    ``read_error`` is raised once, just before the last frame is served.
    """

    def __init__(self,
                 frames: List[bytes],
                 read_error: Optional[OSError] = None,
                 write_error: Optional[OSError] = None):
        self.frames = list(frames)
        self.read_error = read_error
        self.write_error = write_error
        self.sent: List[bytes] = []
        self.recv_calls = 0
        self._lock = threading.Lock()
        self.closed = False

    def recv(self, size: int) -> bytes:
        with self._lock:
            self.recv_calls += 1
            if self.closed or not self.frames:
                raise ConnectionClosedError("use of closed connection")
            if self.read_error is not None and len(self.frames) == 1:
                err, self.read_error = self.read_error, None
                raise err
            return self.frames.pop(0)[:size]

    def send(self, data: bytes) -> int:
        if self.write_error is not None:
            raise self.write_error
        self.sent.append(data)
        return len(data)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def server_frame() -> bytes:
    return SERVER_FRAME


@pytest.fixture
def events() -> List[Event]:
    return sample_events()


@pytest.fixture
def frames(events) -> List[bytes]:
    return [event.encode() for event in events]
