"""
UDP implementation of IDatagramConnection.
"""
from __future__ import annotations

import logging
import socket
import threading
from typing import Optional, Tuple

from .exceptions import ConnectionClosedError
from .iconnection import IDatagramConnection

logger = logging.getLogger(__name__)


def parse_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6-host]:port``) into its parts."""
    if not address:
        raise ValueError("server address is required")

    host, sep, port = address.rpartition(":")
    if not sep or not port:
        raise ValueError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"invalid port in address {address!r}")
    if not 0 < port_num < 65536:
        raise ValueError(f"invalid port in address {address!r}")
    return host or "localhost", port_num


class UdpConnection(IDatagramConnection):
    """Connected UDP socket."""

    def __init__(self, sock: socket.socket, timeout: Optional[float] = None):
        self._sock = sock
        self._sock.settimeout(timeout)
        self._closed = threading.Event()

    @classmethod
    def dial(cls, address: str, timeout: Optional[float] = 0.5) -> "UdpConnection":
        """
        Connect a UDP socket to ``address``.

        Args:
            address: ``host:port`` of the event server
            timeout: seconds a recv may block before raising TimeoutError
        """
        host, port = parse_address(address)
        last_error: Optional[OSError] = None
        for family, type_, proto, _, sockaddr in socket.getaddrinfo(
                host, port, type=socket.SOCK_DGRAM):
            sock = socket.socket(family, type_, proto)
            try:
                sock.connect(sockaddr)
            except OSError as e:
                sock.close()
                last_error = e
                continue
            logger.debug("connected to %s from %s", sockaddr, sock.getsockname())
            return cls(sock, timeout=timeout)

        raise last_error or OSError(f"no addresses found for {address!r}")

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def recv(self, size: int) -> bytes:
        if self.closed:
            raise ConnectionClosedError("use of closed connection")
        try:
            return self._sock.recv(size)
        except socket.timeout:
            raise
        except OSError as e:
            if self.closed:
                raise ConnectionClosedError("use of closed connection") from e
            raise

    def send(self, data: bytes) -> int:
        if self.closed:
            raise ConnectionClosedError("use of closed connection")
        return self._sock.send(data)

    def close(self) -> None:
        if self.closed:
            return
        self._closed.set()
        self._sock.close()
