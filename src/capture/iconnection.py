"""
Datagram connection interface definition.
"""
from abc import ABC, abstractmethod


class IDatagramConnection(ABC):
    """
    Source of raw datagrams.

    ``recv`` returns one datagram per call. It raises ConnectionClosedError
    once the transport is closed and TimeoutError when no datagram arrived
    in time; any other OSError is a transient receive failure.
    """

    @abstractmethod
    def recv(self, size: int) -> bytes:
        """Receive one datagram of at most ``size`` bytes."""
        pass

    @abstractmethod
    def send(self, data: bytes) -> int:
        """Send one datagram, return the number of bytes written."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection. Safe to call multiple times."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
