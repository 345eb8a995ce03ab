"""
Custom exceptions for datagram ingestion.
"""


class CaptureError(Exception):
    """Base exception for ingestion hard errors."""
    pass


class HandshakeError(CaptureError):
    """Raised when the introduction datagram cannot be written."""
    pass


class ConnectionClosedError(CaptureError):
    """Raised by a connection whose transport has been closed."""
    pass
