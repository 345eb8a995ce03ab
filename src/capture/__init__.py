"""
Datagram ingestion subsystem.
"""

from .config import IngestConfig, MIN_DATAGRAM_BYTES, MAX_DATAGRAM_BYTES
from .exceptions import CaptureError, HandshakeError, ConnectionClosedError
from .iconnection import IDatagramConnection
from .udp_connection import UdpConnection, parse_address
from .pipeline import DatagramPipeline, collect_events, read_datagrams

__all__ = [
    'IngestConfig',
    'MIN_DATAGRAM_BYTES',
    'MAX_DATAGRAM_BYTES',
    'CaptureError',
    'HandshakeError',
    'ConnectionClosedError',
    'IDatagramConnection',
    'UdpConnection',
    'parse_address',
    'DatagramPipeline',
    'collect_events',
    'read_datagrams',
]
