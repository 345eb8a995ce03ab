"""
test_udp_connection.py - Unit tests for the UDP transport.
"""
import socket

import pytest

from capture.exceptions import ConnectionClosedError
from capture.udp_connection import UdpConnection, parse_address


@pytest.fixture
def server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.mark.parametrize("address,expected", [
    ("localhost:1035", ("localhost", 1035)),
    ("127.0.0.1:9", ("127.0.0.1", 9)),
    ("[::1]:1035", ("::1", 1035)),
    (":1035", ("localhost", 1035)),
])
def test_parse_address(address, expected):
    assert parse_address(address) == expected


@pytest.mark.parametrize("address,message", [
    ("", "address is required"),
    ("localhost", "missing port"),
    ("localhost:", "missing port"),
    ("localhost:http", "invalid port"),
    ("localhost:0", "invalid port"),
    ("localhost:70000", "invalid port"),
])
def test_parse_address_errors(address, message):
    with pytest.raises(ValueError, match=message):
        parse_address(address)


def test_send_and_recv(server):
    port = server.getsockname()[1]
    with UdpConnection.dial(f"127.0.0.1:{port}", timeout=2.0) as conn:
        assert conn.send(b"Feed me, Seymour!") == 17
        data, peer = server.recvfrom(512)
        assert data == b"Feed me, Seymour!"

        server.sendto(b"\x00" * 600, peer)
        # oversized datagrams are truncated to the read size
        assert conn.recv(512) == b"\x00" * 512


def test_recv_times_out(server):
    port = server.getsockname()[1]
    with UdpConnection.dial(f"127.0.0.1:{port}", timeout=0.05) as conn:
        with pytest.raises(TimeoutError):
            conn.recv(512)


def test_closed_connection(server):
    port = server.getsockname()[1]
    conn = UdpConnection.dial(f"127.0.0.1:{port}")
    conn.close()
    conn.close()

    assert conn.closed
    with pytest.raises(ConnectionClosedError):
        conn.recv(512)
    with pytest.raises(ConnectionClosedError):
        conn.send(b"hello")


def test_dial_rejects_bad_address():
    with pytest.raises(ValueError):
        UdpConnection.dial("localhost")
