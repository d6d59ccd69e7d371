import pytest

from boblight.tcpsocket import (
    SocketError,
    SocketTimeout,
    TcpClientSocket,
    TcpServerSocket,
)

TIMEOUT = 2_000_000


@pytest.fixture
def server():
    srv = TcpServerSocket()
    srv.open("127.0.0.1", 0, TIMEOUT)
    yield srv
    srv.close()


@pytest.fixture
def pair(server):
    client = TcpClientSocket()
    client.open("127.0.0.1", server.port, TIMEOUT)
    peer = server.accept()
    yield client, peer
    client.close()
    peer.close()


def _read_exactly(sock, size):
    data = b""
    while len(data) < size:
        data += sock.read()
    return data


def test_round_trip_client_to_server(pair):
    client, peer = pair
    client.write(b"hello\n")
    assert _read_exactly(peer, 6) == b"hello\n"


def test_round_trip_text_server_to_client(pair):
    client, peer = pair
    peer.write("get version\n")
    assert _read_exactly(client, 12) == b"get version\n"


def test_large_payload_round_trip(pair):
    client, peer = pair
    payload = bytes(range(256)) * 200
    client.write(payload)
    assert _read_exactly(peer, len(payload)) == payload


def test_accepted_socket_reports_peer_address(pair):
    client, peer = pair
    assert peer.address == "127.0.0.1"
    assert peer.is_open()


def test_read_on_closed_socket_raises():
    sock = TcpClientSocket()
    assert not sock.is_open()
    with pytest.raises(SocketError, match="socket closed"):
        sock.read()


def test_write_on_closed_socket_raises():
    with pytest.raises(SocketError, match="socket closed"):
        TcpClientSocket().write(b"ping\n")


def test_accept_on_closed_server_raises():
    with pytest.raises(SocketError, match="socket closed"):
        TcpServerSocket().accept()


def test_read_times_out(server):
    client = TcpClientSocket()
    client.open("127.0.0.1", server.port, 100_000)
    peer = server.accept()
    try:
        with pytest.raises(SocketTimeout, match="Read timed out") as info:
            client.read()
        assert isinstance(info.value, SocketError)
        assert str(info.value).startswith(f"127.0.0.1:{server.port} ")
    finally:
        client.close()
        peer.close()


def test_accept_times_out():
    srv = TcpServerSocket()
    srv.open("127.0.0.1", 0, 50_000)
    try:
        with pytest.raises(SocketTimeout, match="Accept timed out"):
            srv.accept()
    finally:
        srv.close()


def test_read_after_peer_closes_raises(pair):
    client, peer = pair
    peer.close()
    with pytest.raises(SocketError, match="Connection closed"):
        client.read()


def test_data_before_close_is_returned(pair):
    client, peer = pair
    peer.write(b"ping 1\n")
    peer.close()
    assert _read_exactly(client, 7) == b"ping 1\n"


def test_connect_refused_raises():
    srv = TcpServerSocket()
    srv.open("127.0.0.1", 0)
    port = srv.port
    srv.close()
    client = TcpClientSocket()
    with pytest.raises(SocketError) as info:
        client.open("127.0.0.1", port, TIMEOUT)
    assert not isinstance(info.value, SocketTimeout)
    assert not client.is_open()


def test_close_marks_socket_closed(pair):
    client, _ = pair
    assert client.is_open()
    client.close()
    assert not client.is_open()
    with pytest.raises(SocketError, match="socket closed"):
        client.write(b"x")


def test_server_empty_address_listens_everywhere():
    srv = TcpServerSocket()
    srv.open("", 0, TIMEOUT)
    try:
        assert srv.address == "*"
        assert srv.port > 0
        with TcpClientSocket() as client:
            client.open("127.0.0.1", srv.port, TIMEOUT)
            peer = srv.accept()
            client.write(b"sync\n")
            assert _read_exactly(peer, 5) == b"sync\n"
            peer.close()
    finally:
        srv.close()
    assert not srv.is_open()


def test_context_manager_closes(server):
    with TcpClientSocket() as client:
        client.open("127.0.0.1", server.port, TIMEOUT)
        server.accept().close()
        assert client.is_open()
    assert not client.is_open()