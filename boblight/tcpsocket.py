"""Non-blocking TCP client and server sockets with select-based timeouts."""

from __future__ import annotations

import errno
import os
import select
import socket

from .misc import to_string

_RECV_SIZE = 1000

# (level, option, value) pairs for keepalive: on, two probes, 20 s idle, 20 s between probes
_KEEPALIVE_OPTIONS = (
    (socket.SOL_SOCKET, "SO_KEEPALIVE", 1),
    (socket.IPPROTO_TCP, "TCP_KEEPCNT", 2),
    (socket.IPPROTO_TCP, "TCP_KEEPIDLE", 20),
    (socket.IPPROTO_TCP, "TCP_KEEPINTVL", 20),
)


class SocketError(Exception):
    """A socket operation failed."""


class SocketTimeout(SocketError):
    """A socket operation did not complete within the timeout."""


class _TcpSocket:
    """State and helpers shared by client and server sockets."""

    def __init__(self) -> None:
        self.address = ""
        self.port = -1
        self.usectimeout = -1
        self._sock: socket.socket | None = None

    def _socket_open(self) -> bool:
        return self._sock is not None

    def _close_socket(self) -> None:
        if self._sock is not None:
            try:
                self._sock.setblocking(True)
            except OSError:
                pass
            self._sock.close()
            self._sock = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self._close_socket()

    def _where(self) -> str:
        return f"{self.address}:{to_string(self.port)}"

    def _resolve(self, address: str) -> str:
        try:
            return socket.gethostbyname(address)
        except OSError as exc:
            raise SocketError(f"gethostbyname() {self._where()} {exc}") from exc

    def _set_sock_options(self) -> None:
        sock = self._require_open()
        for level, name, value in _KEEPALIVE_OPTIONS:
            option = getattr(socket, name, None)
            if option is None:
                break
            try:
                sock.setsockopt(level, option, value)
            except OSError:
                break
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except OSError as exc:
            raise SocketError(f"TCP_NODELAY {exc.strerror}") from exc

    def _require_open(self) -> socket.socket:
        if self._sock is None:
            raise SocketError("socket closed")
        return self._sock

    def _wait_for_socket(self, write: bool, timeoutstr: str) -> None:
        """Block until the socket is readable or writable, raising on timeout or error."""
        sock = self._require_open()
        timeout = self.usectimeout / 1_000_000.0 if self.usectimeout > 0 else None
        try:
            if write:
                _, ready, _ = select.select([], [sock], [], timeout)
            else:
                ready, _, _ = select.select([sock], [], [], timeout)
        except OSError as exc:
            raise SocketError(f"select() {exc.strerror}") from exc

        if not ready:
            raise SocketTimeout(f"{self._where()} {timeoutstr} timed out")

        try:
            state = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as exc:
            raise SocketError(f"getsockopt() {exc.strerror}") from exc
        if state:
            raise SocketError(f"SO_ERROR {self._where()} {os.strerror(state)}")


class TcpClientSocket(_TcpSocket):
    """A connected TCP stream, either opened to a server or accepted from one."""

    def is_open(self) -> bool:
        """True while the socket is open."""
        return self._socket_open()

    def close(self) -> None:
        """Close the socket if it is open."""
        self._close_socket()

    def open(self, address: str, port: int, usectimeout: int = -1) -> None:
        """Connect to ``address``:``port``, waiting at most ``usectimeout`` microseconds."""
        self.close()
        self.address = address
        self.port = port
        self.usectimeout = usectimeout

        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            raise SocketError(f"socket() {exc.strerror}") from exc

        try:
            self._sock.setblocking(False)
            host = self._resolve(address)
            result = self._sock.connect_ex((host, port))
            if result not in (0, errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EAGAIN):
                raise SocketError(f"connect() {address}:{to_string(port)} {os.strerror(result)}")
            self._wait_for_socket(True, "Connect")
        except BaseException:
            self.close()
            raise

        # the socket may still work when these fail
        try:
            self._set_sock_options()
        except SocketError:
            pass

    @classmethod
    def _from_accepted(cls, address: str, port: int, sock: socket.socket,
                       usectimeout: int) -> TcpClientSocket:
        client = cls()
        client.address = address
        client.port = port
        client.usectimeout = usectimeout
        client._sock = sock
        try:
            sock.setblocking(False)
            client._set_sock_options()
        except OSError as exc:
            client.close()
            raise SocketError(f"F_SETFL {exc.strerror}") from exc
        except SocketError:
            client.close()
            raise
        return client

    def read(self) -> bytes:
        """Wait for data, then return everything currently buffered on the socket."""
        sock = self._require_open()
        self._wait_for_socket(False, "Read")

        data = bytearray()
        while True:
            try:
                chunk = sock.recv(_RECV_SIZE)
            except BlockingIOError:
                return bytes(data)
            except OSError as exc:
                raise SocketError(f"recv() {self._where()} {exc.strerror}") from exc
            if not chunk:
                if not data:
                    raise SocketError(f"{self._where()} Connection closed")
                return bytes(data)
            data += chunk

    def write(self, data: bytes | str) -> None:
        """Send all of ``data``; text is sent as UTF-8."""
        sock = self._require_open()
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        view = memoryview(payload)
        written = 0
        while written < len(payload):
            self._wait_for_socket(True, "Write")
            try:
                written += sock.send(view[written:])
            except BlockingIOError:
                continue
            except OSError as exc:
                raise SocketError(f"send() {self._where()} {exc.strerror}") from exc


class TcpServerSocket(_TcpSocket):
    """A listening TCP socket."""

    def is_open(self) -> bool:
        """True while the socket is open."""
        return self._socket_open()

    def close(self) -> None:
        """Close the socket if it is open."""
        self._close_socket()

    def open(self, address: str, port: int, usectimeout: int = -1) -> None:
        """Listen on ``address``:``port``; an empty address listens on every interface."""
        self.close()
        self.address = address or "*"
        self.port = port
        self.usectimeout = usectimeout

        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            raise SocketError(f"socket() {self._where()} {exc.strerror}") from exc

        try:
            try:
                self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            except OSError:
                pass

            host = self._resolve(address) if address else "0.0.0.0"
            try:
                self._sock.bind((host, port))
            except OSError as exc:
                raise SocketError(f"bind() {self._where()} {exc.strerror}") from exc
            self.port = self._sock.getsockname()[1]

            try:
                self._sock.listen(socket.SOMAXCONN)
            except OSError as exc:
                raise SocketError(f"listen() {self._where()} {exc.strerror}") from exc

            try:
                self._sock.setblocking(False)
            except OSError as exc:
                raise SocketError(f"F_SETFL {exc.strerror}") from exc
        except BaseException:
            self.close()
            raise

    def accept(self) -> TcpClientSocket:
        """Wait for and return the next incoming connection."""
        sock = self._require_open()
        self._wait_for_socket(False, "Accept")
        try:
            conn, (address, port) = sock.accept()
        except OSError as exc:
            raise SocketError(f"accept() {exc.strerror}") from exc
        return TcpClientSocket._from_accepted(address, port, conn, self.usectimeout)