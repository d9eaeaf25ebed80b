from __future__ import annotations

import enum
import logging
import socket
from typing import Tuple

from .errors import ConnectError, TransportError

logger = logging.getLogger(__name__)


class ChunkChannel:
    """Ordered byte stream over one connected TCP socket.

    The channel owns the socket and closes it exactly once.
    """

    def __init__(self, sock: socket.socket, peer: Tuple[str, int] | None = None):
        self.sock = sock
        self.peer = peer
        self._closed = False

    @classmethod
    def connect(cls, host: str, port: int, timeout_s: float | None = None) -> "ChunkChannel":
        try:
            sock = socket.create_connection((host, port), timeout=timeout_s)
        except OSError as exc:
            raise ConnectError(f"connect to {host}:{port} failed: {exc}") from exc
        sock.settimeout(timeout_s)
        logger.info("connected to %s:%d", host, port)
        return cls(sock, (host, port))

    def set_send_buffer(self, size: int) -> int:
        """Ask for at least ``size`` bytes of send buffer; returns what the kernel granted."""
        try:
            self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, size)
            granted = self.sock.getsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF)
        except OSError as exc:
            raise TransportError(f"cannot size send buffer: {exc}") from exc
        if granted < size:
            logger.warning("send buffer capped at %d bytes (asked for %d)", granted, size)
        return granted

    def send_chunk(self, data: bytes) -> None:
        try:
            self.sock.sendall(data)
        except OSError as exc:
            raise TransportError(f"send failed: {exc}") from exc

    def recv_exact(self, n: int) -> bytes:
        buf = bytearray(n)
        view = memoryview(buf)
        got = 0
        while got < n:
            try:
                k = self.sock.recv_into(view[got:], n - got)
            except OSError as exc:
                raise TransportError(f"receive failed after {got}/{n} bytes: {exc}", bytes_received=got) from exc
            if k == 0:
                raise TransportError(f"peer closed after {got}/{n} bytes", bytes_received=got)
            got += k
        return bytes(buf)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # already disconnected
        self.sock.close()

    def __enter__(self) -> "ChunkChannel":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ListenerState(enum.Enum):
    LISTENING = "listening"
    SESSION_ACTIVE = "session_active"
    CLOSED = "closed"


class OneShotListener:
    """Accepts a single peer, then stops listening for good."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.state = ListenerState.LISTENING

    @classmethod
    def bind(cls, host: str, port: int) -> "OneShotListener":
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(1)
        except OSError as exc:
            sock.close()
            raise ConnectError(f"bind {host}:{port} failed: {exc}") from exc
        listener = cls(sock)
        logger.info("listening on %s:%d", *listener.address)
        return listener

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self.sock.getsockname()[:2]
        return host, port

    def accept(self, timeout_s: float | None = None) -> ChunkChannel:
        if self.state is not ListenerState.LISTENING:
            raise RuntimeError(f"accept() called in state {self.state.value}")
        self.sock.settimeout(timeout_s)
        try:
            conn, peer = self.sock.accept()
        except OSError as exc:
            self.close()
            raise ConnectError(f"accept failed: {exc}") from exc
        conn.settimeout(timeout_s)
        # no second client: the listening socket goes away as soon as one peer is in
        self.sock.close()
        self.state = ListenerState.SESSION_ACTIVE
        logger.info("accepted connection from %s:%d", peer[0], peer[1])
        return ChunkChannel(conn, peer)

    def close(self) -> None:
        if self.state is ListenerState.CLOSED:
            return
        if self.state is ListenerState.LISTENING:
            try:
                # wakes a thread blocked in accept() on Linux
                self.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        self.sock.close()
        self.state = ListenerState.CLOSED

    def __enter__(self) -> "OneShotListener":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
