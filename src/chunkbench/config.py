from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .constants import (
    DEFAULT_CHUNK_COUNT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_RTT_S,
    DEFAULT_SMOOTHING_WINDOW,
    DEFAULT_TCP_WINDOW,
)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Everything both ends must agree on before a session starts.

    The wire carries no header, so sender and receiver are expected to be
    launched with the same ``chunk_size_bytes`` and ``chunk_count``.
    """

    listen_host: str = DEFAULT_HOST
    listen_port: int = DEFAULT_PORT
    chunk_size_bytes: int = DEFAULT_CHUNK_SIZE
    chunk_count: int = DEFAULT_CHUNK_COUNT
    assumed_rtt_seconds: float = DEFAULT_RTT_S
    assumed_tcp_window_bytes: int = DEFAULT_TCP_WINDOW
    smoothing_window: int = DEFAULT_SMOOTHING_WINDOW
    io_timeout_s: float | None = None

    @property
    def listen_address(self) -> Tuple[str, int]:
        return (self.listen_host, self.listen_port)

    @property
    def total_bytes(self) -> int:
        return self.chunk_size_bytes * self.chunk_count

    def validate(self) -> "SessionConfig":
        if not 0 <= self.listen_port <= 65535:
            raise ValueError(f"listen_port out of range: {self.listen_port}")
        if self.chunk_size_bytes <= 0:
            raise ValueError(f"chunk_size_bytes must be positive, got {self.chunk_size_bytes}")
        if self.chunk_count <= 0:
            raise ValueError(f"chunk_count must be positive, got {self.chunk_count}")
        if self.assumed_rtt_seconds <= 0:
            raise ValueError(f"assumed_rtt_seconds must be positive, got {self.assumed_rtt_seconds}")
        if self.assumed_tcp_window_bytes <= 0:
            raise ValueError(
                f"assumed_tcp_window_bytes must be positive, got {self.assumed_tcp_window_bytes}"
            )
        if self.smoothing_window <= 0:
            raise ValueError(f"smoothing_window must be positive, got {self.smoothing_window}")
        if self.io_timeout_s is not None and self.io_timeout_s <= 0:
            raise ValueError(f"io_timeout_s must be positive when set, got {self.io_timeout_s}")
        return self
