from __future__ import annotations

import pytest

from chunkbench.errors import TransportError


class FakeChannel:
    """Hands out zero-filled chunks; fails once ``fail_after`` chunks are consumed."""

    def __init__(self, fail_after: int | None = None):
        self.fail_after = fail_after
        self.reads = 0
        self.sent: list[bytes] = []
        self.send_buffer_requests: list[int] = []
        self.closed = False

    def recv_exact(self, n: int) -> bytes:
        if self.fail_after is not None and self.reads >= self.fail_after:
            raise TransportError(f"peer closed after 0/{n} bytes")
        self.reads += 1
        return bytes(n)

    def send_chunk(self, data: bytes) -> None:
        if self.fail_after is not None and len(self.sent) >= self.fail_after:
            raise TransportError("send failed: broken pipe")
        self.sent.append(data)

    def set_send_buffer(self, size: int) -> int:
        self.send_buffer_requests.append(size)
        return size

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class StepClock:
    """Advances by ``step`` on every read, so each chunk lasts exactly one step."""

    def __init__(self, step: float):
        self.step = step
        self.now = 0.0

    def __call__(self) -> float:
        t = self.now
        self.now += self.step
        return t


@pytest.fixture
def fake_channel():
    return FakeChannel


@pytest.fixture
def step_clock():
    return StepClock
