from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Dict

from .channel import ChunkChannel, OneShotListener
from .config import SessionConfig
from .sender import SendResult
from .session import Measurement, measure, serve_once


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    send: SendResult | None
    measurement: Measurement


def run_benchmark(config: SessionConfig) -> BenchmarkResult:
    """Run both ends of a session in one process over loopback.

    The sender runs in a worker thread; the listener is bound before it starts
    so the receiver can never race ahead of ``listen()``.
    """
    listener = OneShotListener.bind(config.listen_host, config.listen_port)
    host, port = listener.address
    local = replace(config, listen_host=host, listen_port=port)

    holder: Dict[str, object] = {}

    def send_runner() -> None:
        try:
            holder["send"] = serve_once(local, listener)
        except BaseException as exc:
            holder["error"] = exc

    t = threading.Thread(target=send_runner, daemon=True)
    t.start()
    try:
        measurement = measure(
            local, connect=lambda: ChunkChannel.connect(host, port, local.io_timeout_s)
        )
    except BaseException:
        # unblock a sender still parked in accept()
        listener.close()
        raise
    t.join()

    # a receiver-side abort is already reported in the measurement; the sender's
    # matching broken-pipe error is expected in that case
    if "error" in holder and measurement.result.complete:
        raise holder["error"]  # type: ignore[misc]

    send = holder.get("send")
    return BenchmarkResult(send=send if isinstance(send, SendResult) else None, measurement=measurement)
