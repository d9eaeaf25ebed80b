from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .channel import ChunkChannel, OneShotListener
from .config import SessionConfig
from .metrics import SessionSummary, SmoothedSeries, smooth, summarize
from .receiver import ReceiveResult, Receiver
from .sender import SendResult, Sender

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Measurement:
    result: ReceiveResult
    summary: SessionSummary
    series: SmoothedSeries


def serve_once(
    config: SessionConfig,
    listener: OneShotListener | None = None,
) -> SendResult:
    """Sender side: accept one peer, stream every chunk to it, then shut down."""
    with listener or OneShotListener.bind(*config.listen_address) as lst:
        with lst.accept(config.io_timeout_s) as channel:
            send = Sender(channel, config.chunk_size_bytes, config.chunk_count).run()
    logger.info("Server exiting after handling one client.")
    return send


def measure(
    config: SessionConfig,
    connect: Callable[[], ChunkChannel] | None = None,
) -> Measurement:
    """Receiver side: connect, time every chunk, derive the figures.

    A transport abort is reported through ``Measurement.result.error``; the
    records collected before it are still summarized.
    """
    if connect is None:
        channel = ChunkChannel.connect(config.listen_host, config.listen_port, config.io_timeout_s)
    else:
        channel = connect()

    with channel:
        result = Receiver(channel, config.chunk_size_bytes, config.chunk_count).run()

    if not result.complete:
        logger.warning(
            "session incomplete: %d of %d chunks received", len(result.records), config.chunk_count
        )

    summary = summarize(
        result.records,
        config.chunk_size_bytes,
        config.assumed_rtt_seconds,
        config.assumed_tcp_window_bytes,
    )
    return Measurement(result=result, summary=summary, series=smooth(result.records, config.smoothing_window))
