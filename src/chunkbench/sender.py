from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from .channel import ChunkChannel
from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SendResult:
    chunks_sent: int
    bytes_sent: int
    duration_s: float


@dataclass(slots=True)
class Sender:
    channel: ChunkChannel
    chunk_size_bytes: int
    chunk_count: int

    def run(self) -> SendResult:
        # one chunk must fit in the transport's buffer, otherwise the app, not TCP, paces the transfer
        self.channel.set_send_buffer(self.chunk_size_bytes)
        chunk = bytes(self.chunk_size_bytes)

        start = time.monotonic()
        sent = 0
        for i in range(1, self.chunk_count + 1):
            try:
                self.channel.send_chunk(chunk)
            except TransportError as exc:
                exc.chunks_done = sent
                logger.error("failed to send chunk %d/%d: %s", i, self.chunk_count, exc)
                raise
            sent += 1
            logger.debug("sent chunk %d (%d bytes)", i, self.chunk_size_bytes)

        duration = time.monotonic() - start
        logger.info("Completed %d chunks transfer to client", sent)
        return SendResult(chunks_sent=sent, bytes_sent=sent * self.chunk_size_bytes, duration_s=duration)
