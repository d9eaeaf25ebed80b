from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .channel import ChunkChannel
from .errors import ChunkBenchError, ComputationError, TransportError
from .metrics import ChunkRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReceiveResult:
    records: Tuple[ChunkRecord, ...]
    error: ChunkBenchError | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class Receiver:
    """Reads ``chunk_count`` chunks, timing each one from request to last byte.

    A transport failure, or a chunk too fast for the clock to time, ends the
    loop early; whatever was fully received is still returned so it can be
    summarized.
    """

    channel: ChunkChannel
    chunk_size_bytes: int
    chunk_count: int
    clock: Callable[[], float] = time.perf_counter
    on_record: Optional[Callable[[ChunkRecord], None]] = None

    def run(self) -> ReceiveResult:
        records: List[ChunkRecord] = []

        for i in range(1, self.chunk_count + 1):
            start = self.clock()
            try:
                self.channel.recv_exact(self.chunk_size_bytes)
            except TransportError as exc:
                exc.chunks_done = len(records)
                logger.error("chunk %d/%d aborted: %s", i, self.chunk_count, exc)
                return ReceiveResult(tuple(records), exc)
            end = self.clock()

            try:
                record = ChunkRecord.measure(i, self.chunk_size_bytes, end - start)
            except ComputationError as exc:
                logger.error("chunk %d/%d could not be timed: %s", i, self.chunk_count, exc)
                return ReceiveResult(tuple(records), exc)
            records.append(record)
            logger.info(
                "Chunk %d: Download Time: %.2fs, Effective Data Rate: %.2f bps",
                record.index,
                record.duration_seconds,
                record.effective_rate_bps,
            )
            if self.on_record is not None:
                self.on_record(record)

        return ReceiveResult(tuple(records))
