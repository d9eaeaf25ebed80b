from __future__ import annotations


class ChunkBenchError(Exception):
    """Base class for every failure that ends a measurement session."""


class ConnectError(ChunkBenchError):
    """Bind, connect or accept failed; nothing was measured."""


class TransportError(ChunkBenchError):
    def __init__(self, message: str, *, chunks_done: int = 0, bytes_received: int = 0):
        super().__init__(message)
        self.chunks_done = chunks_done
        self.bytes_received = bytes_received


class ComputationError(ChunkBenchError, ZeroDivisionError):
    """A derived figure would divide by zero (no records, or zero time)."""
