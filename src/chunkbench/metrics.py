"""Derived figures for a chunked transfer.

Everything here is a pure function of its arguments: records in, figures out.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .constants import DEFAULT_SMOOTHING_WINDOW
from .errors import ComputationError


@dataclass(frozen=True, slots=True)
class ChunkRecord:
    index: int
    duration_seconds: float
    effective_rate_bps: float

    @classmethod
    def measure(cls, index: int, chunk_size_bytes: int, duration_seconds: float) -> "ChunkRecord":
        rate = effective_data_rate(chunk_size_bytes * 8, duration_seconds)
        return cls(index=index, duration_seconds=duration_seconds, effective_rate_bps=rate)


@dataclass(frozen=True, slots=True)
class SessionSummary:
    chunk_count: int
    total_bytes: int
    total_time_seconds: float
    avg_effective_rate_bps: float
    bdp_bits: float
    tcp_throughput_bps: float


@dataclass(frozen=True, slots=True)
class SmoothedSeries:
    window: int
    latency: Tuple[float, ...]
    rate: Tuple[float, ...]
    mean_latency_s: float
    mean_rate_bps: float

    @property
    def is_empty(self) -> bool:
        return not self.latency


def effective_data_rate(total_bits: float, total_time_s: float) -> float:
    """Bits per second achieved over ``total_time_s``."""
    if total_time_s == 0:
        raise ComputationError("effective data rate undefined for zero elapsed time")
    return total_bits / total_time_s


def bandwidth_delay_product(bandwidth_bps: float, rtt_s: float) -> float:
    """Bits that can be in flight at ``bandwidth_bps`` over one round trip."""
    return bandwidth_bps * rtt_s


def tcp_throughput(window_bits: float, rtt_s: float) -> float:
    """Window-limited ceiling: one full window per round trip."""
    if rtt_s == 0:
        raise ComputationError("window-limited throughput undefined for zero RTT")
    return window_bits / rtt_s


def summarize(
    records: Sequence[ChunkRecord],
    chunk_size_bytes: int,
    rtt_seconds: float,
    tcp_window_bytes: int,
) -> SessionSummary:
    if not records:
        raise ComputationError("no chunk records to summarize")

    total_bytes = len(records) * chunk_size_bytes
    total_time = sum(r.duration_seconds for r in records)
    avg_rate = effective_data_rate(total_bytes * 8, total_time)

    return SessionSummary(
        chunk_count=len(records),
        total_bytes=total_bytes,
        total_time_seconds=total_time,
        avg_effective_rate_bps=avg_rate,
        bdp_bits=bandwidth_delay_product(avg_rate, rtt_seconds),
        tcp_throughput_bps=tcp_throughput(tcp_window_bytes * 8, rtt_seconds),
    )


def moving_average(values: Sequence[float], window: int) -> Tuple[float, ...]:
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")
    return tuple(
        sum(values[i : i + window]) / window for i in range(len(values) - window + 1)
    )


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def smooth(records: Sequence[ChunkRecord], window: int = DEFAULT_SMOOTHING_WINDOW) -> SmoothedSeries:
    latencies = [r.duration_seconds for r in records]
    rates = [r.effective_rate_bps for r in records]
    return SmoothedSeries(
        window=window,
        latency=moving_average(latencies, window),
        rate=moving_average(rates, window),
        mean_latency_s=_mean(latencies),
        mean_rate_bps=_mean(rates),
    )
