"""Where measurement results go: CSV rows, summary lines and the chart."""
from __future__ import annotations

import csv
import logging
import os
from typing import Iterable, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .metrics import ChunkRecord, SessionSummary, SmoothedSeries  # noqa: E402

logger = logging.getLogger(__name__)

CSV_HEADER = ("chunk_index", "download_time_seconds", "effective_data_rate_bps")


def write_records_csv(path: str, records: Iterable[ChunkRecord]) -> int:
    n = 0
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for r in records:
            writer.writerow([r.index, repr(r.duration_seconds), repr(r.effective_rate_bps)])
            n += 1
    logger.info("Download metrics saved to %s", path)
    return n


def read_records_csv(path: str) -> List[ChunkRecord]:
    with open(path, newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None or tuple(header) != CSV_HEADER:
            raise ValueError(f"{path}: unexpected header {header!r}")
        return [
            ChunkRecord(index=int(idx), duration_seconds=float(dur), effective_rate_bps=float(rate))
            for idx, dur, rate in reader
        ]


def format_summary(summary: SessionSummary) -> List[str]:
    return [
        f"Total Data Transferred: {summary.total_bytes / 1_000_000:.2f} MB",
        f"Average Effective Data Rate: {summary.avg_effective_rate_bps:.2f} bps",
        f"Calculated BDP: {summary.bdp_bits:.2f} bits",
        f"TCP Throughput: {summary.tcp_throughput_bps:.2f} bps",
    ]


def log_summary(summary: SessionSummary) -> None:
    for line in format_summary(summary):
        logger.info(line)


def summary_payload(summary: SessionSummary) -> dict:
    return {
        "chunks": summary.chunk_count,
        "bytes": summary.total_bytes,
        "seconds": summary.total_time_seconds,
        "avg_bps": summary.avg_effective_rate_bps,
        "bdp_bits": summary.bdp_bits,
        "tcp_throughput_bps": summary.tcp_throughput_bps,
    }


def render_chart(series: SmoothedSeries, path: str) -> str | None:
    """Two stacked panels (latency, rate) with the raw averages as reference lines."""
    if series.is_empty:
        logger.warning(
            "fewer chunks than the smoothing window (%d); chart not rendered", series.window
        )
        return None

    x = list(range(1, len(series.latency) + 1))
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12.8, 9.6))

    ax1.plot(x, series.latency, color="red", label="Latency (s) (Smoothed)")
    ax1.axhline(
        y=series.mean_latency_s,
        color="red",
        linestyle="--",
        alpha=0.5,
        linewidth=2,
        label=f"Avg Latency: {series.mean_latency_s:.5f} s",
    )
    ax1.set_title("Latency per Download (Smoothed)", fontsize=14, fontweight="bold")
    ax1.set_xlabel("Download Number")
    ax1.set_ylabel("Latency (s)")
    ax1.grid(True, linestyle="--", alpha=0.6)
    ax1.legend()

    ax2.plot(x, series.rate, color="blue", label="Effective Data Rate (bps) (Smoothed)")
    ax2.axhline(
        y=series.mean_rate_bps,
        color="blue",
        linestyle="--",
        alpha=0.5,
        linewidth=2,
        label=f"Avg Data Rate: {series.mean_rate_bps:.2e} bps",
    )
    ax2.set_title("Effective Data Rate per Download (Smoothed)", fontsize=14, fontweight="bold")
    ax2.set_xlabel("Download Number")
    ax2.set_ylabel("Data Rate (bps)")
    ax2.set_ylim(0, series.mean_rate_bps * 2)
    ax2.grid(True, linestyle="--", alpha=0.6)
    ax2.legend()

    plt.tight_layout()
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    plt.savefig(path, dpi=100, bbox_inches="tight")
    plt.close(fig)
    logger.info("Latency and effective data rate chart saved as %s", path)
    return path
