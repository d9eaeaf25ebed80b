from __future__ import annotations

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7878

DEFAULT_CHUNK_SIZE = 1_000_000  # bytes
DEFAULT_CHUNK_COUNT = 100

# Assumed, not measured. Only used for the derived BDP / window figures.
DEFAULT_RTT_S = 0.2
DEFAULT_TCP_WINDOW = 64_000  # bytes

DEFAULT_SMOOTHING_WINDOW = 5

DEFAULT_CSV_PATH = "download_metrics.csv"
DEFAULT_CHART_PATH = "latency_data_rate.png"
