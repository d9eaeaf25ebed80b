from __future__ import annotations

import argparse
import json
import logging

from .bench import run_benchmark
from .config import SessionConfig
from .constants import (
    DEFAULT_CHART_PATH,
    DEFAULT_CHUNK_COUNT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CSV_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_RTT_S,
    DEFAULT_SMOOTHING_WINDOW,
    DEFAULT_TCP_WINDOW,
)
from .errors import ChunkBenchError
from .session import Measurement, measure, serve_once
from .sink import log_summary, render_chart, summary_payload, write_records_csv

logger = logging.getLogger(__name__)


def config_from_args(args: argparse.Namespace) -> SessionConfig:
    return SessionConfig(
        listen_host=args.host,
        listen_port=args.port,
        chunk_size_bytes=args.chunk_size,
        chunk_count=args.chunk_count,
        assumed_rtt_seconds=args.rtt,
        assumed_tcp_window_bytes=args.tcp_window,
        smoothing_window=args.smoothing_window,
        io_timeout_s=args.timeout,
    ).validate()


def report(m: Measurement, args: argparse.Namespace) -> int:
    """Persist and print a measurement; non-zero if the transfer was cut short."""
    write_records_csv(args.csv, m.result.records)
    log_summary(m.summary)
    if not args.no_chart:
        render_chart(m.series, args.chart)

    if args.json:
        payload = {"role": args.cmd, "complete": m.result.complete, **summary_payload(m.summary)}
        print(json.dumps(payload, indent=2))

    if m.result.error is not None:
        logger.error("transfer aborted: %s", m.result.error)
        return 1
    return 0


def cmd_serve(cfg: SessionConfig, args: argparse.Namespace) -> int:
    send = serve_once(cfg)
    if args.json:
        print(json.dumps({"role": "serve", "chunks": send.chunks_sent, "bytes": send.bytes_sent,
                          "seconds": send.duration_s}, indent=2))
    return 0


def cmd_measure(cfg: SessionConfig, args: argparse.Namespace) -> int:
    return report(measure(cfg), args)


def cmd_bench(cfg: SessionConfig, args: argparse.Namespace) -> int:
    return report(run_benchmark(cfg).measurement, args)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="chunkbench", description="Chunked TCP throughput measurement.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(x: argparse.ArgumentParser, port: int = DEFAULT_PORT) -> None:
        x.add_argument("--host", default=DEFAULT_HOST)
        x.add_argument("--port", type=int, default=port)
        x.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help="bytes per chunk")
        x.add_argument("--chunk-count", type=int, default=DEFAULT_CHUNK_COUNT)
        x.add_argument("--rtt", type=float, default=DEFAULT_RTT_S, help="assumed round-trip time (s)")
        x.add_argument("--tcp-window", type=int, default=DEFAULT_TCP_WINDOW, help="assumed TCP window (bytes)")
        x.add_argument("--smoothing-window", type=int, default=DEFAULT_SMOOTHING_WINDOW)
        x.add_argument("--timeout", type=float, default=None, help="per-operation socket timeout (s)")
        x.add_argument("--json", action="store_true")

    def add_outputs(x: argparse.ArgumentParser) -> None:
        x.add_argument("--csv", default=DEFAULT_CSV_PATH)
        x.add_argument("--chart", default=DEFAULT_CHART_PATH)
        x.add_argument("--no-chart", action="store_true")

    serve = sub.add_parser("serve", help="accept one receiver and stream the chunks to it")
    add_common(serve)
    serve.set_defaults(func=cmd_serve)

    meas = sub.add_parser("measure", help="connect to a server and time every chunk")
    add_common(meas)
    add_outputs(meas)
    meas.set_defaults(func=cmd_measure)

    bench = sub.add_parser("bench", help="run both ends over loopback in one process")
    add_common(bench, port=0)
    add_outputs(bench)
    bench.set_defaults(func=cmd_bench)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    try:
        cfg = config_from_args(args)
    except ValueError as exc:
        p.error(str(exc))

    try:
        return int(args.func(cfg, args))
    except ChunkBenchError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
