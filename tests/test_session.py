from __future__ import annotations

import pytest

from chunkbench.bench import run_benchmark
from chunkbench.config import SessionConfig
from chunkbench.errors import ComputationError
from chunkbench.session import measure

SMALL = SessionConfig(listen_port=0, chunk_size_bytes=50_000, chunk_count=12, io_timeout_s=10.0)


def test_loopback_session():
    bench = run_benchmark(SMALL)
    m = bench.measurement

    assert m.result.complete
    assert [r.index for r in m.result.records] == list(range(1, 13))
    assert m.summary.total_bytes == 600_000
    assert m.summary.total_time_seconds == pytest.approx(sum(r.duration_seconds for r in m.result.records))
    assert len(m.series.latency) == 12 - 5 + 1
    assert bench.send is not None and bench.send.bytes_sent == 600_000


def test_partial_session_is_still_summarized(fake_channel):
    ch = fake_channel(fail_after=4)
    m = measure(SessionConfig(chunk_size_bytes=1000, chunk_count=10), connect=lambda: ch)

    assert not m.result.complete
    assert m.summary.chunk_count == 4
    assert m.summary.total_bytes == 4000
    assert m.series.is_empty
    assert ch.closed


def test_nothing_received_cannot_be_summarized(fake_channel):
    with pytest.raises(ComputationError):
        measure(SessionConfig(chunk_size_bytes=1000, chunk_count=10), connect=lambda: fake_channel(fail_after=0))


@pytest.mark.parametrize(
    "field,value",
    [
        ("chunk_size_bytes", 0),
        ("chunk_count", -1),
        ("assumed_rtt_seconds", 0.0),
        ("assumed_tcp_window_bytes", 0),
        ("smoothing_window", 0),
        ("io_timeout_s", 0.0),
        ("listen_port", 70000),
    ],
)
def test_config_validation(field, value):
    with pytest.raises(ValueError):
        SessionConfig(**{field: value}).validate()


def test_config_defaults():
    cfg = SessionConfig().validate()
    assert cfg.listen_address == ("127.0.0.1", 7878)
    assert cfg.total_bytes == 100_000_000
