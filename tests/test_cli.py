from __future__ import annotations

import json

import pytest

from chunkbench.cli import main
from chunkbench.sink import read_records_csv


def test_bench_command(tmp_path, capsys):
    csv_path = tmp_path / "m.csv"
    chart_path = tmp_path / "c.png"
    rc = main([
        "--log-level", "WARNING",
        "bench",
        "--chunk-size", "20000",
        "--chunk-count", "8",
        "--timeout", "10",
        "--csv", str(csv_path),
        "--chart", str(chart_path),
        "--json",
    ])
    assert rc == 0
    assert [r.index for r in read_records_csv(str(csv_path))] == list(range(1, 9))
    assert chart_path.exists()

    payload = json.loads(capsys.readouterr().out)
    assert payload["role"] == "bench"
    assert payload["complete"] is True
    assert payload["bytes"] == 160_000


def test_invalid_config_is_a_usage_error():
    with pytest.raises(SystemExit) as ei:
        main(["bench", "--chunk-count", "0"])
    assert ei.value.code == 2


def test_connect_failure_exits_nonzero(tmp_path):
    from chunkbench.channel import OneShotListener

    lst = OneShotListener.bind("127.0.0.1", 0)
    port = lst.address[1]
    lst.close()
    rc = main(["measure", "--port", str(port), "--timeout", "2", "--csv", str(tmp_path / "m.csv"), "--no-chart"])
    assert rc == 1


def test_cli_logs_under_its_module_name():
    from chunkbench import cli

    assert cli.logger.name == "chunkbench.cli"
