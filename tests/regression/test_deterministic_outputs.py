from __future__ import annotations

import json
from pathlib import Path

import pytest

from pincode_points.cli import parse_args, run_command
from pincode_points.common.fs import write_json

FIXTURE = Path("tests/fixtures/batch.json")


def _run_offline(data_dir: Path, run_id: str) -> None:
    batch = json.loads(FIXTURE.read_text(encoding="utf-8"))
    write_json(data_dir / "raw" / "batch.json", {"run_id": "fixture", "rows": batch["data"]})
    for command in ("aggregate", "export"):
        args = parse_args([command, "--config-dir", "config", "--data-dir", str(data_dir), "--run-id", run_id])
        assert run_command(args) == 0


@pytest.mark.regression
def test_point_outputs_are_byte_stable_for_same_inputs(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"

    _run_offline(first, "run-a")
    _run_offline(second, "run-b")

    for name in ("points.json", "points.csv"):
        assert (first / "out" / name).read_bytes() == (second / "out" / name).read_bytes()


@pytest.mark.regression
def test_fixture_point_snapshot(tmp_path: Path):
    _run_offline(tmp_path, "run-snapshot")

    csv_text = (tmp_path / "out" / "points.csv").read_text(encoding="utf-8")
    assert csv_text.splitlines() == [
        "pincode,lat,lng,role,count,color",
        "110001,28.62,77.22,end,1,#FF0000",
        "110001,28.75,77.35,end,1,#FF0000",
        "110001,28.61,77.21,start,2,#FF0000",
        "560001,12.98,77.6,end,1,#FF0000",
        "560001,12.97,77.59,start,1,#FF0000",
    ]
