"""Run summary report."""

from __future__ import annotations

from pathlib import Path

from pincode_points.common.fs import write_json
from pincode_points.common.time_utils import utc_timestamp_iso
from pincode_points.pipeline.runner import PipelineStats


def summary_status(stats: PipelineStats | None, failed_stages: list[str]) -> str:
    if failed_stages:
        return "partial" if stats is not None else "error"
    return "success"


def write_run_summary(
    data_dir: Path,
    *,
    run_id: str,
    stats: PipelineStats | None,
    selection: str,
    visible_groups: int | None,
    failed_stages: list[str],
) -> Path:
    counts = stats.to_dict() if stats is not None else {}
    if visible_groups is not None:
        counts["visible_groups"] = visible_groups

    payload = {
        "run_id": run_id,
        "generated_at": utc_timestamp_iso(),
        "status": summary_status(stats, failed_stages),
        "selection": selection,
        "failed_stages": sorted(failed_stages),
        "counts": counts,
    }
    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    write_json(summary_path, payload)
    return summary_path
