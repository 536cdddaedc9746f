"""Pipeline orchestration: validate, dedupe, aggregate, and the dashboard state holder."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable

from pincode_points.common.config_loader import Settings
from pincode_points.common.constants import CANONICAL_PRECISION, UNKNOWN_PINCODE
from pincode_points.common.errors import PipelineError, StageError
from pincode_points.common.fs import read_json, write_json
from pincode_points.common.logging import ROOT_LOGGER_NAME, log_event
from pincode_points.common.models import PointGroup
from pincode_points.pipeline.aggregate import aggregate_points
from pincode_points.pipeline.dedupe import deduplicate_routes
from pincode_points.pipeline.filter_view import filter_groups
from pincode_points.pipeline.validate import validate_records
from pincode_points.source.fetch import load_raw_batch

AGGREGATED_PATH = "intermediate/aggregated.json"


@dataclass(frozen=True)
class PipelineStats:
    raw_rows: int
    rejected_invalid: int
    unparseable_gps: int
    duplicates: int
    unique_routes: int
    groups: int
    contributions: int
    skipped_endpoints: int
    pincodes: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class PipelineResult:
    groups: list[PointGroup]
    pincodes: list[str]
    stats: PipelineStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "pincodes": list(self.pincodes),
            "stats": self.stats.to_dict(),
            "groups": [group.to_dict() for group in self.groups],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "PipelineResult":
        return cls(
            groups=[PointGroup.from_dict(group) for group in payload.get("groups", [])],
            pincodes=[str(code) for code in payload.get("pincodes", [])],
            stats=PipelineStats(**payload["stats"]),
        )


EMPTY_RESULT = PipelineResult(
    groups=[],
    pincodes=[],
    stats=PipelineStats(
        raw_rows=0,
        rejected_invalid=0,
        unparseable_gps=0,
        duplicates=0,
        unique_routes=0,
        groups=0,
        contributions=0,
        skipped_endpoints=0,
        pincodes=0,
    ),
)


def run_pipeline(
    rows: Iterable[Any],
    *,
    precision: int = CANONICAL_PRECISION,
    sample_cap: int | None = None,
    unknown_pincode: str = UNKNOWN_PINCODE,
) -> PipelineResult:
    rows = list(rows)
    validated = validate_records(rows)
    deduped = deduplicate_routes(validated.records, precision=precision)
    aggregated = aggregate_points(deduped.records, sample_cap=sample_cap, unknown_pincode=unknown_pincode)

    stats = PipelineStats(
        raw_rows=len(rows),
        rejected_invalid=validated.rejected,
        unparseable_gps=deduped.unparseable,
        duplicates=deduped.duplicates,
        unique_routes=len(deduped.records),
        groups=len(aggregated.groups),
        contributions=aggregated.contributions,
        skipped_endpoints=aggregated.skipped_endpoints,
        pincodes=len(aggregated.pincodes),
    )
    return PipelineResult(groups=aggregated.groups, pincodes=aggregated.pincodes, stats=stats)


def run_pipeline_with_settings(rows: Iterable[Any], aggregation: dict) -> PipelineResult:
    return run_pipeline(
        rows,
        precision=int(aggregation.get("canonical_precision", CANONICAL_PRECISION)),
        sample_cap=aggregation.get("sample_cap"),
        unknown_pincode=aggregation.get("unknown_pincode", UNKNOWN_PINCODE),
    )


@dataclass
class DashboardState:
    """Latest pipeline output plus the current pincode selection.

    ``refresh`` swaps in a new result only when the fetch and pipeline both
    succeed; on a fetch failure the previous result stays visible.
    """

    aggregation: dict = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(ROOT_LOGGER_NAME))
    result: PipelineResult = EMPTY_RESULT
    selection: str = ""

    def refresh(self, fetch: Callable[[], Iterable[Any]], *, run_id: str | None = None) -> bool:
        try:
            rows = fetch()
        except PipelineError as exc:
            log_event(
                self.logger,
                f"fetch failed, keeping previous result: {exc}",
                level=logging.ERROR,
                run_id=run_id,
                stage="fetch",
                event="FETCH_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return False

        self.result = run_pipeline_with_settings(rows, self.aggregation)
        log_event(
            self.logger,
            "pipeline refreshed",
            run_id=run_id,
            stage="aggregate",
            event="REFRESH",
            status="ok",
            rows_in=self.result.stats.raw_rows,
            rows_out=self.result.stats.groups,
        )
        return True

    def select(self, pincode: str | None) -> None:
        self.selection = (pincode or "").strip()

    def reset(self) -> None:
        self.selection = ""

    @property
    def pincodes(self) -> list[str]:
        return self.result.pincodes

    def visible_groups(self) -> list[PointGroup]:
        return filter_groups(self.result.groups, self.selection)


def run_aggregate(settings: Settings, data_dir: Path, run_id: str) -> PipelineResult:
    rows = load_raw_batch(data_dir)
    result = run_pipeline_with_settings(rows, settings.aggregation)
    write_json(data_dir / AGGREGATED_PATH, {"run_id": run_id, **result.to_dict()})
    return result


def load_aggregated(data_dir: Path) -> PipelineResult:
    path = data_dir / AGGREGATED_PATH
    if not path.exists():
        raise StageError(f"Missing aggregated input: {path}")
    return PipelineResult.from_dict(read_json(path))
