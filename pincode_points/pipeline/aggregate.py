"""Group deduplicated records into per-endpoint point buckets.

Each record contributes up to two endpoints (start and end). Endpoints are
grouped by (pincode, coordinate text, role); the pincode is the record's start
area code, falling back to the end area code and then to ``Unknown``. The end
endpoint is filed under that same start-preferred pincode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pincode_points.common.constants import ROLES, UNKNOWN_PINCODE
from pincode_points.common.models import InvalidCoordinate, PointGroup, RawRecord, SampleSummary
from pincode_points.common.pincode import normalise_area_code, pincode_sort_key
from pincode_points.pipeline.coordinates import coordinate_text, parse_coordinate


@dataclass
class AggregationState:
    groups: dict[tuple[str, str, str], PointGroup] = field(default_factory=dict)
    pincodes: set[str] = field(default_factory=set)
    skipped_endpoints: int = 0


@dataclass(frozen=True)
class AggregationResult:
    groups: list[PointGroup]
    pincodes: list[str]
    skipped_endpoints: int

    @property
    def contributions(self) -> int:
        return sum(group.count for group in self.groups)


def resolve_pincode(record: RawRecord, unknown: str = UNKNOWN_PINCODE) -> str:
    return normalise_area_code(record.start_area_code) or normalise_area_code(record.end_area_code) or unknown


def _endpoints(record: RawRecord) -> list[tuple[object, str]]:
    candidates = zip((record.start_gps, record.end_gps), ROLES)
    return [(gps, role) for gps, role in candidates if gps not in (None, "")]


def accumulate(
    state: AggregationState,
    record: RawRecord,
    *,
    sample_cap: int | None = None,
    unknown_pincode: str = UNKNOWN_PINCODE,
) -> AggregationState:
    pincode = resolve_pincode(record, unknown_pincode)
    sample = SampleSummary.from_record(record)

    for gps, role in _endpoints(record):
        parsed = parse_coordinate(gps)
        if isinstance(parsed, InvalidCoordinate):
            state.skipped_endpoints += 1
            continue

        key = (pincode, coordinate_text(parsed), role)
        group = state.groups.get(key)
        if group is None:
            group = PointGroup(pincode=pincode, coordinate=parsed.as_pair(), role=role)
            state.groups[key] = group
        group.add(sample, sample_cap)
        state.pincodes.add(pincode)

    return state


def aggregate_points(
    records: Iterable[RawRecord],
    *,
    sample_cap: int | None = None,
    unknown_pincode: str = UNKNOWN_PINCODE,
) -> AggregationResult:
    if sample_cap is not None and sample_cap < 0:
        raise ValueError("sample_cap must be non-negative")

    state = AggregationState()
    for record in records:
        accumulate(state, record, sample_cap=sample_cap, unknown_pincode=unknown_pincode)

    return AggregationResult(
        groups=list(state.groups.values()),
        pincodes=sorted(state.pincodes, key=pincode_sort_key),
        skipped_endpoints=state.skipped_endpoints,
    )
