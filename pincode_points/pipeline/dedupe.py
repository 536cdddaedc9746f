"""Route deduplication treating A->B and B->A as the same route."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pincode_points.common.constants import CANONICAL_PRECISION
from pincode_points.common.models import RawRecord
from pincode_points.common.pincode import normalise_area_code
from pincode_points.pipeline.coordinates import canonical_coordinate


@dataclass
class RouteIndex:
    """Seen forward route keys for a single run."""

    seen: set[str] = field(default_factory=set)

    def admit(self, forward_key: str, reverse_key: str) -> bool:
        if forward_key in self.seen or reverse_key in self.seen:
            return False
        self.seen.add(forward_key)
        return True


@dataclass(frozen=True)
class DedupeResult:
    records: list[RawRecord]
    duplicates: int
    unparseable: int


def route_keys(record: RawRecord, precision: int = CANONICAL_PRECISION) -> tuple[str, str] | None:
    start = canonical_coordinate(record.start_gps, precision)
    end = canonical_coordinate(record.end_gps, precision)
    if start is None or end is None:
        return None

    start_code = normalise_area_code(record.start_area_code) or ""
    end_code = normalise_area_code(record.end_area_code) or ""
    forward = "|".join((start, end, start_code, end_code))
    reverse = "|".join((end, start, end_code, start_code))
    return forward, reverse


def deduplicate_routes(
    records: Iterable[RawRecord],
    *,
    precision: int = CANONICAL_PRECISION,
    index: RouteIndex | None = None,
) -> DedupeResult:
    index = index if index is not None else RouteIndex()
    kept: list[RawRecord] = []
    duplicates = 0
    unparseable = 0

    for record in records:
        keys = route_keys(record, precision)
        if keys is None:
            unparseable += 1
            continue
        if not index.admit(*keys):
            duplicates += 1
            continue
        kept.append(record)

    return DedupeResult(records=kept, duplicates=duplicates, unparseable=unparseable)
