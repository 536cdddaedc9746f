"""Required-field validation for raw records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from pincode_points.common.constants import REQUIRED_FIELDS
from pincode_points.common.models import RawRecord
from pincode_points.common.pincode import is_missing_value


@dataclass(frozen=True)
class ValidationResult:
    records: list[RawRecord]
    rejected: int


def is_usable_record(record: RawRecord) -> bool:
    return not any(is_missing_value(getattr(record, name)) for name in REQUIRED_FIELDS)


def coerce_record(row: Any) -> RawRecord | None:
    if isinstance(row, RawRecord):
        return row
    if isinstance(row, dict):
        return RawRecord.from_mapping(row)
    return None


def validate_records(rows: Iterable[Any]) -> ValidationResult:
    kept: list[RawRecord] = []
    rejected = 0
    for row in rows:
        record = coerce_record(row)
        if record is None or not is_usable_record(record):
            rejected += 1
            continue
        kept.append(record)
    return ValidationResult(records=kept, rejected=rejected)
