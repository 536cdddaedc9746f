"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class RawRecord:
    start_gps: Any = None
    end_gps: Any = None
    start_area_code: Any = None
    end_area_code: Any = None
    action: Any = None
    created_time: Any = None
    bap_id: Any = None
    transaction_id: Any = None
    message_id: Any = None
    category: Any = None
    category_id: Any = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "RawRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in row.items() if key in known})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ParsedCoordinate:
    lat: float
    lng: float

    def as_pair(self) -> tuple[float, float]:
        return self.lat, self.lng


@dataclass(frozen=True)
class InvalidCoordinate:
    reason: str


CoordinateResult = Union[ParsedCoordinate, InvalidCoordinate]


@dataclass(frozen=True)
class SampleSummary:
    action: Any
    created_time: Any
    bap_id: Any
    transaction_id: Any
    message_id: Any
    category: Any
    category_id: Any
    start_gps: Any
    end_gps: Any

    @classmethod
    def from_record(cls, record: RawRecord) -> "SampleSummary":
        return cls(
            action=record.action,
            created_time=record.created_time,
            bap_id=record.bap_id,
            transaction_id=record.transaction_id,
            message_id=record.message_id,
            category=record.category,
            category_id=record.category_id,
            start_gps=record.start_gps,
            end_gps=record.end_gps,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PointGroup:
    """Aggregated endpoint bucket; one per (pincode, coordinate, role)."""

    pincode: str
    coordinate: tuple[float, float]
    role: str
    count: int = 0
    samples: list[SampleSummary] = field(default_factory=list)

    def add(self, sample: SampleSummary, sample_cap: int | None = None) -> None:
        self.count += 1
        if sample_cap is None or len(self.samples) < sample_cap:
            self.samples.append(sample)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pincode": self.pincode,
            "lat": self.coordinate[0],
            "lng": self.coordinate[1],
            "role": self.role,
            "count": self.count,
            "samples": [sample.to_dict() for sample in self.samples],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PointGroup":
        return cls(
            pincode=str(payload["pincode"]),
            coordinate=(float(payload["lat"]), float(payload["lng"])),
            role=payload["role"],
            count=int(payload["count"]),
            samples=[SampleSummary(**sample) for sample in payload.get("samples", [])],
        )
