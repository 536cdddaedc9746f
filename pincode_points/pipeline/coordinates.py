"""GPS string parsing and canonical coordinate forms."""

from __future__ import annotations

import math
import re
from typing import Any

from pincode_points.common.constants import CANONICAL_PRECISION
from pincode_points.common.models import CoordinateResult, InvalidCoordinate, ParsedCoordinate

_PARENS_RE = re.compile(r"[()]")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def _parse_component(token: str) -> float | None:
    token = token.strip()
    if not _NUMBER_RE.match(token):
        return None
    return float(token)


def parse_coordinate(gps: Any) -> CoordinateResult:
    if gps is None:
        return InvalidCoordinate("missing")
    cleaned = _PARENS_RE.sub("", str(gps)).strip()
    if not cleaned:
        return InvalidCoordinate("missing")

    parts = cleaned.split(",")
    if len(parts) != 2:
        return InvalidCoordinate("wrong_arity")

    values = [_parse_component(part) for part in parts]
    if any(value is None for value in values):
        return InvalidCoordinate("not_numeric")
    lat, lng = values
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return InvalidCoordinate("not_finite")
    return ParsedCoordinate(lat=lat, lng=lng)


def _unsigned_zero(value: float) -> float:
    # -0.0 + 0.0 is 0.0; every other value is unchanged.
    return value + 0.0


def canonical_coordinate(gps: Any, precision: int = CANONICAL_PRECISION) -> str | None:
    parsed = parse_coordinate(gps)
    if isinstance(parsed, InvalidCoordinate):
        return None
    lat = _unsigned_zero(round(parsed.lat, precision))
    lng = _unsigned_zero(round(parsed.lng, precision))
    return f"{lat:.{precision}f},{lng:.{precision}f}"


def coordinate_text(coordinate: ParsedCoordinate) -> str:
    # repr is the shortest round-trip form, so "12.970" and "12.97" agree.
    return f"{_unsigned_zero(coordinate.lat)!r},{_unsigned_zero(coordinate.lng)!r}"
