"""Area code (pincode) normalisation and placeholder detection."""

from __future__ import annotations

import math
import re
from typing import Any

from pincode_points.common.constants import PLACEHOLDER_VALUES

_NUMERIC_CODE_RE = re.compile(r"^\d+$")


def is_missing_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in PLACEHOLDER_VALUES
    return False


def normalise_area_code(value: Any) -> str | None:
    if is_missing_value(value):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        # JSON decoders may hand back 560001.0 for a numeric pincode.
        return str(int(value))
    return str(value).strip()


def pincode_sort_key(code: str) -> tuple[int, int, str]:
    if _NUMERIC_CODE_RE.match(code):
        return 0, int(code), code
    return 1, 0, code
