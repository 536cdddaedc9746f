"""Pincode selection filter."""

from __future__ import annotations

from typing import Iterable

from pincode_points.common.models import PointGroup


def filter_groups(groups: Iterable[PointGroup], selection: str | None) -> list[PointGroup]:
    selected = (selection or "").strip()
    if not selected:
        return list(groups)
    return [group for group in groups if str(group.pincode).strip() == selected]
