"""Display contract consumed by the map layer: colours, radii and sample previews."""

from __future__ import annotations

import math
from typing import Any, Iterable

from pincode_points.common.models import PointGroup
from pincode_points.common.scaling import clamp, pick_band

DEFAULT_COLOR_BANDS = (
    {"above": 1000, "color": "#006400"},
    {"above": 500, "color": "#32CD32"},
    {"above": 100, "color": "#FFD700"},
    {"above": 20, "color": "#FFA500"},
)
DEFAULT_FALLBACK_COLOR = "#FF0000"
DEFAULT_RADIUS = {"base": 120.0, "reference_zoom": 12.0, "min": 50.0, "max": 1500.0}
DEFAULT_PREVIEW_SAMPLES = 3


def color_for_count(
    count: int,
    bands: Iterable[dict] = DEFAULT_COLOR_BANDS,
    fallback: str = DEFAULT_FALLBACK_COLOR,
) -> str:
    return pick_band(count, bands, fallback=fallback)


def radius_for_count(count: int, zoom: float, radius: dict | None = None) -> float:
    if zoom <= 0:
        raise ValueError("zoom must be positive")
    cfg = radius or DEFAULT_RADIUS
    base = math.log(count + 1) * float(cfg["base"])
    scaled = base * (float(cfg["reference_zoom"]) / zoom)
    return clamp(scaled, minimum=float(cfg["min"]), maximum=float(cfg["max"]))


def sample_preview(group: PointGroup, limit: int = DEFAULT_PREVIEW_SAMPLES) -> tuple[list[dict], int]:
    shown = [sample.to_dict() for sample in group.samples[:limit]]
    return shown, max(group.count - len(shown), 0)


def build_point_features(
    groups: Iterable[PointGroup],
    *,
    zoom: float,
    presentation: dict[str, Any] | None = None,
) -> list[dict]:
    cfg = presentation or {}
    bands = cfg.get("color_bands", DEFAULT_COLOR_BANDS)
    fallback = cfg.get("fallback_color", DEFAULT_FALLBACK_COLOR)
    radius_cfg = cfg.get("radius", DEFAULT_RADIUS)
    limit = int(cfg.get("preview_samples", DEFAULT_PREVIEW_SAMPLES))

    features: list[dict] = []
    for group in groups:
        preview, more = sample_preview(group, limit)
        color = color_for_count(group.count, bands, fallback)
        features.append(
            {
                "pincode": group.pincode,
                "lat": group.coordinate[0],
                "lng": group.coordinate[1],
                "role": group.role,
                "count": group.count,
                "color": color,
                "radius": round(radius_for_count(group.count, zoom, radius_cfg), 2),
                "preview": preview,
                "more": more,
            }
        )
    return features
