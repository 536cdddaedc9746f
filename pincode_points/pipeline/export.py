"""Display-ready JSON and flat CSV export of point groups."""

from __future__ import annotations

from pathlib import Path

from pincode_points.common.config_loader import Settings
from pincode_points.common.fs import write_csv, write_json
from pincode_points.common.models import PointGroup
from pincode_points.pipeline.filter_view import filter_groups
from pincode_points.pipeline.presentation import build_point_features, color_for_count
from pincode_points.pipeline.runner import load_aggregated

POINT_CSV_HEADERS = [
    "pincode",
    "lat",
    "lng",
    "role",
    "count",
    "color",
]


def _group_sort_key(group: PointGroup) -> tuple:
    return (group.pincode, group.role, group.coordinate[0], group.coordinate[1])


def write_points(
    settings: Settings,
    data_dir: Path,
    groups: list[PointGroup],
    pincodes: list[str],
    *,
    zoom: float | None = None,
    selection: str = "",
) -> dict[str, Path]:
    presentation = settings.presentation
    zoom = zoom if zoom is not None else float(presentation["default_zoom"])
    ordered = sorted(groups, key=_group_sort_key)

    json_path = data_dir / "out" / settings.output["points_filename"]
    write_json(
        json_path,
        {
            "center": presentation["center"],
            "zoom": zoom,
            "selection": selection,
            "pincodes": pincodes,
            "features": build_point_features(ordered, zoom=zoom, presentation=presentation),
        },
    )

    csv_path = data_dir / "out" / settings.output["points_csv_filename"]
    rows = [
        {
            "pincode": group.pincode,
            "lat": group.coordinate[0],
            "lng": group.coordinate[1],
            "role": group.role,
            "count": group.count,
            "color": color_for_count(group.count, presentation["color_bands"], presentation["fallback_color"]),
        }
        for group in ordered
    ]
    write_csv(csv_path, POINT_CSV_HEADERS, rows)
    return {"json": json_path, "csv": csv_path}


def run_export(
    settings: Settings,
    data_dir: Path,
    run_id: str,
    *,
    selection: str = "",
    zoom: float | None = None,
) -> dict:
    result = load_aggregated(data_dir)
    visible = filter_groups(result.groups, selection)
    paths = write_points(settings, data_dir, visible, result.pincodes, zoom=zoom, selection=selection.strip())
    return {
        "run_id": run_id,
        "paths": paths,
        "stats": result.stats,
        "visible_groups": len(visible),
    }
