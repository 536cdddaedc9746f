"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from pincode_points.common.errors import ConfigError


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _validate_source(source: dict) -> None:
    _assert_required_keys(source, {"endpoint", "timeout", "retry"}, "source")
    _assert_required_keys(_assert_mapping(source["timeout"], "source.timeout"), {"connect", "read"}, "source.timeout")
    retry = _assert_mapping(source["retry"], "source.retry")
    _assert_required_keys(retry, {"max_attempts"}, "source.retry")
    if int(retry["max_attempts"]) < 1:
        raise ConfigError("source.retry.max_attempts must be at least 1")


def _validate_aggregation(aggregation: dict) -> None:
    _assert_required_keys(aggregation, {"canonical_precision", "sample_cap", "unknown_pincode"}, "aggregation")
    cap = aggregation["sample_cap"]
    if cap is not None and (not isinstance(cap, int) or cap < 0):
        raise ConfigError("aggregation.sample_cap must be null or a non-negative integer")
    precision = aggregation["canonical_precision"]
    if not isinstance(precision, int) or precision < 0:
        raise ConfigError("aggregation.canonical_precision must be a non-negative integer")


def _validate_presentation(presentation: dict) -> None:
    _assert_required_keys(
        presentation,
        {"preview_samples", "default_zoom", "center", "radius", "color_bands", "fallback_color"},
        "presentation",
    )
    _assert_required_keys(
        _assert_mapping(presentation["radius"], "presentation.radius"),
        {"base", "reference_zoom", "min", "max"},
        "presentation.radius",
    )
    if float(presentation["default_zoom"]) <= 0:
        raise ConfigError("presentation.default_zoom must be positive")

    bands = presentation["color_bands"]
    if not isinstance(bands, list):
        raise ConfigError("presentation.color_bands must be a list")
    for idx, band in enumerate(bands):
        _assert_required_keys(_assert_mapping(band, f"color_bands[{idx}]"), {"above", "color"}, f"color_bands[{idx}]")
    thresholds = [float(band["above"]) for band in bands]
    if thresholds != sorted(thresholds, reverse=True):
        raise ConfigError("presentation.color_bands must be ordered from highest threshold down")


def validate_dashboard_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "dashboard config")
    top_required = {"source", "aggregation", "presentation", "output"}
    _assert_required_keys(cfg, top_required, "dashboard config")
    _assert_no_unknown_keys(cfg, top_required, "dashboard config", allow_unknown)

    _validate_source(_assert_mapping(cfg["source"], "source"))
    _validate_aggregation(_assert_mapping(cfg["aggregation"], "aggregation"))
    _validate_presentation(_assert_mapping(cfg["presentation"], "presentation"))
    _assert_required_keys(
        _assert_mapping(cfg["output"], "output"),
        {"points_filename", "points_csv_filename"},
        "output",
    )
    return cfg
