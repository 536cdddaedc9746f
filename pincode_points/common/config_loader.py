"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pincode_points.common.errors import ConfigError
from pincode_points.common.fs import read_yaml
from pincode_points.common.schema import validate_dashboard_config

CONFIG_FILENAME = "dashboard.yml"


@dataclass(frozen=True)
class Settings:
    source: dict
    aggregation: dict
    presentation: dict
    output: dict

    @property
    def endpoint(self) -> str:
        return self.source["endpoint"]

    @property
    def sample_cap(self) -> int | None:
        return self.aggregation["sample_cap"]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_settings(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> Settings:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    cfg = validate_dashboard_config(cfg, allow_unknown=allow_unknown)
    return Settings(
        source=cfg["source"],
        aggregation=cfg["aggregation"],
        presentation=cfg["presentation"],
        output=cfg["output"],
    )
