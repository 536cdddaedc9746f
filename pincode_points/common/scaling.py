"""Config-driven scaling utilities."""

from __future__ import annotations

from typing import Iterable, Mapping


def clamp(value: float, *, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def pick_band(value: float, bands: Iterable[Mapping[str, object]], *, fallback: str) -> str:
    """Return the label of the first band whose ``above`` threshold ``value`` exceeds.

    Bands are evaluated in the order given, so they should be listed from the
    highest threshold down.
    """
    for band in bands:
        if value > float(band["above"]):
            return str(band["color"])
    return fallback
