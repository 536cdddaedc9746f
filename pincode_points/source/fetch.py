"""Raw batch retrieval from the transaction data endpoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pincode_points.common.config_loader import Settings
from pincode_points.common.errors import SourceError
from pincode_points.common.fs import read_json, write_json
from pincode_points.common.http import HttpClient, RetryConfig, TimeoutConfig

RAW_BATCH_PATH = "raw/batch.json"


def client_from_settings(settings: Settings) -> HttpClient:
    timeout = settings.source["timeout"]
    retry = settings.source["retry"]
    return HttpClient(
        timeout=TimeoutConfig(connect=float(timeout["connect"]), read=float(timeout["read"])),
        retry=RetryConfig(
            max_attempts=int(retry["max_attempts"]),
            multiplier=float(retry.get("multiplier", 1.0)),
            max_wait=float(retry.get("max_wait", 30.0)),
        ),
    )


def extract_rows(payload: Any) -> list[Any]:
    if not isinstance(payload, dict):
        raise SourceError("Batch payload must be a JSON object")
    rows = payload.get("data")
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise SourceError("Batch payload 'data' must be a list")
    return rows


def fetch_batch(endpoint: str, http_client: HttpClient | None = None) -> list[Any]:
    owns_client = http_client is None
    client = http_client or HttpClient()
    try:
        payload = client.get_json(endpoint)
    finally:
        if owns_client:
            client.close()
    return extract_rows(payload)


def run_fetch(
    settings: Settings,
    data_dir: Path,
    run_id: str,
    *,
    endpoint: str | None = None,
    http_client: HttpClient | None = None,
) -> dict:
    target = endpoint or settings.endpoint
    owns_client = http_client is None
    client = http_client or client_from_settings(settings)
    try:
        rows = fetch_batch(target, client)
    finally:
        if owns_client:
            client.close()

    # Written only after a successful fetch so a failure leaves the prior batch in place.
    payload = {
        "run_id": run_id,
        "endpoint": target,
        "row_count": len(rows),
        "rows": rows,
    }
    write_json(data_dir / RAW_BATCH_PATH, payload)
    return payload


def load_raw_batch(data_dir: Path) -> list[Any]:
    path = data_dir / RAW_BATCH_PATH
    if not path.exists():
        return []
    return read_json(path).get("rows", [])
