"""CLI entrypoint for the pincode points pipeline."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from pincode_points.common.config_loader import Settings, load_settings
from pincode_points.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from pincode_points.common.errors import ConfigError, PipelineError
from pincode_points.common.logging import build_logger, close_logger, log_event
from pincode_points.common.time_utils import elapsed_ms, generate_run_id
from pincode_points.pipeline.export import run_export
from pincode_points.pipeline.reports import write_run_summary
from pincode_points.pipeline.runner import run_aggregate
from pincode_points.source.fetch import run_fetch


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--endpoint", default=None, help="Override source.endpoint from config")
    parser.add_argument("--pincode", default="", help="Restrict exported points to one pincode")
    parser.add_argument("--zoom", type=positive_float, default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def execute_stage(stage: str, args: argparse.Namespace, settings: Settings, data_dir: Path, run_id: str) -> dict:
    if stage == "fetch":
        payload = run_fetch(settings, data_dir, run_id, endpoint=args.endpoint)
        return {"rows_out": payload["row_count"]}
    if stage == "aggregate":
        result = run_aggregate(settings, data_dir, run_id)
        return {"rows_in": result.stats.raw_rows, "rows_out": result.stats.groups, "stats": result.stats}
    if stage == "export":
        exported = run_export(settings, data_dir, run_id, selection=args.pincode, zoom=args.zoom)
        return {
            "rows_in": exported["stats"].groups,
            "rows_out": exported["visible_groups"],
            "stats": exported["stats"],
            "visible_groups": exported["visible_groups"],
        }
    raise ValueError(f"Unknown stage: {stage}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        try:
            settings = load_settings(config_dir, overlay_config_dir=overlay_config_dir)
        except ConfigError as exc:
            log_event(logger, str(exc), run_id=run_id, event="CONFIG_FAIL", status="error", error_code=exc.error_code)
            return EXIT_HARD_FAIL

        stages = STAGES if args.command == "all" else (args.command,)
        failed_stages: list[str] = []
        stats = None
        visible_groups = None

        for stage in stages:
            started = time.monotonic()
            log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
            try:
                outcome = execute_stage(stage, args, settings, data_dir, run_id)
            except PipelineError as exc:
                failed_stages.append(stage)
                log_event(
                    logger,
                    f"stage failed: {exc}",
                    run_id=run_id,
                    stage=stage,
                    event="STAGE_FAIL",
                    status="error",
                    error_code=exc.error_code,
                    duration_ms=elapsed_ms(started),
                )
                if args.strict:
                    return EXIT_HARD_FAIL
                continue

            stats = outcome.get("stats", stats)
            visible_groups = outcome.get("visible_groups", visible_groups)
            log_event(
                logger,
                "stage end",
                run_id=run_id,
                stage=stage,
                event="STAGE_END",
                status="ok",
                rows_in=outcome.get("rows_in"),
                rows_out=outcome.get("rows_out"),
                duration_ms=elapsed_ms(started),
            )

        write_run_summary(
            data_dir,
            run_id=run_id,
            stats=stats,
            selection=args.pincode.strip(),
            visible_groups=visible_groups,
            failed_stages=failed_stages,
        )
        if failed_stages:
            return EXIT_PARTIAL
        return EXIT_SUCCESS
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
