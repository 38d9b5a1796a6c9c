"""Console entrypoint for oaisdk.

Offline helpers for batch output (reports, YARA extraction, rule validation)
plus a few batch API commands and config helpers.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from oaisdk import __version__
from oaisdk.batch.results import build_report, save_yara_rules, write_report
from oaisdk.batch.yara import extract_rule_name, validate_yara_rule
from oaisdk.client import OpenAIClient
from oaisdk.config import LogLevel, Settings, load_settings
from oaisdk.errors import ApiError, FileOperationError
from oaisdk.logging import _to_logging_level, configure_file_logger, request_event_logger
from oaisdk.paths import default_config_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oaisdk",
        description="OpenAI batch and assistants helper",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging (root=INFO, oaisdk=DEBUG).")
    parser.add_argument(
        "--log-level",
        choices=[e.value for e in LogLevel],
        dest="log_level",
        help="Log level override",
    )
    parser.add_argument("--base-url", dest="base_url", help="Override the API base URL")
    parser.add_argument("--config-path", dest="config_path", help="Path to config.toml")

    subparsers = parser.add_subparsers(dest="command", required=True)

    report_parser = subparsers.add_parser("report", help="Render a Markdown report from batch output files")
    report_parser.add_argument("results", help="Batch results JSONL file")
    report_parser.add_argument("--errors", help="Batch errors JSONL file")
    report_parser.add_argument("--output", "-o", help="Write the report here instead of stdout")

    yara_parser = subparsers.add_parser("extract-yara", help="Save YARA rules found in a results file")
    yara_parser.add_argument("results", help="Batch results JSONL file")
    yara_parser.add_argument("output_dir", help="Directory receiving <custom_id>.yar files")

    validate_parser = subparsers.add_parser("validate-rule", help="Check the shape of a YARA rule file")
    validate_parser.add_argument("path", help="Rule file")

    # batch API
    batch_parser = subparsers.add_parser("batch", help="Batch API commands")
    batch_sub = batch_parser.add_subparsers(dest="batch_cmd", required=True)
    status_parser = batch_sub.add_parser("status", help="Show batch status")
    status_parser.add_argument("batch_id")
    wait_parser = batch_sub.add_parser("wait", help="Poll until the batch finishes")
    wait_parser.add_argument("batch_id")
    wait_parser.add_argument("--poll-interval", type=float, dest="poll_interval", help="Seconds between polls")
    wait_parser.add_argument("--max-wait", type=float, dest="max_wait", help="Give up after this many seconds")
    cancel_parser = batch_sub.add_parser("cancel", help="Cancel a batch")
    cancel_parser.add_argument("batch_id")
    download_parser = batch_sub.add_parser("download", help="Download batch results and errors")
    download_parser.add_argument("batch_id")
    download_parser.add_argument("output_dir")

    # config helper
    config_parser = subparsers.add_parser("config", help="Config helpers")
    config_sub = config_parser.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("path", help="Print config path")
    config_sub.add_parser("print", help="Print resolved settings")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = _collect_overrides(args)
    settings = load_settings(cli_overrides=overrides, config_path=args.config_path, create_if_missing=True)

    _configure_base_logging(debug_enabled=args.debug, oaisdk_level=settings.log_level)

    try:
        if args.command == "report":
            return _run_report(settings, args)
        if args.command == "extract-yara":
            return _run_extract_yara(args)
        if args.command == "validate-rule":
            return _run_validate_rule(args)
        if args.command == "batch":
            return asyncio.run(_run_batch(settings, args))
        if args.command == "config":
            return _run_config(settings, args)
    except (ApiError, FileOperationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.error(f"unknown command {args.command}")
    return 1


def _run_report(settings: Settings, args: argparse.Namespace) -> int:
    report = build_report(args.results, args.errors, thresholds=settings.report.thresholds())
    if args.output:
        path = write_report(report, args.output)
        print(f"report written to {path}")
    else:
        print(report.generate_report_text())
    return 0


def _run_extract_yara(args: argparse.Namespace) -> int:
    count = save_yara_rules(args.results, args.output_dir)
    print(f"saved {count} YARA rules to {args.output_dir}")
    return 0


def _run_validate_rule(args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileOperationError(f"failed to read {path}: {exc}") from exc

    if not validate_yara_rule(content):
        print(f"{path}: invalid")
        return 1
    print(f"{path}: valid rule {extract_rule_name(content) or '<unnamed>'}")
    return 0


def _make_client(settings: Settings) -> OpenAIClient:
    http_log = configure_file_logger("http", log_level=settings.log_level)
    return OpenAIClient.from_settings(settings, logger=request_event_logger(http_log))


async def _run_batch(settings: Settings, args: argparse.Namespace) -> int:
    async with _make_client(settings) as client:
        if args.batch_cmd == "status":
            batch = await client.batch.get_batch_status(args.batch_id)
            _print_json(batch.model_dump(mode="json", exclude_none=True))
            return 0
        if args.batch_cmd == "wait":
            batch = await client.batch.wait_for_completion(
                args.batch_id, poll_interval_secs=args.poll_interval, max_wait_secs=args.max_wait
            )
            print(f"{batch.id}: {batch.status}")
            return 0
        if args.batch_cmd == "cancel":
            batch = await client.batch.cancel_batch(args.batch_id)
            print(f"{batch.id}: {batch.status}")
            return 0
        if args.batch_cmd == "download":
            results, errors = await client.batch.download_all_batch_files(args.batch_id, args.output_dir)
            print(f"downloaded {results} results and {errors} errors to {args.output_dir}")
            return 0
    return 1


def _run_config(settings: Settings, args: argparse.Namespace) -> int:
    if args.config_cmd == "path":
        print(Path(args.config_path) if args.config_path else default_config_path())
        return 0
    if args.config_cmd == "print":
        print(settings.model_dump_json(indent=2, exclude={"api_key"}))
        return 0
    return 1


def _collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    default_log_level = LogLevel.DEBUG.value if args.debug else None
    return {
        "base_url": args.base_url,
        "log_level": args.log_level or default_log_level,
    }


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _configure_base_logging(*, debug_enabled: bool, oaisdk_level: LogLevel | str) -> None:
    import logging

    root_level = logging.INFO if debug_enabled else logging.WARNING

    logging.basicConfig(
        level=root_level,
        stream=sys.__stderr__,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )

    logging.getLogger("oaisdk").setLevel(_to_logging_level(oaisdk_level))

    # httpx logs every request at INFO; keep the console quiet.
    for noisy in ("httpx", "httpcore"):
        logger = logging.getLogger(noisy)
        logger.setLevel(logging.WARNING)
        logger.propagate = False


if __name__ == "__main__":
    sys.exit(main())
