"""Analyse batch output files.

Batch results are JSONL: one object per line carrying ``custom_id``, a
``response`` whose body is a chat completion, and an ``error`` that is null on
success. The error file uses the same envelope with ``error.code`` set.
Malformed lines are skipped; the files come from the API and a single bad
line should not sink a whole report.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

from oaisdk.batch.report import DEFAULT_THRESHOLDS, BatchReport, ReportThresholds
from oaisdk.batch.yara import extract_yara_rule
from oaisdk.errors import FileOperationError
from oaisdk.models.batch import YaraRuleInfo

logger = logging.getLogger(__name__)


def parse_line(line: str) -> dict[str, Any] | None:
    stripped = line.strip()
    if not stripped:
        return None
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        logger.debug("skipping malformed batch line: %.80s", stripped)
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_response_content(parsed: Mapping[str, Any]) -> str | None:
    """Return ``response.body.choices[0].message.content`` when present."""

    try:
        content = parsed["response"]["body"]["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def extract_error_code(parsed: Mapping[str, Any]) -> str | None:
    error = parsed.get("error")
    if not isinstance(error, Mapping):
        return None
    code = error.get("code")
    return code if isinstance(code, str) else None


def analyze_result_lines(report: BatchReport, lines: Iterable[str]) -> BatchReport:
    for line in lines:
        parsed = parse_line(line)
        if parsed is None:
            continue
        content = extract_response_content(parsed)
        if content is not None:
            report.add_successful_response(len(content), extract_yara_rule(content) is not None)
        if parsed.get("error") is not None:
            report.add_error_response(extract_error_code(parsed))
    return report


def analyze_error_lines(report: BatchReport, lines: Iterable[str]) -> BatchReport:
    for line in lines:
        parsed = parse_line(line)
        if parsed is None or parsed.get("error") is None:
            continue
        report.add_error_response(extract_error_code(parsed))
    return report


def build_report(
    results_path: Path | str,
    errors_path: Path | str | None = None,
    *,
    thresholds: ReportThresholds = DEFAULT_THRESHOLDS,
) -> BatchReport:
    """Aggregate a results file and an optional errors file into a new report.

    Files that are missing or unreadable contribute nothing.
    """

    report = BatchReport(thresholds=thresholds)
    analyze_result_lines(report, _read_lines(results_path))
    if errors_path is not None:
        analyze_error_lines(report, _read_lines(errors_path))
    logger.info(
        "batch report built: total=%d ok=%d errors=%d",
        report.total_responses,
        report.successful_responses,
        report.error_responses,
    )
    return report


def write_report(report: BatchReport, path: Path | str) -> Path:
    target = Path(path)
    _write_text(target, report.generate_report_text())
    return target


def iter_yara_rules(lines: Iterable[str]) -> Iterator[YaraRuleInfo]:
    for line in lines:
        parsed = parse_line(line)
        if parsed is None:
            continue
        custom_id = parsed.get("custom_id")
        if not isinstance(custom_id, str):
            continue
        content = extract_response_content(parsed)
        if content is None:
            continue
        rule = extract_yara_rule(content)
        if rule is not None:
            yield YaraRuleInfo(custom_id=custom_id, rule_content=rule)


def save_yara_rules(results_path: Path | str, output_dir: Path | str) -> int:
    """Write every extracted rule to ``<output_dir>/<custom_id>.yar``; return the count.

    Rules whose ``custom_id`` is not a plain file name are skipped.
    """

    directory = Path(output_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileOperationError(f"failed to create YARA rules directory {directory}: {exc}") from exc

    source = Path(results_path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileOperationError(f"failed to read results file {source}: {exc}") from exc

    count = 0
    for info in iter_yara_rules(text.splitlines()):
        filename = f"{info.custom_id}.yar"
        if Path(filename).name != filename:
            logger.warning("skipping YARA rule with unsafe custom_id %r", info.custom_id)
            continue
        _write_text(directory / filename, info.rule_content)
        count += 1
    logger.info("saved %d YARA rules to %s", count, directory)
    return count


def _read_lines(path: Path | str) -> list[str]:
    try:
        return Path(path).read_text(encoding="utf-8").splitlines()
    except OSError:
        logger.warning("could not read batch file %s; skipping", path)
        return []


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FileOperationError(f"failed to write {path}: {exc}") from exc


__all__ = [
    "analyze_error_lines",
    "analyze_result_lines",
    "build_report",
    "extract_error_code",
    "extract_response_content",
    "iter_yara_rules",
    "parse_line",
    "save_yara_rules",
    "write_report",
]
