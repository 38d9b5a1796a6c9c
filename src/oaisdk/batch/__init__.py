"""Batch result aggregation, YARA extraction and report rendering."""

from __future__ import annotations

from .report import DEFAULT_THRESHOLDS, BatchReport, ReportThresholds  # noqa: F401
from .results import (  # noqa: F401
    analyze_error_lines,
    analyze_result_lines,
    build_report,
    iter_yara_rules,
    save_yara_rules,
    write_report,
)
from .yara import extract_rule_name, extract_yara_rule, validate_yara_rule  # noqa: F401
