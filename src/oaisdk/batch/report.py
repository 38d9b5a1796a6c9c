"""Aggregate statistics over processed batch results.

A :class:`BatchReport` is fed one outcome at a time by a caller iterating over
results and renders a Markdown summary. The aggregate is single-threaded; it
has no internal locking.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ReportThresholds:
    """Percentages that drive the advisory bullets in the recommendations section."""

    warn_success_below: float = 90.0
    praise_success_at_or_above: float = 95.0
    warn_extraction_below: float = 80.0
    praise_extraction_at_or_above: float = 90.0


DEFAULT_THRESHOLDS = ReportThresholds()


@dataclass(slots=True)
class BatchReport:
    total_responses: int = 0
    successful_responses: int = 0
    error_responses: int = 0
    yara_rules_found: int = 0
    total_tokens: int = 0
    error_types: dict[str, int] = field(default_factory=dict)
    thresholds: ReportThresholds = DEFAULT_THRESHOLDS

    def add_successful_response(self, content_length: int, has_yara_rule: bool) -> None:
        self.total_responses += 1
        self.successful_responses += 1
        self.total_tokens += content_length
        if has_yara_rule:
            self.yara_rules_found += 1

    def add_error_response(self, error_type: str | None = None) -> None:
        self.total_responses += 1
        self.error_responses += 1
        if error_type is not None:
            self.error_types[error_type] = self.error_types.get(error_type, 0) + 1

    def success_rate(self) -> float:
        if self.total_responses == 0:
            return 0.0
        return self.successful_responses / self.total_responses * 100.0

    def yara_extraction_rate(self) -> float:
        if self.successful_responses == 0:
            return 0.0
        return self.yara_rules_found / self.successful_responses * 100.0

    def average_response_length(self) -> float:
        if self.successful_responses == 0:
            return 0.0
        return self.total_tokens / self.successful_responses

    def reset(self) -> None:
        """Zero every counter; thresholds are kept."""

        self.total_responses = 0
        self.successful_responses = 0
        self.error_responses = 0
        self.yara_rules_found = 0
        self.total_tokens = 0
        self.error_types.clear()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_responses": self.total_responses,
            "successful_responses": self.successful_responses,
            "error_responses": self.error_responses,
            "yara_rules_found": self.yara_rules_found,
            "total_tokens": self.total_tokens,
            "error_types": dict(self.error_types),
            "success_rate": self.success_rate(),
            "yara_extraction_rate": self.yara_extraction_rate(),
            "average_response_length": self.average_response_length(),
        }

    def generate_report_text(self, now: datetime | None = None) -> str:
        """Render the Markdown report.

        ``now`` pins the ``Generated at`` line; by default the current Unix
        time in seconds is used.
        """

        generated_at = int(now.timestamp()) if now is not None else int(time.time())
        sections = [
            "# OpenAI Batch Processing Report\n\n",
            f"Generated at: {generated_at}\n\n",
            self._summary_section(),
            self._yara_section(),
            self._error_section(),
            self._recommendations_section(),
        ]
        return "".join(sections)

    def _summary_section(self) -> str:
        return (
            "## Summary Statistics\n\n"
            f"- **Total Responses**: {self.total_responses}\n"
            f"- **Successful Responses**: {self.successful_responses}\n"
            f"- **Error Responses**: {self.error_responses}\n"
            f"- **Success Rate**: {self.success_rate():.1f}%\n"
            f"- **Total Content Length**: {self.total_tokens} characters\n"
            f"- **Average Response Length**: {self.average_response_length():.0f} characters\n\n"
        )

    def _yara_section(self) -> str:
        return (
            "## YARA Rule Analysis\n\n"
            f"- **YARA Rules Found**: {self.yara_rules_found}\n"
            f"- **YARA Extraction Rate**: {self.yara_extraction_rate():.1f}%\n\n"
        )

    def _error_section(self) -> str:
        if not self.error_types:
            return ""
        ordered = sorted(self.error_types.items(), key=lambda item: (-item[1], item[0]))
        lines = ["## Error Analysis\n\n"]
        lines.extend(f"- **{error_type}**: {count} occurrences\n" for error_type, count in ordered)
        lines.append("\n")
        return "".join(lines)

    def _recommendations_section(self) -> str:
        limits = self.thresholds
        success = self.success_rate()
        extraction = self.yara_extraction_rate()
        lines = ["## Recommendations\n\n"]
        if success < limits.warn_success_below:
            lines.append(
                f"- ⚠️ Success rate is below {limits.warn_success_below:g}%. "
                "Consider reviewing your prompts or model parameters.\n"
            )
        if extraction < limits.warn_extraction_below and self.yara_rules_found > 0:
            lines.append("- ⚠️ YARA rule extraction rate is low. Consider improving prompt specificity.\n")
        if success >= limits.praise_success_at_or_above:
            lines.append("- ✅ Excellent success rate! Your batch configuration is working well.\n")
        if extraction >= limits.praise_extraction_at_or_above and self.yara_rules_found > 0:
            lines.append("- ✅ High YARA rule extraction rate indicates effective prompts.\n")
        return "".join(lines)


__all__ = ["BatchReport", "DEFAULT_THRESHOLDS", "ReportThresholds"]
