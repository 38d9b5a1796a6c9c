from datetime import datetime, timezone

import pytest

from oaisdk.batch.report import BatchReport, ReportThresholds


def test_empty_report_rates_are_zero() -> None:
    report = BatchReport()

    assert report.success_rate() == 0.0
    assert report.yara_extraction_rate() == 0.0
    assert report.average_response_length() == 0.0


@pytest.mark.parametrize(
    "calls",
    [
        ["ok", "ok", "err"],
        ["err", "err", "err"],
        ["ok", "err", "ok", "err", "ok"],
        [],
    ],
)
def test_total_is_sum_after_every_call(calls: list[str]) -> None:
    report = BatchReport()
    for call in calls:
        if call == "ok":
            report.add_successful_response(10, False)
        else:
            report.add_error_response("boom")
        assert report.total_responses == report.successful_responses + report.error_responses


def test_success_rate_two_of_three() -> None:
    report = BatchReport()
    report.add_successful_response(10, False)
    report.add_successful_response(10, True)
    report.add_error_response()

    assert report.success_rate() == pytest.approx(2.0 / 3.0 * 100.0)
    assert round(report.success_rate(), 2) == 66.67


def test_yara_extraction_rate_half() -> None:
    report = BatchReport()
    report.add_successful_response(10, True)
    report.add_successful_response(10, False)

    assert report.yara_extraction_rate() == 50.0


def test_average_response_length() -> None:
    report = BatchReport()
    report.add_successful_response(100, False)
    report.add_successful_response(200, False)

    assert report.average_response_length() == 150.0
    assert report.total_tokens == 300


def test_error_histogram() -> None:
    report = BatchReport()
    report.add_error_response("rate_limit")
    report.add_error_response("rate_limit")
    report.add_error_response("timeout")
    report.add_error_response(None)

    assert report.error_types == {"rate_limit": 2, "timeout": 1}
    assert report.error_responses == 4


def test_report_text_sections() -> None:
    report = BatchReport()
    report.add_successful_response(120, True)

    text = report.generate_report_text(now=datetime.fromtimestamp(1_700_000_000, tz=timezone.utc))

    assert text.startswith("# OpenAI Batch Processing Report\n\nGenerated at: 1700000000\n\n")
    assert "## Summary Statistics" in text
    assert "- **Success Rate**: 100.0%" in text
    assert "- **Average Response Length**: 120 characters" in text
    assert "## YARA Rule Analysis" in text
    assert "- **YARA Extraction Rate**: 100.0%" in text
    assert "Error Analysis" not in text


def test_report_text_has_error_analysis_iff_errors() -> None:
    report = BatchReport()
    report.add_error_response()
    assert "Error Analysis" not in report.generate_report_text()

    report.add_error_response("timeout")
    report.add_error_response("rate_limit")
    report.add_error_response("rate_limit")
    report.add_error_response("auth")
    text = report.generate_report_text()

    assert "## Error Analysis" in text
    lines = [line for line in text.splitlines() if "occurrences" in line]
    assert lines == [
        "- **rate_limit**: 2 occurrences",
        "- **auth**: 1 occurrences",
        "- **timeout**: 1 occurrences",
    ]


def test_recommendations_follow_default_thresholds() -> None:
    poor = BatchReport()
    poor.add_successful_response(10, True)
    poor.add_successful_response(10, False)
    poor.add_error_response("timeout")
    text = poor.generate_report_text()

    assert "Success rate is below 90%" in text
    assert "YARA rule extraction rate is low" in text
    assert "Excellent success rate" not in text

    good = BatchReport()
    good.add_successful_response(10, True)
    text = good.generate_report_text()

    assert "Excellent success rate" in text
    assert "High YARA rule extraction rate" in text
    assert "below" not in text


def test_extraction_advice_needs_at_least_one_rule() -> None:
    report = BatchReport()
    report.add_successful_response(10, False)

    text = report.generate_report_text()

    assert "YARA rule extraction rate is low" not in text
    assert "High YARA rule extraction rate" not in text


def test_custom_thresholds_change_advice() -> None:
    report = BatchReport(thresholds=ReportThresholds(warn_success_below=50.0, praise_success_at_or_above=60.0))
    report.add_successful_response(10, False)
    report.add_successful_response(10, False)
    report.add_error_response()

    text = report.generate_report_text()

    assert "Success rate is below" not in text
    assert "Excellent success rate" in text


def test_reset_clears_counters_and_keeps_thresholds() -> None:
    thresholds = ReportThresholds(warn_success_below=10.0)
    report = BatchReport(thresholds=thresholds)
    report.add_successful_response(10, True)
    report.add_error_response("timeout")

    report.reset()

    assert report.total_responses == 0
    assert report.error_types == {}
    assert report.total_tokens == 0
    assert report.thresholds is thresholds


def test_to_dict_includes_rates() -> None:
    report = BatchReport()
    report.add_successful_response(50, True)
    report.add_error_response("timeout")

    summary = report.to_dict()

    assert summary["total_responses"] == 2
    assert summary["success_rate"] == 50.0
    assert summary["yara_extraction_rate"] == 100.0
    assert summary["error_types"] == {"timeout": 1}
