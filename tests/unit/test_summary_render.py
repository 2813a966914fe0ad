from __future__ import annotations

import re
from datetime import datetime, timezone

from csv_geocoder.models.processing_result import ProcessingResult
from csv_geocoder.models.run_tally import TallyAccumulator
from csv_geocoder.services.summary import (
    render_completion_message,
    render_error_preview,
    render_summary_line,
)

"""Unit tests for the summary rendering service."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+rows=([0-9]+)\s+processed=([0-9]+)\s+skipped=([0-9]+)\s+"
    r"errors=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)(\s+cancelled_after=([0-9]+))?$"
)

T0 = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _result(acc: TallyAccumulator, total: int, elapsed: float, cancelled: bool = False) -> ProcessingResult:
    return ProcessingResult(
        rows=[],
        tally=acc.build(total, cancelled=cancelled),
        start_time=T0,
        end_time=T0,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=0.0,
    )


def test_render_summary_line_all_resolved():
    acc = TallyAccumulator()
    for _ in range(3):
        acc.record_resolved()
    line = render_summary_line(_result(acc, 3, 2.0))
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert m.group(1) == "3"
    assert m.group(2) == "3"
    assert m.group(3) == "0"
    assert m.group(4) == "0"
    assert m.group(5) == "2"


def test_render_summary_line_with_skips_and_errors():
    acc = TallyAccumulator()
    acc.record_resolved()
    acc.record_skipped(2)
    acc.record_failure(3, "boom", "q")
    line = render_summary_line(_result(acc, 3, 1.234))
    assert line == "SUMMARY rows=3 processed=1 skipped=2 errors=1 elapsed_sec=1.23"


def test_render_summary_line_small_elapsed_not_scientific():
    line = render_summary_line(_result(TallyAccumulator(), 0, 0.000123))
    assert "e-" not in line
    assert line.endswith("elapsed_sec=0.000123")


def test_render_summary_line_cancelled():
    acc = TallyAccumulator()
    acc.record_resolved()
    line = render_summary_line(_result(acc, 5, 0))
    assert "cancelled_after" not in line
    line = render_summary_line(_result(acc, 5, 0, cancelled=True))
    assert SUMMARY_PATTERN.match(line)
    assert line.endswith("cancelled_after=1")


def test_completion_message():
    acc = TallyAccumulator()
    acc.record_resolved()
    acc.record_skipped(2)
    assert render_completion_message(acc.build(2)) == "Processed 1 out of 2 rows. Skipped 1 rows."
    acc2 = TallyAccumulator()
    acc2.record_resolved()
    assert render_completion_message(acc2.build(1)) == "Processed 1 out of 1 rows."


def test_error_preview_lists_first_entries_and_remainder():
    acc = TallyAccumulator()
    for i in range(1, 5):
        acc.record_failure(i, f"err{i}", f"loc{i}")
    lines = render_error_preview(acc.build(4), 2)
    assert lines == [
        "row=1 error=err1 location=loc1",
        "row=2 error=err2 location=loc2",
        "... 2 more errors",
    ]


def test_error_preview_empty_when_no_errors():
    assert render_error_preview(TallyAccumulator().build(0), 5) == []
