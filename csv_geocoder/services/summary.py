from __future__ import annotations

from ..models.processing_result import ProcessingResult
from ..models.run_tally import RunTally

"""Summary rendering for a geocoding run.

SUMMARY line format:
    SUMMARY rows={total} processed={processed} skipped={skipped} errors={errors} elapsed_sec={elapsed}
"""

__all__ = [
    "render_summary_line",
    "render_completion_message",
    "render_error_preview",
]


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from csv_geocoder.models.run_tally import RunTally
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> tally = RunTally(total_rows=3, processed_rows=2, skipped_row_indices=(2,),
        ...                  error_details=(), handled_rows=3)
        >>> render_summary_line(ProcessingResult(rows=[], tally=tally, start_time=t,
        ...     end_time=t, elapsed_seconds=1.5, throughput_rows_per_sec=2.0))
        'SUMMARY rows=3 processed=2 skipped=1 errors=0 elapsed_sec=1.5'
    """
    tally = result.tally
    line = (
        f"SUMMARY rows={tally.total_rows} "
        f"processed={tally.processed_rows} "
        f"skipped={tally.skipped_rows} "
        f"errors={tally.error_count} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
    if tally.cancelled:
        line += f" cancelled_after={tally.handled_rows}"
    return line


def render_completion_message(tally: RunTally) -> str:
    """Human sentence shown once the run completes."""
    msg = f"Processed {tally.processed_rows} out of {tally.total_rows} rows."
    if tally.skipped_rows > 0:
        msg += f" Skipped {tally.skipped_rows} rows."
    return msg


def render_error_preview(tally: RunTally, limit: int) -> list[str]:
    """One line per error for the first ``limit`` failed rows, plus a remainder note."""
    lines = [
        f"row={d.row_index} error={d.message} location={d.query}"
        for d in tally.error_preview(limit)
    ]
    remaining = tally.error_count - len(lines)
    if remaining > 0:
        lines.append(f"... {remaining} more errors")
    return lines
