from __future__ import annotations

from dataclasses import dataclass

"""Run tally models for the CSV geocoding tool.

TallyAccumulator collects per-row outcomes while the processor runs; build()
freezes them into a RunTally for the summary / reporter side.

Every handled row lands in exactly one bucket:
    processed_rows + len(skipped_row_indices) == handled_rows
and for a completed (not cancelled) run handled_rows == total_rows.
"""

__all__ = [
    "ErrorDetail",
    "RunTally",
    "TallyAccumulator",
]


@dataclass(frozen=True)
class ErrorDetail:
    """One failed geocoding call."""
    row_index: int  # 1-based position in the input
    message: str
    query: str


@dataclass(frozen=True)
class RunTally:
    """Aggregate run statistics, read-only once the run has finished."""
    total_rows: int
    processed_rows: int
    skipped_row_indices: tuple[int, ...]
    error_details: tuple[ErrorDetail, ...]
    handled_rows: int
    cancelled: bool = False

    @property
    def skipped_rows(self) -> int:
        return len(self.skipped_row_indices)

    @property
    def error_count(self) -> int:
        return len(self.error_details)

    @property
    def is_complete(self) -> bool:
        return not self.cancelled and self.handled_rows == self.total_rows

    def error_preview(self, limit: int) -> tuple[ErrorDetail, ...]:
        """First ``limit`` error entries in row order."""
        if limit <= 0:
            return ()
        return self.error_details[:limit]


class TallyAccumulator:
    """Incremental builder used by the row processor.

    Not thread safe; owned by a single run.
    """

    def __init__(self) -> None:
        self.processed_rows = 0
        self.skipped_row_indices: list[int] = []
        self.error_details: list[ErrorDetail] = []

    @property
    def handled_rows(self) -> int:
        return self.processed_rows + len(self.skipped_row_indices)

    def record_resolved(self) -> None:
        self.processed_rows += 1

    def record_skipped(self, row_index: int) -> None:
        self.skipped_row_indices.append(row_index)

    def record_failure(self, row_index: int, message: str, query: str) -> None:
        """A failed call is both skipped and listed in the error details."""
        self.skipped_row_indices.append(row_index)
        self.error_details.append(ErrorDetail(row_index=row_index, message=message, query=query))

    def build(self, total_rows: int, *, cancelled: bool = False) -> RunTally:
        return RunTally(
            total_rows=total_rows,
            processed_rows=self.processed_rows,
            skipped_row_indices=tuple(self.skipped_row_indices),
            error_details=tuple(self.error_details),
            handled_rows=self.handled_rows,
            cancelled=cancelled,
        )
