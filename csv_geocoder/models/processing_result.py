from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .run_tally import RunTally

"""Processing result model for the CSV geocoding tool.

Bundles the augmented rows, the frozen tally and run timings. This is what the
row processor hands back once a run has finished (or been abandoned).
"""


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one geocoding run."""
    rows: list[dict[str, Any]]  # augmented records, input order
    tally: RunTally
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # handled rows / elapsed

    @property
    def cancelled(self) -> bool:
        return self.tally.cancelled
