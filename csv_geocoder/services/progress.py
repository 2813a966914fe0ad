from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress display with tqdm (TTY only).

The row processor reports a fraction in 0..1; RowProgressTracker turns it into
row counts on a single tqdm bar. In non-TTY environments (CI, pipes) the bar is
disabled to avoid ANSI control sequence spam.
"""

__all__ = [
    "RowProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgressTracker:
    """Progress bar fed by the processor's ``on_progress`` callback."""

    def __init__(self, total_rows: int, *, description: str = "Geocoding rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.handled_rows = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def __call__(self, fraction: float) -> None:
        self.update_fraction(fraction)

    def update_fraction(self, fraction: float) -> None:
        """Advance the bar to ``fraction`` of total rows (never backwards)."""
        target = round(fraction * self.total_rows)
        step = target - self.handled_rows
        if step <= 0:
            return
        self.handled_rows = target
        if self.enabled and self.pbar is not None:
            self.pbar.update(step)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
