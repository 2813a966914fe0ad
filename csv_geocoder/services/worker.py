from __future__ import annotations

import concurrent.futures
import logging
import threading
from collections.abc import Mapping, Sequence

from ..models.column_selection import ColumnSelection
from ..models.processing_result import ProcessingResult
from .processor import ProgressCallback, RowProcessor

"""Background execution of a geocoding run.

A host (CLI, UI) submits the run and keeps its own thread free. Progress only
travels through the callback; the rows and tally are handed over when the
future resolves. cancel() stops the run between rows and the future then holds
the partial result.
"""

logger = logging.getLogger(__name__)


class GeocodeWorker:
    """Single-slot worker: at most one run in flight."""

    def __init__(self, processor: RowProcessor) -> None:
        self.processor = processor
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="geocode"
        )
        self._cancel = threading.Event()
        self._future: concurrent.futures.Future[ProcessingResult] | None = None

    @property
    def running(self) -> bool:
        return self._future is not None and not self._future.done()

    def start(
        self,
        records: Sequence[Mapping[str, str]],
        columns: ColumnSelection,
        credential: str,
        on_progress: ProgressCallback | None = None,
    ) -> concurrent.futures.Future[ProcessingResult]:
        """Submit a run. ConfigurationError surfaces through the future."""
        if self.running:
            raise RuntimeError("a geocoding run is already in progress")
        self._cancel.clear()
        self._future = self._executor.submit(
            self.processor.process,
            records,
            columns,
            credential,
            on_progress,
            self._cancel,
        )
        logger.debug("geocoding run submitted rows=%d", len(records))
        return self._future

    def cancel(self) -> None:
        """Ask the current run to stop before its next row."""
        self._cancel.set()

    def shutdown(self, wait: bool = True) -> None:
        if not wait:
            self._cancel.set()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> GeocodeWorker:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=exc_type is None)
