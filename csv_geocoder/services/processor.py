from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from ..config.loader import DEFAULT_DELAY_SECONDS, ConfigurationError
from ..geocoding.base import Geocoder
from ..logging.error_log import GEOCODE_FAILED, ErrorLogBuffer, ErrorRecord
from ..models.column_selection import ColumnSelection, build_location_query
from ..models.outcome import Failed, Resolved, Unresolved
from ..models.processing_result import ProcessingResult
from ..models.run_tally import TallyAccumulator
from ..table.writer import LATITUDE, LONGITUDE

"""Row processor: the geocoding pipeline.

Rows are handled strictly one at a time in input order:
1. Build the location query from the selected, non-empty columns
2. Empty query -> skipped, no network call, no delay
3. Otherwise resolve it and classify Resolved / Unresolved / Failed
4. After every networked row wait ``delay_seconds`` (service rate limit)
5. Report handled/total through the progress callback
"""

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class RowProcessor:
    """Sequential geocoding of table records.

    Args:
        client: any Geocoder (GoogleGeocodingClient in production)
        delay_seconds: pause after each row that reached the service
        sleep: pause function, used when no cancel event is given
        error_log: optional JSON Lines buffer for failed rows
        source_name: file name recorded in error log entries
    """

    def __init__(
        self,
        client: Geocoder,
        *,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        error_log: ErrorLogBuffer | None = None,
        source_name: str = "<upload>",
    ) -> None:
        self.client = client
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.error_log = error_log
        self.source_name = source_name

    def process(
        self,
        records: Sequence[Mapping[str, str]],
        columns: ColumnSelection,
        credential: str,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ProcessingResult:
        """Geocode every record and return augmented rows plus the tally.

        Raises:
            ConfigurationError: no column selected or blank credential; raised
                before any record is touched.
        """
        if columns.is_empty:
            raise ConfigurationError("select at least one location column (address, city or country)")
        if not credential or not credential.strip():
            raise ConfigurationError("missing API key")

        start_time = datetime.now(UTC)
        total = len(records)
        tally = TallyAccumulator()
        rows: list[dict[str, Any]] = []
        cancelled = False

        logger.info("geocoding %d rows (columns=%s)", total, columns.selected())

        for index, record in enumerate(records, start=1):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.info("run cancelled after %d/%d rows", index - 1, total)
                break

            query = build_location_query(record, columns)
            if not query:
                logger.debug("row %d: no location values, skipped", index)
                tally.record_skipped(index)
                rows.append(dict(record))
                _report(on_progress, index, total)
                continue

            rows.append(self._handle_row(index, record, query, credential, tally))
            _report(on_progress, index, total)
            # applied after the last networked row as well
            self._pause(cancel_event)

        if total == 0 and on_progress is not None:
            on_progress(1.0)

        end_time = datetime.now(UTC)
        elapsed = (end_time - start_time).total_seconds()
        result_tally = tally.build(total, cancelled=cancelled)
        throughput = result_tally.handled_rows / elapsed if elapsed > 0 else 0.0

        logger.info(
            "geocoding finished processed=%d skipped=%d errors=%d",
            result_tally.processed_rows,
            result_tally.skipped_rows,
            result_tally.error_count,
        )
        return ProcessingResult(
            rows=rows,
            tally=result_tally,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=elapsed,
            throughput_rows_per_sec=throughput,
        )

    def _handle_row(
        self,
        index: int,
        record: Mapping[str, str],
        query: str,
        credential: str,
        tally: TallyAccumulator,
    ) -> dict[str, Any]:
        row: dict[str, Any] = dict(record)
        outcome = self.client.resolve(query, credential)

        if isinstance(outcome, Resolved):
            tally.record_resolved()
            row[LATITUDE] = outcome.lat
            row[LONGITUDE] = outcome.lng
            logger.debug("row %d: %r -> (%s, %s)", index, query, outcome.lat, outcome.lng)
        elif isinstance(outcome, Unresolved):
            tally.record_skipped(index)
            logger.debug("row %d: %r -> no match", index, query)
        elif isinstance(outcome, Failed):
            tally.record_failure(index, outcome.message, query)
            logger.warning("row %d: geocoding failed for %r: %s", index, query, outcome.message)
            if self.error_log is not None:
                self.error_log.append(
                    ErrorRecord.create(
                        file=self.source_name,
                        row=index,
                        error_type=GEOCODE_FAILED,
                        message=outcome.message,
                        query=query,
                    )
                )
        else:  # pragma: no cover
            raise TypeError(f"unexpected geocode outcome: {outcome!r}")
        return row

    def _pause(self, cancel_event: threading.Event | None) -> None:
        if self.delay_seconds <= 0:
            return
        if cancel_event is not None:
            # returns early when the run is abandoned mid-delay
            cancel_event.wait(self.delay_seconds)
        else:
            self._sleep(self.delay_seconds)


def _report(on_progress: ProgressCallback | None, handled: int, total: int) -> None:
    if on_progress is not None:
        on_progress(handled / total)
