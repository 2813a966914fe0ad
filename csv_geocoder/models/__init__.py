"""Domain models for the CSV geocoding tool."""

from .column_selection import ColumnSelection, build_location_query
from .error_record import ErrorRecord
from .outcome import Failed, GeocodeOutcome, Resolved, Unresolved
from .processing_result import ProcessingResult
from .run_tally import ErrorDetail, RunTally, TallyAccumulator

__all__ = [
    # Selection
    "ColumnSelection",
    "build_location_query",
    # Outcomes
    "Failed",
    "GeocodeOutcome",
    "Resolved",
    "Unresolved",
    # Results
    "ErrorDetail",
    "ErrorRecord",
    "ProcessingResult",
    "RunTally",
    "TallyAccumulator",
]
