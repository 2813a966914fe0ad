from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the per-row error log.

Each failed geocoding call becomes one JSON Lines entry with a fixed key set:
timestamp, file, row, error_type, message, query.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV filename being processed
        row: Row number (1-based data row)
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable failure message
        query: Location query sent to the geocoding service
    """
    timestamp: str
    file: str
    row: int
    error_type: str
    message: str
    query: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str, query: str = "") -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
            query=query,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
