from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

"""CSV writer for augmented records.

Column order is the original header order, then Latitude and Longitude when at
least one row carries them. Rows without a coordinate get empty cells.
"""

__all__ = [
    "LATITUDE",
    "LONGITUDE",
    "OUTPUT_FILENAME",
    "OUTPUT_MIME_TYPE",
    "output_columns",
    "encode_table",
    "write_table",
]

LATITUDE = "Latitude"
LONGITUDE = "Longitude"
OUTPUT_FILENAME = "geocoded_data.csv"
OUTPUT_MIME_TYPE = "text/csv"


def output_columns(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> list[str]:
    cols = list(columns)
    for extra in (LATITUDE, LONGITUDE):
        if extra not in cols and any(extra in r for r in rows):
            cols.append(extra)
    return cols


def encode_table(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> str:
    """Serialize ``rows`` to CSV text (header line included)."""
    df = pd.DataFrame(list(rows), columns=output_columns(rows, columns))
    return df.to_csv(index=False, lineterminator="\n")


def write_table(path: Path, rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_table(rows, columns), encoding="utf-8")
    return path
