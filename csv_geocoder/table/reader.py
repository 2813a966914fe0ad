from __future__ import annotations

import csv
import io
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

import pandas as pd

from ..config.errors import ConfigurationError

"""CSV reader for the geocoding tool.

First line is the header, every following non-blank line is a data row.
All cells are read as strings; empty and missing cells become "" so the
location query builder never sees NaN.

The header line is checked with csv.reader before pandas loads the table:
duplicate column names and rows wider than the header are rejected, since
pandas would rename the former and shift or drop cells of the latter.
Empty cells after the last header column (a trailing delimiter) are ignored.
"""

__all__ = [
    "ParseError",
    "TableData",
    "read_table",
    "inspect_table",
]


class ParseError(Exception):
    """Raised when the input table cannot be parsed (message from the parser)."""


@dataclass
class TableData:
    source: str
    columns: list[str]
    rows: list[dict[str, str]]  # column -> cell text, one per data row


def read_table(source: Path | str | bytes | IO[Any], *, name: str | None = None) -> TableData:
    """Decode a CSV file, raw bytes or a text/binary stream.

    Parameters
    ----------
    source: path to a CSV file, its raw bytes, or an open stream
    name: display name for logs (defaults to the file name, else "<upload>")

    Raises
    ------
    ConfigurationError: path given but the file does not exist
    ParseError: empty file, malformed CSV, duplicate header names, rows wider
        than the header, or undecodable bytes
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise ConfigurationError(f"input file not found: {path}")
        display = name or path.name
        content: str | bytes = path.read_bytes()
    elif isinstance(source, bytes):
        display = name or "<upload>"
        content = source
    else:
        display = name or getattr(source, "name", None) or "<upload>"
        content = source.read()

    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"{display}: not valid UTF-8 ({e})") from e
    else:
        text = content.removeprefix("\ufeff")

    _check_layout(text, display)

    try:
        with warnings.catch_warnings():
            # trailing delimiters are already vetted by _check_layout
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
            )
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"{display}: empty file ({e})") from e
    except pd.errors.ParserError as e:
        raise ParseError(f"{display}: {e}") from e

    columns = [str(c) for c in df.columns]
    rows: list[dict[str, str]] = []
    for raw in df.itertuples(index=False, name=None):
        row: dict[str, str] = {}
        for col, val in zip(columns, raw, strict=False):
            # short lines are padded with NaN even with keep_default_na=False
            row[col] = "" if pd.isna(val) else str(val)
        rows.append(row)
    return TableData(source=display, columns=columns, rows=rows)


def _check_layout(text: str, display: str) -> None:
    reader = csv.reader(io.StringIO(text))
    try:
        header = next((r for r in reader if r), None)
        if header is None:
            return

        seen: set[str] = set()
        duplicates: list[str] = []
        for col in header:
            if col and col in seen and col not in duplicates:
                duplicates.append(col)
            seen.add(col)
        if duplicates:
            raise ParseError(f"{display}: duplicate column names in header: {duplicates}")

        width = len(header)
        for row in reader:
            if len(row) > width and any(cell.strip() for cell in row[width:]):
                raise ParseError(
                    f"{display}: line {reader.line_num} has {len(row)} fields, header has {width}"
                )
    except csv.Error as e:
        raise ParseError(f"{display}: line {reader.line_num}: {e}") from e


def inspect_table(table: TableData, sample: int = 3) -> list[str]:
    """Header plus the first ``sample`` rows, one printable line each."""
    lines = [f"FILE: {table.source} rows={len(table.rows)}", f"  cols={table.columns}"]
    for i, row in enumerate(table.rows[:sample], start=1):
        lines.append(f"  row {i}: {row}")
    return lines
