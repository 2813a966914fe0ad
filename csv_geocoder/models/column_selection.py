from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..config.errors import ConfigurationError

"""ColumnSelection model: which CSV columns make up a row's location query.

Up to three optional references (address, city, country). Unset references are
None or "". The query is always composed in address -> city -> country order.
"""

__all__ = [
    "ColumnSelection",
    "build_location_query",
]

QUERY_SEPARATOR = ", "


@dataclass(frozen=True)
class ColumnSelection:
    """Column references chosen from the header set.

    At least one reference must be set before a run can start. A reference
    missing from an individual record contributes nothing to that row's query.
    """
    address: str | None = None
    city: str | None = None
    country: str | None = None

    def selected(self) -> list[str]:
        """Set references in query order (address, city, country)."""
        return [c for c in (self.address, self.city, self.country) if c]

    @property
    def is_empty(self) -> bool:
        return not self.selected()

    def validate(self, headers: Iterable[str]) -> None:
        """Check every set reference exists in the header set.

        Raises:
            ConfigurationError: if nothing is selected or a reference is unknown.
        """
        if self.is_empty:
            raise ConfigurationError("select at least one location column (address, city or country)")
        header_set = set(headers)
        missing = [c for c in self.selected() if c not in header_set]
        if missing:
            raise ConfigurationError(f"selected columns not in header: {missing}")


def build_location_query(record: Mapping[str, str], columns: ColumnSelection) -> str:
    """Join the selected, non-empty values of ``record``; "" when nothing is present."""
    parts: list[str] = []
    for col in columns.selected():
        value = record.get(col)
        if value:
            parts.append(value)
    return QUERY_SEPARATOR.join(parts)
