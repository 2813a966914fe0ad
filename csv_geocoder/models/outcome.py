from __future__ import annotations

from dataclasses import dataclass
from typing import Union

"""Per-row geocode outcome.

A tagged result computed once per row and never mutated:
- Resolved: the service returned at least one match (first one is used)
- Unresolved: the service answered but had no usable match
- Failed: the call itself failed (transport, HTTP, malformed body, error status)
"""

__all__ = [
    "Resolved",
    "Unresolved",
    "Failed",
    "GeocodeOutcome",
]


@dataclass(frozen=True)
class Resolved:
    lat: float
    lng: float


@dataclass(frozen=True)
class Unresolved:
    pass


@dataclass(frozen=True)
class Failed:
    message: str


GeocodeOutcome = Union[Resolved, Unresolved, Failed]
