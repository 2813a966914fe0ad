from __future__ import annotations

from typing import Protocol

from ..models.outcome import GeocodeOutcome

"""Geocoder interface.

The row processor only depends on this protocol; the Google client is one
implementation and tests drive the processor with fakes.
"""


class Geocoder(Protocol):
    def resolve(self, query: str, credential: str) -> GeocodeOutcome: ...
