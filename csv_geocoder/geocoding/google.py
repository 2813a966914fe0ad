from __future__ import annotations

import logging
from typing import Any

import requests

from ..config.loader import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from ..models.outcome import Failed, GeocodeOutcome, Resolved, Unresolved

"""Google Geocoding API client.

One GET per query, credential passed as the ``key`` parameter. The response is
classified into Resolved / Unresolved / Failed; nothing is raised to the
caller, nothing is retried or cached.
"""

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"


class GoogleGeocodingClient:
    """Thin client over the Geocoding JSON endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def resolve(self, query: str, credential: str) -> GeocodeOutcome:
        params = {"address": query, "key": credential}
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug("geocode transport error query=%r: %s", query, e)
            return Failed(message=str(e) or type(e).__name__)

        if not response.ok:
            return Failed(message=f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            return Failed(message=f"Malformed response: {e}")
        if not isinstance(data, dict):
            return Failed(message="Malformed response: expected a JSON object")

        return classify_response(data)

    def close(self) -> None:
        self.session.close()


def classify_response(data: dict[str, Any]) -> GeocodeOutcome:
    """Map a decoded Geocoding API body to an outcome.

    OK + results    -> Resolved (first result)
    OK + no results -> Unresolved
    ZERO_RESULTS    -> Unresolved
    anything else   -> Failed("Geocoding failed: <STATUS>[: error_message]")
    """
    status = data.get("status")
    if status == STATUS_ZERO_RESULTS:
        return Unresolved()
    if status != STATUS_OK:
        msg = f"Geocoding failed: {status}"
        detail = data.get("error_message")
        if detail:
            msg = f"{msg}: {detail}"
        return Failed(message=msg)

    results = data.get("results") or []
    if not results:
        return Unresolved()
    try:
        location = results[0]["geometry"]["location"]
        lat = float(location["lat"])
        lng = float(location["lng"])
    except (KeyError, TypeError, ValueError) as e:
        return Failed(message=f"Malformed response: missing coordinates ({e!r})")
    return Resolved(lat=lat, lng=lng)
