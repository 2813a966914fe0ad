# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from csv_geocoder.logging.init import LOGGER_NAME, reset_logging
from csv_geocoder.models.outcome import GeocodeOutcome, Resolved, Unresolved


class FakeGeocoder:
    """Geocoder double: answers from a query -> outcome map and records calls."""

    def __init__(self, answers: dict[str, GeocodeOutcome] | None = None,
                 default: GeocodeOutcome | None = None) -> None:
        self.answers = answers or {}
        self.default = default if default is not None else Unresolved()
        self.calls: list[tuple[str, str]] = []

    def resolve(self, query: str, credential: str) -> GeocodeOutcome:
        self.calls.append((query, credential))
        return self.answers.get(query, self.default)


def make_response(payload: Any = None, *, status_code: int = 200, json_error: Exception | None = None) -> Mock:
    """requests.Response stand-in for session.get()."""
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


def ok_payload(lat: float, lng: float) -> dict[str, Any]:
    return {
        "status": "OK",
        "results": [{"geometry": {"location": {"lat": lat, "lng": lng}}}],
    }


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    # drop handlers bound to this test's captured stdout
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
    reset_logging()


@pytest.fixture()
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder(
        answers={
            "1 Main St, Springfield": Resolved(lat=1.0, lng=2.0),
            "10 Downing St, London, UK": Resolved(lat=51.5034, lng=-0.1276),
        }
    )


@pytest.fixture()
def sample_csv_text() -> str:
    return (
        "Name,Address,City,Country\n"
        "Alice,1 Main St,Springfield,\n"
        "Bob,,,\n"
        "Carol,10 Downing St,London,UK\n"
    )


@pytest.fixture()
def sample_csv(temp_workdir: Path, sample_csv_text: str) -> Path:
    f = temp_workdir / "data" / "people.csv"
    f.write_text(sample_csv_text, encoding="utf-8")
    return f


@pytest.fixture()
def sample_config_yaml() -> str:
    return """columns:
  address: Address
  city: City
  country: Country
delay_seconds: 0
request_timeout: 5
output_path: out/geocoded_data.csv
error_preview_limit: 3
api_key_env: TEST_GEOCODE_KEY
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "geocode.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
