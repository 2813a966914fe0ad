from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.column_selection import ColumnSelection
from .errors import ConfigurationError

"""Config loader for the CSV geocoding tool.

Responsibilities:
- Load the optional YAML config (config/geocode.yml)
- Validate it against config_schema.json (unknown keys rejected)
- Apply defaults (delay 0.2s, timeout 10s, output geocoded_data.csv)
- Resolve the API credential from the environment
"""

__all__ = [
    "ConfigurationError",
    "GeocodeConfig",
    "default_config",
    "load_config",
    "resolve_credential",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/geocode.yml")

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DEFAULT_DELAY_SECONDS = 0.2
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_OUTPUT_PATH = "geocoded_data.csv"
DEFAULT_ERROR_PREVIEW_LIMIT = 5
DEFAULT_API_KEY_ENV = "GOOGLE_MAPS_API_KEY"


@dataclass(frozen=True)
class GeocodeConfig:
    columns: ColumnSelection
    delay_seconds: float = DEFAULT_DELAY_SECONDS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    base_url: str = DEFAULT_BASE_URL
    output_path: str = DEFAULT_OUTPUT_PATH
    error_preview_limit: int = DEFAULT_ERROR_PREVIEW_LIMIT
    api_key_env: str = DEFAULT_API_KEY_ENV

    def with_columns(self, **overrides: str | None) -> GeocodeConfig:
        """Return a copy whose column selection has the given non-None overrides applied."""
        picked = {k: v for k, v in overrides.items() if v is not None}
        if not picked:
            return self
        return replace(self, columns=replace(self.columns, **picked))


def default_config() -> GeocodeConfig:
    return GeocodeConfig(columns=ColumnSelection())


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigurationError: If the schema file is missing or unreadable, or the
            config data fails validation (wrong types, unknown keys, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigurationError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> GeocodeConfig:
    if not path.exists():
        raise ConfigurationError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    cols = data.get("columns", {})
    return GeocodeConfig(
        columns=ColumnSelection(
            address=cols.get("address"),
            city=cols.get("city"),
            country=cols.get("country"),
        ),
        delay_seconds=float(data.get("delay_seconds", DEFAULT_DELAY_SECONDS)),
        request_timeout=float(data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
        base_url=data.get("base_url", DEFAULT_BASE_URL),
        output_path=data.get("output_path", DEFAULT_OUTPUT_PATH),
        error_preview_limit=int(data.get("error_preview_limit", DEFAULT_ERROR_PREVIEW_LIMIT)),
        api_key_env=data.get("api_key_env", DEFAULT_API_KEY_ENV),
    )


def resolve_credential(explicit: str | None, env_var: str = DEFAULT_API_KEY_ENV) -> str:
    """Pick the API key: an explicit value wins over the environment.

    Raises:
        ConfigurationError: If neither source provides a non-blank key.
    """
    key = explicit if explicit else os.getenv(env_var, "")
    if not key or not key.strip():
        raise ConfigurationError(
            f"missing API key: pass --api-key or set {env_var}"
        )
    return key.strip()
