from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when a run cannot start: missing file, credential or column selection."""
