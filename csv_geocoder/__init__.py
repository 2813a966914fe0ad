"""CSV geocoding tool: resolve table rows to coordinates via the Google Geocoding API."""

__version__ = "0.1.0"
