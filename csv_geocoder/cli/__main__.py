from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from csv_geocoder.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigurationError,
    GeocodeConfig,
    default_config,
    load_config,
    resolve_credential,
)
from csv_geocoder.geocoding.google import GoogleGeocodingClient
from csv_geocoder.logging.error_log import ErrorLogBuffer
from csv_geocoder.logging.init import log_summary, setup_logging
from csv_geocoder.models.processing_result import ProcessingResult
from csv_geocoder.services.processor import RowProcessor
from csv_geocoder.services.progress import RowProgressTracker
from csv_geocoder.services.summary import (
    render_completion_message,
    render_error_preview,
    render_summary_line,
)
from csv_geocoder.services.worker import GeocodeWorker
from csv_geocoder.table.reader import ParseError, TableData, inspect_table, read_table
from csv_geocoder.table.writer import write_table

"""CLI entrypoint.

Flow:
- Load .env, then the optional YAML config; flags override config values
- Read the input CSV and validate the column selection against its header
- Run the geocoding in a background worker with a tqdm progress bar
- Write the augmented CSV, flush the error log, print SUMMARY
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2
EXIT_CANCELLED = 130


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env with python-dotenv; existing environment variables win by default."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Geocode the rows of a CSV file via the Google Geocoding API")
    p.add_argument("input", help="CSV file with a header line")
    p.add_argument("-o", "--output", help="output CSV path (default: geocoded_data.csv)")
    p.add_argument("--config", help=f"YAML config (default: {DEFAULT_CONFIG_PATH} when present)")
    p.add_argument("--address-col", help="column holding the street address")
    p.add_argument("--city-col", help="column holding the city")
    p.add_argument("--country-col", help="column holding the country")
    p.add_argument("--api-key", help="Google Maps API key (default: from environment)")
    p.add_argument("--delay", type=float, help="seconds to wait after each geocoding call")
    p.add_argument("--error-limit", type=int, help="number of errors listed after the run")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header & first rows then exit")
    return p.parse_args(argv)


def _build_config(args: argparse.Namespace) -> GeocodeConfig:
    if args.config:
        cfg = load_config(Path(args.config))
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = default_config()

    cfg = cfg.with_columns(
        address=args.address_col,
        city=args.city_col,
        country=args.country_col,
    )
    if args.delay is not None:
        cfg = replace(cfg, delay_seconds=max(0.0, args.delay))
    if args.output:
        cfg = replace(cfg, output_path=args.output)
    if args.error_limit is not None:
        cfg = replace(cfg, error_preview_limit=max(0, args.error_limit))
    return cfg


def _run(processor: RowProcessor, table: TableData, cfg: GeocodeConfig, credential: str) -> ProcessingResult:
    with RowProgressTracker(len(table.rows)) as progress, GeocodeWorker(processor) as worker:
        future = worker.start(table.rows, cfg.columns, credential, on_progress=progress)
        try:
            return future.result()
        except KeyboardInterrupt:
            # keep whatever finished before the interrupt
            worker.cancel()
            return future.result()


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))

    try:
        cfg = _build_config(args)
        table = read_table(Path(args.input))
    except ConfigurationError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    except ParseError as e:
        logger.error(f"parse: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        for line in inspect_table(table):
            print(line)
        return EXIT_SUCCESS_ALL

    try:
        cfg.columns.validate(table.columns)
        credential = resolve_credential(args.api_key, cfg.api_key_env)
    except ConfigurationError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Geocoding {len(table.rows)} rows from: {table.source}")

    error_log = ErrorLogBuffer()
    client = GoogleGeocodingClient(base_url=cfg.base_url, timeout=cfg.request_timeout)
    processor = RowProcessor(
        client,
        delay_seconds=cfg.delay_seconds,
        error_log=error_log,
        source_name=table.source,
    )
    try:
        result = _run(processor, table, cfg, credential)
    except ConfigurationError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    finally:
        client.close()

    out_path = write_table(Path(cfg.output_path), result.rows, table.columns)
    logger.info(f"wrote {out_path}")

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log: {log_path}")

    tally = result.tally
    logger.info(render_completion_message(tally))
    for line in render_error_preview(tally, cfg.error_preview_limit):
        logger.warning(line)

    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if not tally.is_complete:
        return EXIT_CANCELLED
    if tally.skipped_rows > 0:
        return EXIT_PARTIAL
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
