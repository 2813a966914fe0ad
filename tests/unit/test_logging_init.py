from __future__ import annotations

import logging
from io import StringIO

from csv_geocoder.logging.init import (
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "csv_geocoder"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert isinstance(handler.formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1


def test_setup_logging_debug_lowers_level():
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)


def test_logging_labeled_prefixes():
    captured = StringIO()
    logger = logging.getLogger("test_csv_geocoder_labels")
    logger.setLevel(logging.INFO)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_child_module_loggers_reach_app_handler(capsys):
    setup_logging()
    logging.getLogger("csv_geocoder.services.processor").warning("row 3: failed")
    assert "WARN row 3: failed" in capsys.readouterr().out


def test_log_summary_uses_summary_label(capsys):
    log_summary("rows=1 processed=1")
    assert "SUMMARY rows=1 processed=1" in capsys.readouterr().out


def test_get_logger_returns_configured_logger():
    reset_logging()
    logger = get_logger()
    assert logger is get_logger()
