"""Tests for structured JSON logging helpers."""

from __future__ import annotations

import io
import json
import logging

import pytest

from docsite_common.logging import (
    CorrelationContext,
    JsonFormatter,
    get_logger,
    setup_logging,
    with_fields,
)


def _capture(name: str) -> tuple[logging.Logger, io.StringIO]:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    base = logging.getLogger(name)
    base.handlers = [handler]
    base.setLevel(logging.DEBUG)
    base.propagate = False
    return base, stream


def _lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_adapter_adds_operation_and_status() -> None:
    _, stream = _capture("tests.logging.status")
    logger = get_logger("tests.logging.status")

    logger.warning("Category skipped", extra={"category": "学习"})

    (entry,) = _lines(stream)
    assert entry["message"] == "Category skipped"
    assert entry["level"] == "WARNING"
    assert entry["operation"] == "unknown"
    assert entry["status"] == "warning"
    assert entry["category"] == "学习"


def test_with_fields_binds_context() -> None:
    _, stream = _capture("tests.logging.fields")
    logger = get_logger("tests.logging.fields")

    with with_fields(logger, operation="sidebar.build", correlation_id="run-1") as log:
        log.info("Scanning")
        logger.info("Unbound inside")
    logger.info("Unbound outside")

    entry, inside, outside = _lines(stream)
    assert inside["correlation_id"] == "run-1"
    assert inside["operation"] == "unknown"
    assert "correlation_id" not in outside
    assert entry["operation"] == "sidebar.build"
    assert entry["status"] == "success"
    assert entry["correlation_id"] == "run-1"


def test_call_site_fields_win_over_bound_fields() -> None:
    _, stream = _capture("tests.logging.override")
    logger = get_logger("tests.logging.override")

    with with_fields(logger, operation="outer", category="a") as log:
        log.error("Failed", extra={"operation": "inner"})

    (entry,) = _lines(stream)
    assert entry["operation"] == "inner"
    assert entry["category"] == "a"
    assert entry["status"] == "error"


def test_correlation_context_scopes_id() -> None:
    _, stream = _capture("tests.logging.correlation")
    logger = get_logger("tests.logging.correlation")

    with CorrelationContext("build-42"):
        logger.info("inside")
    logger.info("outside")

    inside, outside = _lines(stream)
    assert inside["correlation_id"] == "build-42"
    assert "correlation_id" not in outside


def test_formatter_includes_exception() -> None:
    _, stream = _capture("tests.logging.exception")
    logger = get_logger("tests.logging.exception")

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("Unexpected failure")

    (entry,) = _lines(stream)
    assert "RuntimeError: boom" in str(entry["exc_info"])


@pytest.mark.parametrize("level", ["debug", logging.DEBUG])
def test_setup_logging_configures_root(level: int | str) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    stream = io.StringIO()
    try:
        setup_logging(level, stream=stream)
        get_logger("tests.logging.setup").debug("configured")
        assert root.level == logging.DEBUG
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)

    (entry,) = _lines(stream)
    assert entry["name"] == "tests.logging.setup"
    assert entry["message"] == "configured"
