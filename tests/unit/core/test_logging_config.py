"""Unit tests for structured logging configuration."""

from __future__ import annotations

import json

from core.logging_config import configure_logging, get_logger


def test_configure_logging_filters_below_level(capsys) -> None:
    """Events under the configured level should not be written."""
    configure_logging("ERROR")
    logger = get_logger("tests.logging")

    logger.info("quiet_event")
    logger.error("loud_event", path="a.h5")
    lines = capsys.readouterr().err.strip().splitlines()

    events = [json.loads(line) for line in lines]
    assert [event["event"] for event in events] == ["loud_event"]
    assert events[0]["level"] == "error" and events[0]["path"] == "a.h5"


def test_configure_logging_emits_info_by_default(capsys) -> None:
    """The default level should let info events through."""
    configure_logging()

    get_logger("tests.logging").info("visible_event")

    assert "visible_event" in capsys.readouterr().err
