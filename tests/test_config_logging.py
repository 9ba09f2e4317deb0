"""Tests for configuration and logging setup."""

from __future__ import annotations

import io
import json
import logging

from finance_tracker import config
from finance_tracker.logging_config import setup_logging


def test_period_options_start_with_all_sentinel() -> None:
    cfg = config.get_config()
    assert cfg["period_options"][0] == config.ALL_PERIODS
    assert cfg["period_options"][1:] == config.MONTH_NAMES
    assert len(config.MONTH_ABBREVIATIONS) == 12


def test_month_lookup_accepts_both_languages() -> None:
    lookup = config.month_lookup()
    assert lookup["março"] == 3
    assert lookup["march"] == 3
    assert lookup["dezembro"] == 12


def test_setup_logging_emits_json(restore_root_logger) -> None:
    stream = io.StringIO()
    setup_logging("DEBUG", stream=stream)

    logging.getLogger("finance_tracker.test").info("Loaded snapshot", extra={"records": 3})

    payload = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert payload["message"] == "Loaded snapshot"
    assert payload["level"] == "INFO"
    assert payload["service"] == "finance-tracker"
    assert payload["records"] == 3
    assert "timestamp" in payload


def test_setup_logging_stamps_static_fields(restore_root_logger) -> None:
    stream = io.StringIO()
    setup_logging("INFO", stream=stream, static_fields={"month": "Março", "search": "ana"})

    logging.getLogger("finance_tracker.scripts.summarize").info("Loaded snapshot", extra={"path": "x.json"})

    payload = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert payload["month"] == "Março"
    assert payload["search"] == "ana"
    assert payload["path"] == "x.json"
    assert payload["logger"] == "finance_tracker.scripts.summarize"
