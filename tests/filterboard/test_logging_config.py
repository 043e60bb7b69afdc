from __future__ import annotations

import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from filterboard.core.exceptions import ConfigError
from filterboard.logging_config import configure_logging, resolve_log_format, resolve_log_level


def test_plain_format_replaces_existing_handlers():
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        root.addHandler(logging.NullHandler())
        configure_logging(force_format="plain")

        assert len(root.handlers) == 1
        formatter = root.handlers[0].formatter
        assert not isinstance(formatter, jsonlogger.JsonFormatter)
    finally:
        root.handlers[:] = saved


def test_json_format_from_env(monkeypatch):
    root = logging.getLogger()
    saved = list(root.handlers)
    monkeypatch.setenv("FILTERBOARD_LOG_FORMAT", "json")
    try:
        configure_logging(level=logging.DEBUG)

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    finally:
        root.handlers[:] = saved
        root.setLevel(logging.WARNING)


def test_json_records_carry_extra_fields(capsys):
    root = logging.getLogger()
    saved, saved_level = list(root.handlers), root.level
    try:
        configure_logging(force_format="json")
        logging.getLogger("filterboard.core.filter_engine").info(
            "Filters applied", extra={"changed_column": "Region", "n_rows": 2}
        )

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["message"] == "Filters applied"
        assert record["level"] == "INFO"
        assert record["logger"] == "filterboard.core.filter_engine"
        assert record["changed_column"] == "Region"
        assert record["n_rows"] == 2
    finally:
        root.handlers[:] = saved
        root.setLevel(saved_level)


def test_werkzeug_request_lines_are_quieted():
    root = logging.getLogger()
    saved, saved_level = list(root.handlers), root.level
    werkzeug = logging.getLogger("werkzeug")
    saved_werkzeug = werkzeug.level
    try:
        configure_logging(level=logging.INFO, force_format="plain")

        assert werkzeug.level == logging.WARNING
    finally:
        root.handlers[:] = saved
        root.setLevel(saved_level)
        werkzeug.setLevel(saved_werkzeug)


def test_log_level_from_env(monkeypatch):
    monkeypatch.setenv("FILTERBOARD_LOG_LEVEL", "debug")

    assert resolve_log_level() == logging.DEBUG
    assert resolve_log_level(logging.ERROR) == logging.ERROR


def test_unknown_log_level_or_format_is_config_error(monkeypatch):
    monkeypatch.setenv("FILTERBOARD_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigError):
        resolve_log_level()
    with pytest.raises(ConfigError):
        resolve_log_format("yaml")
