"""Tests for configuration loading and logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from config import Config
from errors import ConfigurationError
from observability.logging import (
    ContextFilter,
    JsonFormatter,
    LOG_FILENAME,
    clear_context,
    set_run_context,
    setup_logging,
)


# === Config ===


def test_load_reads_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g")
    monkeypatch.setenv("SERPER_API_KEY", "s")
    monkeypatch.setenv("TREND_COUNT", "4")
    monkeypatch.setenv("VERIFY_LINKS", "yes")
    monkeypatch.setenv("VERIFY_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = Config.load()

    assert config.gemini_api_key == "g"
    assert config.trend_count == 4
    assert config.verify_links is True
    assert config.verify_timeout == 2.5
    assert config.log_level == "DEBUG"
    assert config.validate() is None


def test_defaults(monkeypatch):
    for key in ("SEARCH_REGION", "CACHE_TTL_SECONDS", "GEMINI_MODEL", "AFFILIATE_TAG"):
        monkeypatch.delenv(key, raising=False)
    config = Config.load()
    assert config.search_region == "in"
    assert config.cache_ttl_seconds == 600
    assert config.gemini_model == "gemini-2.0-flash"
    assert config.affiliate_tag == ""


def test_invalid_integer_is_rejected(monkeypatch):
    monkeypatch.setenv("TREND_COUNT", "many")
    with pytest.raises(ValueError, match="TREND_COUNT"):
        Config.load()


@pytest.mark.parametrize("overrides,message", [
    ({"gemini_api_key": ""}, "GEMINI_API_KEY"),
    ({"serper_api_key": ""}, "SERPER_API_KEY"),
    ({"trend_count": 0}, "TREND_COUNT"),
    ({"verify_timeout": 0}, "VERIFY_TIMEOUT"),
    ({"log_format": "xml"}, "LOG_FORMAT"),
])
def test_validate(overrides, message):
    config = Config(gemini_api_key="g", serper_api_key="s")
    for key, value in overrides.items():
        setattr(config, key, value)
    assert message in config.validate()
    with pytest.raises(ConfigurationError, match=message):
        config.require()


# === Logging ===


def _record(msg: str = "hello %s", args=("world",), level=logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("ecoscout.test", level, __file__, 10, msg, args, None)


def test_context_filter_injects_run_id():
    record = _record()
    set_run_context("abc123")
    try:
        ContextFilter().filter(record)
    finally:
        clear_context()
    assert record.run_id == "abc123"

    record = _record()
    ContextFilter().filter(record)
    assert record.run_id == "-"


def test_json_formatter_includes_extra_fields():
    record = _record(level=logging.WARNING)
    record.run_id = "r1"
    record.keyword = "bamboo"
    record.unserializable = object()

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "hello world"
    assert data["level"] == "WARNING"
    assert data["run_id"] == "r1"
    assert data["keyword"] == "bamboo"
    assert isinstance(data["unserializable"], str)
    assert data["source"]["line"] == 10


def test_setup_logging_writes_to_log_dir(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    config = Config(log_dir=tmp_path / "log", log_format="json")
    try:
        assert setup_logging(config) is True
        logging.getLogger("ecoscout.test").info("written")
        for handler in root.handlers:
            handler.flush()
        line = (tmp_path / "log" / LOG_FILENAME).read_text(encoding="utf-8").strip()
        assert json.loads(line)["message"] == "written"
    finally:
        for handler in root.handlers[:]:
            handler.close()
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
