from __future__ import annotations

import json
import logging
import logging.config

from javelin.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_PARAMS = 2


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_promotes_standard_extra_fields() -> None:
    payload = json.loads(_json_formatter(_record(params=EXPECTED_PARAMS, table="people")))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["params"] == EXPECTED_PARAMS
    assert payload["table"] == "people"
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    payload = json.loads(_json_formatter(_record(extra={"table": "people"})))

    assert payload["table"] == "people"
    assert "extra" not in payload


def test_json_formatter_serializes_unknown_types() -> None:
    payload = json.loads(JsonFormatter().format(_record(value=object())))
    assert payload["value"].startswith("<object object")


def test_configure_logging_builds_dict_config(monkeypatch) -> None:
    captured = {}
    monkeypatch.setattr(logging.config, "dictConfig", lambda cfg: captured.update(cfg))

    configure_logging(level="DEBUG", json_logs=True)

    assert captured["root"]["level"] == "DEBUG"
    assert captured["handlers"]["default"]["formatter"] == "json"
    assert captured["formatters"]["json"]["()"] is JsonFormatter
    assert captured["disable_existing_loggers"] is False


def test_configure_logging_defaults_to_console_format(monkeypatch) -> None:
    captured = {}
    monkeypatch.setattr(logging.config, "dictConfig", lambda cfg: captured.update(cfg))

    configure_logging()

    assert captured["handlers"]["default"]["formatter"] == "console"
    assert captured["root"]["level"] == "INFO"


def test_configure_logging_without_force_keeps_existing_handlers(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(logging.config, "dictConfig", calls.append)
    root = logging.getLogger()
    sentinel = logging.NullHandler()
    root.addHandler(sentinel)
    try:
        configure_logging(level="DEBUG", force=False)
    finally:
        root.removeHandler(sentinel)

    assert calls == []
