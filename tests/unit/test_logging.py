import json
import logging
from pathlib import Path

import pytest

from jujushell.config.loader import parse_raw
from jujushell.core.logging import ECSJsonFormatter, configure_logging, get_logger


def _records(log_file: Path) -> list[dict]:
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]


def test_ecs_log_output_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "jujushell.log"
    configure_logging("info", sink="file", file_path=str(log_file), service_name="jujushell-test", force=True)
    get_logger("jujushell.test.logging").info(
        "captured config event",
        extra={"event_action": "config_decode", "resource": "/etc/jujushell.yml", "payload": {"profile": "minimal"}},
    )

    record = _records(log_file)[-1]
    assert record["@timestamp"]
    assert record["message"] == "captured config event"
    assert record["log"] == {"level": "info", "logger": "jujushell.test.logging"}
    assert record["service"]["name"] == "jujushell-test"
    assert record["event"]["action"] == "config_decode"
    assert record["event"]["category"] == "configuration"
    assert record["jujushell"]["resource"] == "/etc/jujushell.yml"
    assert record["jujushell"]["payload"] == {"profile": "minimal"}


def test_formatter_strips_empty_fields() -> None:
    record = logging.LogRecord("jujushell.x", logging.WARNING, __file__, 1, "plain", None, None)
    payload = json.loads(ECSJsonFormatter().format(record))
    assert "jujushell" not in payload
    assert payload["event"] == {"kind": "event", "category": "configuration"}
    assert payload["service"]["name"] == "jujushell"


def test_configure_logging_level_comes_from_config_value(tmp_path: Path) -> None:
    log_file = tmp_path / "levels.log"
    config = parse_raw("log-level: warn\n")
    root = configure_logging(config.log_level, sink="file", file_path=str(log_file), force=True)
    assert root.level == logging.WARNING
    logger = get_logger("config")
    logger.info("hidden")
    logger.warning("shown")
    messages = [record["message"] for record in _records(log_file)]
    assert messages == ["shown"]


def test_configure_logging_is_idempotent_without_force(tmp_path: Path) -> None:
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"
    root = configure_logging("debug", sink="file", file_path=str(first), force=True)
    configure_logging("error", sink="file", file_path=str(second))
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert not second.exists()


def test_configure_logging_rejects_invalid_values() -> None:
    with pytest.raises(ValueError, match="invalid log level 'chatty'"):
        configure_logging("chatty", force=True)
    with pytest.raises(ValueError, match="invalid log sink 'syslog'"):
        configure_logging("info", sink="syslog", force=True)


def test_get_logger_namespaces_under_jujushell() -> None:
    assert get_logger("server").name == "jujushell.server"
    assert get_logger("jujushell.config").name == "jujushell.config"
    assert get_logger("jujushell").name == "jujushell"
