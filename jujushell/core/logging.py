"""Structured ECS JSON logging."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from pathlib import Path

from jujushell.config.schema import normalize_log_level


ROOT_LOGGER = "jujushell"
VALID_LOG_SINKS = {"stdout", "file"}


def _strip_empty(value: object) -> object | None:
    if isinstance(value, dict):
        cleaned = {key: _strip_empty(item) for key, item in value.items()}
        return {key: item for key, item in cleaned.items() if item is not None} or None
    if isinstance(value, list):
        cleaned_list = [_strip_empty(item) for item in value]
        return [item for item in cleaned_list if item is not None] or None
    if value in ("", None):
        return None
    return value


class ECSJsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = "jujushell") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds")
        payload: dict[str, object] = {
            "@timestamp": timestamp,
            "message": record.getMessage(),
            "log": {
                "level": record.levelname.lower(),
                "logger": record.name,
            },
            "service": {
                "name": getattr(record, "service_name", self.service_name),
            },
            "event": {
                "kind": "event",
                "category": getattr(record, "event_category", "configuration"),
                "action": getattr(record, "event_action", None),
                "outcome": getattr(record, "event_outcome", None),
            },
            "jujushell": {
                "resource": getattr(record, "resource", None),
                "payload": getattr(record, "payload", None),
            },
        }
        if record.exc_info:
            payload["error"] = {"stack_trace": self.formatException(record.exc_info)}
        cleaned = _strip_empty(payload) or {}
        return json.dumps(cleaned, separators=(",", ":"))


def _sink_handler(sink: str, file_path: str | None, formatter: logging.Formatter) -> logging.Handler:
    if sink == "file":
        log_file = Path(file_path or "logs/jujushell.log")
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: str,
    *,
    sink: str = "stdout",
    file_path: str | None = None,
    service_name: str = "jujushell",
    force: bool = False,
) -> logging.Logger:
    """Install the ECS handler on the ``jujushell`` logger.

    The level is passed in by whoever bootstraps the process, usually
    ``config.log_level``; nothing downstream reads it back from the config.
    """
    normalized = normalize_log_level(level)
    if sink not in VALID_LOG_SINKS:
        raise ValueError(f"invalid log sink '{sink}'")

    root = logging.getLogger(ROOT_LOGGER)
    if getattr(root, "_jujushell_configured", False) and not force:
        return root

    formatter = ECSJsonFormatter(service_name=service_name)
    root.setLevel(normalized)
    for existing in list(root.handlers):
        existing.close()
    root.handlers.clear()
    root.addHandler(_sink_handler(sink, file_path, formatter))
    root.propagate = False
    setattr(root, "_jujushell_configured", True)
    return root


def get_logger(name: str) -> logging.Logger:
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
