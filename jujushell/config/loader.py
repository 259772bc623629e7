"""Config loading and initialization."""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
import shutil
from typing import Any

import yaml

from jujushell.config.errors import ErrorKind, LoadError, ValidationError
from jujushell.config.schema import (
    KEY_FIELDS,
    ConfigProfile,
    RawConfig,
    ValidatedConfig,
    normalize_log_level,
    validate,
)
from jujushell.core.logging import get_logger


SAMPLE_CONFIG_PATH = Path(__file__).with_name("sample.yml")
_DEFAULTS: dict[str, Any] = {item.metadata["key"]: item.default for item in fields(RawConfig)}

logger = get_logger("jujushell.config")


class _ConfigDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    # PEM blocks stay readable as literal scalars.
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_ConfigDumper.add_representer(str, _represent_str)


def load(resource: str | Path) -> RawConfig:
    """Read ``resource`` fully and decode it into a :class:`RawConfig`."""
    name = str(resource)
    try:
        with Path(resource).open("rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise LoadError(ErrorKind.IO_FAILURE, name, exc) from exc
    return parse_raw(data, resource=name)


def parse_raw(data: bytes | str, resource: str = "<memory>") -> RawConfig:
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise LoadError(ErrorKind.DECODE_FAILURE, resource, exc) from exc
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise LoadError(
            ErrorKind.DECODE_FAILURE,
            resource,
            f"top-level document must be a mapping, got {_type_name(document)}",
        )

    values: dict[str, Any] = {}
    unknown: list[str] = []
    for key, item in document.items():
        name = KEY_FIELDS.get(key) if isinstance(key, str) else None
        if name is None:
            unknown.append(str(key))
            continue
        if item is None:
            continue
        try:
            values[name] = _decode_value(key, item)
        except ValueError as exc:
            raise LoadError(ErrorKind.DECODE_FAILURE, resource, exc) from exc

    if unknown:
        logger.warning(
            "ignoring unknown config keys: %s",
            ", ".join(unknown),
            extra={"event_action": "config_decode", "resource": resource, "payload": {"unknown_keys": unknown}},
        )
    logger.debug(
        "decoded config",
        extra={"event_action": "config_decode", "event_outcome": "success", "resource": resource},
    )
    return RawConfig(**values)


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "mapping"
    if isinstance(value, list):
        return "sequence"
    return type(value).__name__


def _decode_value(key: str, value: Any) -> Any:
    default = _DEFAULTS[key]
    if key == "log-level":
        if not isinstance(value, str):
            raise ValueError(f"'{key}' must be a string, got {_type_name(value)}")
        return normalize_log_level(value)
    if isinstance(default, str):
        if not isinstance(value, str):
            raise ValueError(f"'{key}' must be a string, got {_type_name(value)}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"'{key}' must be an integer, got {_type_name(value)}")
        return value
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {_type_name(value)}")
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ValueError(f"'{key}[{index}]' must be a string, got {_type_name(item)}")
    return tuple(value)


def read(resource: str | Path, profile: ConfigProfile = ConfigProfile.EXTENDED) -> ValidatedConfig:
    """Load and validate the configuration stored at ``resource``."""
    raw = load(resource)
    try:
        config = validate(raw, profile)
    except ValidationError as exc:
        exc.resource = str(resource)
        raise
    logger.debug(
        "validated config",
        extra={
            "event_action": "config_validate",
            "event_outcome": "success",
            "resource": str(resource),
            "payload": {"profile": profile.name.lower()},
        },
    )
    return config


def dump_config(config: RawConfig | ValidatedConfig) -> str:
    return yaml.dump(
        config.as_dict(),
        Dumper=_ConfigDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def initialize_config(path: Path, force: bool = False) -> Path:
    if path.exists() and not force:
        raise FileExistsError(f"config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(SAMPLE_CONFIG_PATH, path)
    return path
