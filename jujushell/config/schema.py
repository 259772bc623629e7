"""Dataclasses and validation rules for the jujushell server config."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import timedelta
from enum import Enum
from typing import Any

from jujushell.config.errors import (
    ConflictingTLSConfigError,
    MissingFieldsError,
    NegativeTimeoutError,
    PortMismatchForDNSError,
)


DNS_TLS_PORT = 443
DEFAULT_LOG_LEVEL = "INFO"
# zap level names are accepted alongside the logging module's own.
LOG_LEVEL_ALIASES = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARN": "WARNING",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL",
    "DPANIC": "CRITICAL",
    "PANIC": "CRITICAL",
    "FATAL": "CRITICAL",
}


def _key(name: str, default: Any) -> Any:
    return field(default=default, metadata={"key": name})


@dataclass(frozen=True, slots=True)
class _ConfigFields:
    # LXD image used to create containers.
    image_name: str = _key("image-name", "")
    # Addresses of the current Juju controller.
    juju_addrs: tuple[str, ...] = _key("juju-addrs", ())
    # Controller CA certificate in PEM format.
    juju_cert: str = _key("juju-cert", "")
    log_level: str = _key("log-level", DEFAULT_LOG_LEVEL)
    port: int = _key("port", 0)
    tls_cert: str = _key("tls-cert", "")
    tls_key: str = _key("tls-key", "")
    allowed_users: tuple[str, ...] = _key("allowed-users", ())
    # Set to request certificates automatically for this host name.
    dns_name: str = _key("dns-name", "")
    # LXD profiles applied to every container.
    profiles: tuple[str, ...] = _key("profiles", ())
    lxd_socket_path: str = _key("lxd-socket-path", "")
    # Minutes of inactivity before a session is torn down; 0 never expires.
    session_timeout: int = _key("session-timeout", 0)
    welcome_message: str = _key("welcome-message", "")

    def __post_init__(self) -> None:
        for name in ("juju_addrs", "allowed_users", "profiles"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))
        object.__setattr__(self, "log_level", normalize_log_level(self.log_level))

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.metadata["key"]] = list(value) if isinstance(value, tuple) else value
        return payload


@dataclass(frozen=True, slots=True)
class RawConfig(_ConfigFields):
    """Decoded but unvalidated configuration."""


@dataclass(frozen=True, slots=True)
class ValidatedConfig(_ConfigFields):
    """Configuration that satisfied every rule of its profile.

    Only :func:`validate` should build one. Instances are read-only for the
    lifetime of the process; a configuration change means loading a new one.
    """

    @property
    def session_expiry(self) -> timedelta | None:
        if self.session_timeout == 0:
            return None
        return timedelta(minutes=self.session_timeout)

    @property
    def uses_dns_tls(self) -> bool:
        return bool(self.dns_name)

    @property
    def uses_manual_tls(self) -> bool:
        return bool(self.tls_cert) and bool(self.tls_key)


FIELD_KEYS: dict[str, str] = {item.name: item.metadata["key"] for item in fields(_ConfigFields)}
KEY_FIELDS: dict[str, str] = {key: name for name, key in FIELD_KEYS.items()}
FIELD_ORDER: tuple[str, ...] = tuple(FIELD_KEYS.values())


class ConfigProfile(Enum):
    """Required-field sets for the service modes sharing one schema."""

    MINIMAL = ("image-name", "juju-addrs", "juju-cert", "port")
    EXTENDED = ("image-name", "juju-addrs", "port", "profiles", "lxd-socket-path")

    @property
    def required(self) -> tuple[str, ...]:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> ConfigProfile:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(sorted(member.name.lower() for member in cls))
            raise ValueError(f"invalid config profile '{name}' (expected one of: {valid})") from None


def normalize_log_level(value: str) -> str:
    # An empty level is the zero value, as with every other field.
    if not value.strip():
        return DEFAULT_LOG_LEVEL
    level = LOG_LEVEL_ALIASES.get(value.strip().upper())
    if level is None:
        raise ValueError(f"invalid log level '{value}'")
    return level


def _is_missing(key: str, value: Any) -> bool:
    if key == "port":
        return value <= 0
    return not value


def missing_fields(raw: RawConfig, profile: ConfigProfile = ConfigProfile.EXTENDED) -> list[str]:
    required = set(profile.required)
    return [
        key
        for key in FIELD_ORDER
        if key in required and _is_missing(key, getattr(raw, KEY_FIELDS[key]))
    ]


def validate(raw: RawConfig, profile: ConfigProfile = ConfigProfile.EXTENDED) -> ValidatedConfig:
    missing = missing_fields(raw, profile)
    if missing:
        raise MissingFieldsError(missing)

    if raw.dns_name:
        if raw.tls_cert or raw.tls_key:
            raise ConflictingTLSConfigError(
                raw.dns_name,
                tls_cert_set=bool(raw.tls_cert),
                tls_key_set=bool(raw.tls_key),
            )
        if raw.port != DNS_TLS_PORT:
            raise PortMismatchForDNSError(raw.dns_name, raw.port)
    if raw.session_timeout < 0:
        raise NegativeTimeoutError(raw.session_timeout)

    return ValidatedConfig(**{name: getattr(raw, name) for name in FIELD_KEYS})
