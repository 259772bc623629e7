"""Error taxonomy for configuration loading and validation."""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class ErrorKind(str, Enum):
    IO_FAILURE = "io_failure"
    DECODE_FAILURE = "decode_failure"
    MISSING_FIELDS = "missing_fields"
    CONFLICTING_TLS_CONFIG = "conflicting_tls_config"
    PORT_MISMATCH_FOR_DNS = "port_mismatch_for_dns"
    NEGATIVE_TIMEOUT = "negative_timeout"


class ConfigError(ValueError):
    """Base class for every error raised while loading a configuration."""

    kind: ErrorKind

    def details(self) -> dict[str, object]:
        return {"kind": self.kind.value, "error": str(self)}


class LoadError(ConfigError):
    """The resource could not be read or decoded."""

    def __init__(self, kind: ErrorKind, resource: str, cause: BaseException | str) -> None:
        if kind not in (ErrorKind.IO_FAILURE, ErrorKind.DECODE_FAILURE):
            raise ValueError(f"invalid load error kind '{kind}'")
        self.kind = kind
        self.resource = resource
        self.cause = cause
        verb = "read" if kind is ErrorKind.IO_FAILURE else "parse"
        super().__init__(f"cannot {verb} {resource!r}: {cause}")

    def details(self) -> dict[str, object]:
        payload = super().details()
        payload["resource"] = self.resource
        return payload


class ValidationError(ConfigError):
    """The decoded configuration violates a schema rule.

    ``resource`` is unset when validating an in-memory value and is filled in
    by :func:`jujushell.config.loader.read` so the message names the file.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.resource: str | None = None

    def __str__(self) -> str:
        if self.resource is None:
            return self.message
        return f"invalid configuration at {self.resource!r}: {self.message}"

    def details(self) -> dict[str, object]:
        payload = super().details()
        if self.resource is not None:
            payload["resource"] = self.resource
        return payload


class MissingFieldsError(ValidationError):
    kind = ErrorKind.MISSING_FIELDS

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"missing fields {', '.join(self.fields)}")

    def details(self) -> dict[str, object]:
        payload = super().details()
        payload["fields"] = list(self.fields)
        return payload


class ConflictingTLSConfigError(ValidationError):
    kind = ErrorKind.CONFLICTING_TLS_CONFIG

    def __init__(self, dns_name: str, *, tls_cert_set: bool, tls_key_set: bool) -> None:
        self.dns_name = dns_name
        self.tls_cert_set = tls_cert_set
        self.tls_key_set = tls_key_set
        supplied = " and ".join(
            name for name, is_set in (("tls-cert", tls_cert_set), ("tls-key", tls_key_set)) if is_set
        )
        super().__init__(
            f"cannot specify {supplied} when dns-name is set to {dns_name!r}: "
            "certificates are issued automatically in that mode"
        )


class PortMismatchForDNSError(ValidationError):
    kind = ErrorKind.PORT_MISMATCH_FOR_DNS

    def __init__(self, dns_name: str, port: int) -> None:
        self.dns_name = dns_name
        self.port = port
        super().__init__(f"port must be 443 when dns-name is set to {dns_name!r}, got {port}")


class NegativeTimeoutError(ValidationError):
    kind = ErrorKind.NEGATIVE_TIMEOUT

    def __init__(self, session_timeout: int) -> None:
        self.session_timeout = session_timeout
        super().__init__(f"session-timeout cannot be negative, got {session_timeout}")
