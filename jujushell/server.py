"""Hand-off between the validated config and the request-handling surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

try:
    from fastapi import FastAPI
except Exception:  # pragma: no cover - optional dependency
    FastAPI = None  # type: ignore[assignment]

from jujushell.config.schema import ValidatedConfig
from jujushell.core.logging import get_logger


logger = get_logger("jujushell.server")


@dataclass(frozen=True, slots=True)
class ServerParams:
    """Parameters needed to register the shell routes."""

    # LXD image used to create containers.
    image_name: str
    # Addresses of the current Juju controller.
    juju_addrs: tuple[str, ...]
    # Controller CA certificate in PEM format.
    juju_cert: str

    @classmethod
    def from_config(cls, config: ValidatedConfig) -> ServerParams:
        return cls(
            image_name=config.image_name,
            juju_addrs=tuple(config.juju_addrs),
            juju_cert=config.juju_cert,
        )


def create_app(params: ServerParams, register: Callable[[Any, ServerParams], None]) -> Any:
    """Build the application and let ``register`` attach the shell routes."""
    if FastAPI is None:
        raise RuntimeError("FastAPI is not installed. Install with: pip install 'jujushell[api]'")
    app = FastAPI(title="jujushell", docs_url=None, redoc_url=None, openapi_url=None)
    register(app, params)
    logger.info(
        "registered shell routes",
        extra={
            "event_action": "server_register",
            "event_outcome": "success",
            "payload": {"image_name": params.image_name, "juju_addrs": list(params.juju_addrs)},
        },
    )
    return app
