from typing import Any

import pytest

from jujushell.config.schema import ConfigProfile, RawConfig, validate
from jujushell.server import ServerParams, create_app


def _config():
    return validate(
        RawConfig(
            image_name="ubuntu",
            juju_addrs=("10.0.0.1:17070", "10.0.0.2:17070"),
            juju_cert="-----BEGIN...",
            port=17070,
            tls_key="secret",
        ),
        ConfigProfile.MINIMAL,
    )


def test_server_params_carry_only_route_registration_fields() -> None:
    params = ServerParams.from_config(_config())
    assert params == ServerParams(
        image_name="ubuntu",
        juju_addrs=("10.0.0.1:17070", "10.0.0.2:17070"),
        juju_cert="-----BEGIN...",
    )
    assert not hasattr(params, "tls_key")


def test_create_app_requires_fastapi_if_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("jujushell.server.FastAPI", None)
    with pytest.raises(RuntimeError, match="FastAPI is not installed"):
        create_app(ServerParams.from_config(_config()), lambda app, params: None)


def test_create_app_invokes_register_with_params() -> None:
    pytest.importorskip("fastapi")
    testclient = pytest.importorskip("fastapi.testclient")
    seen: list[ServerParams] = []

    def register(app: Any, params: ServerParams) -> None:
        seen.append(params)

        @app.get("/status")
        def status() -> dict[str, Any]:
            return {"image": params.image_name, "controllers": list(params.juju_addrs)}

    params = ServerParams.from_config(_config())
    app = create_app(params, register)
    assert seen == [params]

    client = testclient.TestClient(app)
    response = client.get("/status")
    assert response.status_code == 200
    assert response.json() == {"image": "ubuntu", "controllers": ["10.0.0.1:17070", "10.0.0.2:17070"]}


def test_create_app_propagates_register_errors() -> None:
    pytest.importorskip("fastapi")

    def register(app: Any, params: ServerParams) -> None:
        raise ValueError("cannot parse controller certificate")

    with pytest.raises(ValueError, match="cannot parse controller certificate"):
        create_app(ServerParams.from_config(_config()), register)
