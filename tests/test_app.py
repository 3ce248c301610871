"""
tests/test_app.py -- Integration tests for the standalone documentation server.

Covers:
  - GET /health reports status, version and the documentation route
  - Documentation and schema served through create_app()
  - Uniform error envelope for unknown routes
  - Startup fails on a missing schema (ConfigurationError)
  - main.py CLI: settings overlay, exit code on bad schema, uvicorn launch
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import main
from api.main import create_app
from core.errors import ConfigurationError


@pytest.fixture
def app_settings(settings, schema_file):
    return settings.model_copy(update={"schema_path": str(schema_file), "auth_key": "token", "auth_value": "secret"})


@pytest.fixture
def app_client(app_settings):
    with TestClient(create_app(app_settings), follow_redirects=False) as client:
        yield client


class TestStandaloneServer:
    def test_health(self, app_client):
        resp = app_client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["documentation"] == "/swagger"
        assert "version" in data

    def test_docs_gated_by_settings(self, app_client, schema):
        assert app_client.get("/swagger.json").status_code == 401
        assert app_client.get("/swagger.json", params={"token": "secret"}).json() == schema

    def test_malformed_multipart_is_unauthorized_not_server_error(self, app_client):
        resp = app_client.post("/swagger", content=b"garbage", headers={"content-type": "multipart/form-data"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "unauthorized"

    def test_unknown_route_uses_error_envelope(self, app_client):
        resp = app_client.get("/nope")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "http_404"

    def test_fastapi_builtin_docs_disabled(self, app_client):
        assert app_client.get("/docs").status_code == 404
        assert app_client.get("/openapi.json").status_code == 404

    def test_purge_task_started(self, app_settings):
        app = create_app(app_settings)
        with TestClient(app):
            assert not app.state.purge_task.done()

    def test_missing_schema_fails_at_startup(self, settings, tmp_path):
        bad = settings.model_copy(update={"schema_path": str(tmp_path / "missing.json")})
        with pytest.raises(ConfigurationError):
            create_app(bad)


class TestCli:
    def test_build_settings_overlays_flags(self, schema_file):
        parser_args = [str(schema_file), "--prefix", "/api", "--key", "token", "--source", "header", "--debug"]
        with patch("main.uvicorn.run") as run:
            assert main.main(parser_args) == 0
        app = run.call_args.args[0]
        assert app.state.docs.route == "/api/swagger"
        assert app.state.docs.config.authentication.key == "token"
        assert [s.value for s in app.state.docs.config.authentication.sources] == ["header"]

    def test_host_and_port_passed_to_uvicorn(self, schema_file):
        with patch("main.uvicorn.run") as run:
            main.main([str(schema_file), "--debug", "--host", "0.0.0.0", "--port", "9001"])
        assert run.call_args.kwargs == {"host": "0.0.0.0", "port": 9001}

    def test_missing_schema_exit_code(self, tmp_path, capsys):
        with patch("main.uvicorn.run") as run:
            assert main.main([str(tmp_path / "missing.json"), "--debug"]) == 1
        run.assert_not_called()
        assert "Could not read swagger file" in capsys.readouterr().err
