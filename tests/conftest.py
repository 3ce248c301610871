"""
tests/conftest.py -- Shared fixtures for swagger-injector tests.

This module provides:
  - schema / schema_file: a small swagger document, inline and on disk
  - dist_dir: a temporary dist directory with a couple of UI files
  - settings: Settings with a fixed SECRET_KEY so session tokens are stable
  - make_client: builds a FastAPI app with the gateway installed and
    returns a TestClient for it

The DEBUG env var must be set before any core import so get_settings() can
auto-generate SECRET_KEY in dev mode instead of raising ValueError.
"""

from __future__ import annotations

import copy
import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

# CRITICAL: Set DEBUG before any core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.config import Settings
from frameworks.fastapi_framework import FastAPIFramework

TEST_SECRET = "test-secret-key-for-session-signing-0123456789"

SCHEMA: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Pet Store", "version": "1.0.0"},
    "basePath": "/api",
    "paths": {
        "/pets": {"get": {"summary": "List pets", "responses": {"200": {"description": "OK"}}}},
    },
}


@pytest.fixture
def schema() -> dict[str, Any]:
    return copy.deepcopy(SCHEMA)


@pytest.fixture
def schema_file(tmp_path: Path, schema: dict[str, Any]) -> Path:
    path = tmp_path / "swagger.json"
    path.write_text(json.dumps(schema), encoding="utf-8")
    return path


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    """Dist directory with a UI bundle, the Swagger UI stylesheet and a nested file."""
    dist = tmp_path / "dist"
    (dist / "fonts").mkdir(parents=True)
    (dist / "bundle.js").write_text("console.log('swagger ui');", encoding="utf-8")
    (dist / "swagger-ui.css").write_text(".swagger-ui { color: black; }", encoding="utf-8")
    (dist / "fonts" / "inter.txt").write_text("font", encoding="utf-8")
    return dist


@pytest.fixture
def settings() -> Settings:
    return Settings(debug=True, secret_key=TEST_SECRET)


@pytest.fixture
def make_client(settings: Settings) -> Callable[..., tuple[TestClient, FastAPIFramework]]:
    """Return a factory: options -> (TestClient, gateway).

    The app has one route of its own, GET /other, to observe passthrough.
    follow_redirects=False so tests can assert on redirect responses from
    custom unauthorized handlers.
    """

    def _make(options: Any) -> tuple[TestClient, FastAPIFramework]:
        app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

        @app.get("/other")
        async def other():
            return {"ok": True}

        docs = FastAPIFramework(options, settings=settings)
        docs.install(app)
        return TestClient(app, follow_redirects=False), docs

    return _make
