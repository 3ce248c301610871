"""
core/config.py -- Gateway option resolution and process settings.

Two layers of configuration live here:

  resolve_config(): Turns the options a host application passes to a
      framework adapter (a schema path, or a dict of options) into an
      immutable Configuration. Defaults come from get_defaults(), which
      builds a fresh record on every call so no caller can mutate shared
      state.

  Settings (pydantic-settings): Process-level values read from environment
      variables and an optional .env file. The adapter uses them for session
      cookie signing; the standalone server (api/main.py, main.py) builds its
      gateway options from them.

Merge policy: an option the caller supplied wins whenever its value is not
None, even if it is falsy. Passing prefix="" or debug=False is an explicit
choice and is kept; leaving the option out (or passing None) takes the
default.

Layer rule: core/ is the kernel. This module may not import from api/,
frameworks/ or cache/.
"""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError
from core.models import AuthConfig, Configuration, CredentialSource
from core.schema import load_schema

logger = logging.getLogger("swaggerinjector.config")

_DEFAULT_DIST = Path(__file__).resolve().parent.parent / "dist"

_RECOGNIZED = (
    "path",
    "swagger",
    "prefix",
    "assets",
    "route",
    "css",
    "unauthorized",
    "dist",
    "authentication",
    "cache_ttl",
    "debug",
)
_AUTH_FIELDS = ("sources", "key", "value")


# ---------------------------------------------------------------------------
# Gateway options
# ---------------------------------------------------------------------------


def get_defaults() -> dict[str, Any]:
    """Return a new default option record."""
    return {
        "path": "./swagger.json",  # swagger file
        "swagger": None,  # pre-loaded swagger document
        "prefix": "",  # applied to every documentation route
        "assets": "/_swagger_",  # appended to prefix
        "route": "/swagger",  # documentation page, appended to prefix
        "css": None,  # stylesheet path OR literal css
        "unauthorized": None,  # unauthorized handler
        "dist": str(_DEFAULT_DIST),
        "authentication": {
            "sources": ["query", "body"],
            "key": None,
            "value": None,
        },
        "cache_ttl": None,
        "debug": False,
    }


def _merge(defaults: dict[str, Any], overrides: Mapping[str, Any], names: tuple[str, ...]) -> dict[str, Any]:
    result = {}
    for name in names:
        value = overrides.get(name)
        result[name] = defaults[name] if value is None else value
    return result


def _coerce_sources(sources: Any) -> tuple[CredentialSource, ...]:
    if isinstance(sources, (str, CredentialSource)):
        sources = [sources]
    coerced = []
    for source in sources:
        try:
            coerced.append(CredentialSource(source))
        except ValueError as exc:
            valid = ", ".join(s.value for s in CredentialSource)
            raise ConfigurationError(f"Unknown authentication source {source!r}. Expected one of: {valid}") from exc
    return tuple(coerced)


def _resolve_auth(defaults: dict[str, Any], overrides: Any) -> AuthConfig:
    if overrides is None:
        overrides = {}
    if isinstance(overrides, AuthConfig):
        return overrides
    if not isinstance(overrides, Mapping):
        raise ConfigurationError("authentication must be a mapping of sources/key/value")
    merged = _merge(defaults, overrides, _AUTH_FIELDS)
    return AuthConfig(
        sources=_coerce_sources(merged["sources"]),
        key=merged["key"] or None,
        value=merged["value"] or None,
    )


def resolve_config(user_config: Any = None) -> Configuration:
    """Merge user options over the defaults and load the schema.

    Accepts a schema path (str or os.PathLike) as shorthand for
    {"path": value}, a mapping of options, or None.

    Raises ConfigurationError when no schema is provided, when the schema
    cannot be loaded, or when an option has an unusable value.
    """
    if user_config is None:
        user_config = {}
    elif isinstance(user_config, (str, os.PathLike)):
        user_config = {"path": os.fspath(user_config)}
    elif not isinstance(user_config, Mapping):
        raise ConfigurationError(f"Unsupported configuration of type {type(user_config).__name__}")

    if not (user_config.get("path") or user_config.get("swagger")):
        raise ConfigurationError("No swagger provided to the constructor")

    unknown = sorted(set(user_config) - set(_RECOGNIZED))
    if unknown:
        logger.warning("Ignoring unrecognized swagger-injector option(s): %s", ", ".join(unknown))

    defaults = get_defaults()
    merged = _merge(defaults, user_config, _RECOGNIZED)

    unauthorized = merged["unauthorized"]
    if unauthorized is not None and not callable(unauthorized):
        raise ConfigurationError("unauthorized must be a callable handler")

    prefix = merged["prefix"] or ""
    authentication = _resolve_auth(defaults["authentication"], user_config.get("authentication"))

    # Inline documents skip the filesystem; the path default only applies
    # when the caller supplied no document at all.
    location = None if merged["swagger"] else os.fspath(merged["path"])
    schema = load_schema(merged["swagger"], location)

    return Configuration(
        schema=schema,
        schema_location=str(Path(location).resolve()) if location else None,
        route_prefix=prefix,
        assets=merged["assets"],
        route=merged["route"],
        asset_prefix=f"{prefix}{merged['assets']}",
        documentation_route=f"{prefix}{merged['route']}",
        stylesheet=merged["css"] or None,
        unauthorized_handler=unauthorized,
        dist_directory=os.path.abspath(os.fspath(merged["dist"])),
        authentication=authentication,
        cache_ttl=merged["cache_ttl"],
        debug=bool(merged["debug"]),
    )


# ---------------------------------------------------------------------------
# Process settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Process settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. Field names map to upper-case
    environment variables (secret_key -> SECRET_KEY).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The validator
    # either generates a dev key or raises, so callers never see "".
    secret_key: str = ""

    # ------------------------------------------------------------------
    # Session cookie
    # ------------------------------------------------------------------

    secure_cookies: bool = False
    session_max_age: int = 8 * 60 * 60

    # ------------------------------------------------------------------
    # Standalone documentation server
    # ------------------------------------------------------------------

    schema_path: str = "./swagger.json"
    docs_prefix: str = ""
    auth_sources: list[str] = ["query", "body"]
    auth_key: str = ""
    auth_value: str = ""
    css: str = ""
    dist: str = ""
    cache_ttl: int = 60 * 60
    cache_purge_interval: int = 6 * 60 * 60
    host: str = "127.0.0.1"
    port: int = 8000

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Documentation sessions will not survive a restart.

        Production mode: refuse to start without SECRET_KEY.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning(
                    "WARNING: Using auto-generated SECRET_KEY. " "Documentation sessions will not persist across restarts."
                )
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self

    def gateway_options(self) -> dict[str, Any]:
        """Translate settings into resolve_config() options."""
        options: dict[str, Any] = {
            "path": self.schema_path,
            "prefix": self.docs_prefix,
            "cache_ttl": self.cache_ttl,
            "debug": self.debug,
            "authentication": {
                "sources": self.auth_sources,
                "key": self.auth_key or None,
                "value": self.auth_value or None,
            },
        }
        if self.css:
            options["css"] = self.css
        if self.dist:
            options["dist"] = self.dist
        return options


@lru_cache
def get_settings() -> Settings:
    """Return the process Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
