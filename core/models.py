"""
core/models.py -- Domain records for the documentation gateway.

Pattern: Data class (pure data container, zero logic beyond derived
properties). The resolver in core/config.py builds these once per gateway
instance; nothing mutates them afterwards, so they are frozen.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Reserved names inside the documentation namespace.
SCHEMA_FILENAME = "/swagger.json"
CUSTOM_CSS_FILENAME = "/_custom_.css"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CredentialSource(str, Enum):
    """Places in a request that may carry the configured auth key/value."""

    query = "query"
    body = "body"
    header = "header"
    cookie = "cookie"


class PathCategory(Enum):
    """What a request path means to the gateway. See core/paths.py."""

    SCHEMA_SOURCE = "schema_source"
    DOCUMENTATION_PAGE = "documentation_page"
    CUSTOM_STYLESHEET = "custom_stylesheet"
    ASSET_PATH = "asset_path"
    DIST_FILE = "dist_file"
    UNMATCHED = "unmatched"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthConfig:
    sources: tuple[CredentialSource, ...] = (CredentialSource.query, CredentialSource.body)
    key: Optional[str] = None
    value: Optional[str] = None

    @property
    def enabled(self) -> bool:
        """False when no source is accepted or neither key nor value is set."""
        return bool(self.sources) and bool(self.key or self.value)


@dataclass(frozen=True)
class SessionDescriptor:
    """Name and value a browser session carries once it has been authorized.

    value is None when no auth key is configured; there is then nothing to
    remember and adapters skip session creation.
    """

    name: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Configuration:
    """Resolved gateway configuration.

    asset_prefix and documentation_route are derived from route_prefix by
    the resolver after merging, never supplied directly.
    """

    schema: dict[str, Any]
    dist_directory: str
    route_prefix: str = ""
    assets: str = "/_swagger_"
    route: str = "/swagger"
    asset_prefix: str = "/_swagger_"
    documentation_route: str = "/swagger"
    schema_location: Optional[str] = None
    stylesheet: Optional[str] = None
    unauthorized_handler: Optional[Callable[..., Any]] = field(default=None, compare=False)
    authentication: AuthConfig = field(default_factory=AuthConfig)
    cache_ttl: Optional[int] = None
    debug: bool = False

    @property
    def schema_route(self) -> str:
        return f"{self.route_prefix}{SCHEMA_FILENAME}"

    @property
    def custom_css_route(self) -> str:
        return f"{self.asset_prefix}{CUSTOM_CSS_FILENAME}"
