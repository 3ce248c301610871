"""
frameworks/base.py -- Framework-independent documentation gateway.

BaseFramework owns everything that does not depend on a host framework:
option resolution, schema loading, path classification, credential checks
and the session descriptor. Each host framework gets a subclass that binds
the four adapter capabilities to its own request/response types:

  middleware(request, call_next)  -- entry point installed in the host app
  has_session(request)            -- does the caller already hold a session?
  create_session(response)        -- persist the session on a response
  unauthorized(request)           -- response for a rejected request

The defaults below raise UnimplementedCapabilityError so an incomplete
adapter fails on first use instead of silently serving the docs to anyone.
An unauthorized handler passed in the options replaces the default on the
instance.

Instances are immutable after construction and safe to share between
concurrent requests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from auth.predicate import is_authorized
from auth.session import derive_session
from cache.store import FileCache
from core import paths
from core.config import get_defaults, resolve_config
from core.errors import UnimplementedCapabilityError
from core.models import Configuration, PathCategory


class BaseFramework:
    def __init__(self, config: Any = None) -> None:
        self.config: Configuration = resolve_config(config)
        self.assets = self.config.asset_prefix
        self.route = self.config.documentation_route
        self.session = derive_session(self.config.authentication)
        self.file_cache = FileCache(ttl=self.config.cache_ttl, debug=self.config.debug)
        if self.config.unauthorized_handler is not None:
            self.unauthorized = self.config.unauthorized_handler

    @property
    def swagger(self) -> dict[str, Any]:
        return self.config.schema

    def get_defaults(self) -> dict[str, Any]:
        return get_defaults()

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, path: str) -> PathCategory:
        return paths.classify(self.config, path)

    def is_swagger_source_path(self, path: str) -> bool:
        return paths.is_schema_source_path(self.config, path)

    def is_document_path(self, path: str) -> bool:
        return paths.is_document_path(self.config, path)

    def is_asset_path(self, path: str) -> bool:
        return paths.is_asset_path(self.config, path)

    def is_custom_css_path(self, path: str) -> bool:
        return paths.is_custom_css_path(self.config, path)

    def is_dist_path(self, path: str) -> bool:
        return paths.is_dist_path(self.config, path)

    def build_dist_path(self, path: str) -> str:
        return paths.build_dist_path(self.config, path)

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def is_authorized(self, sources: Mapping[Any, Mapping[str, Any]]) -> bool:
        return is_authorized(self.config.authentication, sources)

    # ------------------------------------------------------------------
    # Adapter capabilities
    # ------------------------------------------------------------------

    def unauthorized(self, request: Any) -> Any:
        raise UnimplementedCapabilityError("unauthorized handler", type(self).__name__)

    def has_session(self, request: Any) -> bool:
        raise UnimplementedCapabilityError("session check", type(self).__name__)

    def create_session(self, response: Any) -> None:
        raise UnimplementedCapabilityError("session creation", type(self).__name__)

    def middleware(self, request: Any, call_next: Any = None) -> Any:
        raise UnimplementedCapabilityError("middleware function", type(self).__name__)
