"""
frameworks/fastapi_framework.py -- Documentation gateway for FastAPI/Starlette.

Install on an application:
    docs = FastAPIFramework({"path": "swagger.json", "authentication": {"key": "token", "value": "s3cret"}})
    docs.install(app)            # or: app.middleware("http")(docs.middleware)

Request handling by path category:
  SCHEMA_SOURCE       -- gated; schema document as JSON
  DOCUMENTATION_PAGE  -- gated; Swagger UI page pointing at the schema route
  CUSTOM_STYLESHEET   -- configured css file, or the literal css text
  ASSET_PATH          -- file from the dist directory, via the file cache
  anything else       -- passed to the rest of the application untouched

Gated paths accept the request when the caller holds a valid session cookie,
or when the credential sources pass the authorization predicate. In the
second case a session cookie is issued, so the browser's follow-up request
for the schema (which carries no query string) is accepted too.

Session cookie: value is HMAC-SHA256(SECRET_KEY, session value), httponly,
samesite=lax, secure when SECURE_COOKIES=true, scoped to the route prefix.
"""

from __future__ import annotations

import inspect
import logging
import mimetypes
import os
from collections.abc import Mapping
from typing import Any, Optional

from fastapi import Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.middleware.base import BaseHTTPMiddleware

from api.models import ErrorDetail, ErrorResponse
from auth.session import sign_session_value, verify_session_token
from core.config import Settings, get_settings
from core.models import CredentialSource, PathCategory
from frameworks.base import BaseFramework

logger = logging.getLogger("swaggerinjector.framework")

# Swagger UI files looked up in the dist directory. When a file is missing
# the FastAPI default (CDN) URL is used for it.
_UI_FILES = {
    "swagger_js_url": "swagger-ui-bundle.js",
    "swagger_css_url": "swagger-ui.css",
    "swagger_favicon_url": "favicon.png",
}

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
_GATED = (PathCategory.SCHEMA_SOURCE, PathCategory.DOCUMENTATION_PAGE)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
    )


class FastAPIFramework(BaseFramework):
    def __init__(self, config: Any = None, settings: Optional[Settings] = None) -> None:
        super().__init__(config)
        self.settings = settings or get_settings()
        self._session_token = (
            sign_session_value(self.session.value, self.settings.secret_key) if self.session.value is not None else None
        )
        self._ui_urls = {
            arg: f"{self.assets}/{filename}"
            for arg, filename in _UI_FILES.items()
            if os.path.isfile(os.path.join(self.config.dist_directory, filename))
        }
        css = self.config.stylesheet
        # A stylesheet that names an existing file is served from disk, otherwise
        # the option is the css text itself.
        self._stylesheet_file = os.path.abspath(css) if css and os.path.isfile(css) else None

    def install(self, app) -> None:
        """Register the gateway as HTTP middleware on a FastAPI/Starlette app."""
        app.add_middleware(BaseHTTPMiddleware, dispatch=self.middleware)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def middleware(self, request: Request, call_next) -> Response:
        category = self.classify(request.url.path)

        if category in _GATED:
            return await self._serve_gated(request, category)
        if category is PathCategory.CUSTOM_STYLESHEET:
            return await self._serve_stylesheet()
        if category is PathCategory.ASSET_PATH:
            return await self._serve_asset(request.url.path)

        # UNMATCHED, and DIST_FILE: a URL that happens to look like the dist
        # directory is not ours to serve.
        return await call_next(request)

    async def _serve_gated(self, request: Request, category: PathCategory) -> Response:
        if not self.config.authentication.enabled or self.has_session(request):
            return self._render(category)

        sources = await self.credential_sources(request)
        if not self.is_authorized(sources):
            logger.info("Unauthorized documentation request %s %s", request.method, request.url.path)
            result = self.unauthorized(request)
            if inspect.isawaitable(result):
                result = await result
            return result

        response = self._render(category)
        if self.session.value is not None:
            self.create_session(response)
        return response

    def _render(self, category: PathCategory) -> Response:
        if category is PathCategory.SCHEMA_SOURCE:
            return JSONResponse(self.swagger)
        return self._documentation_page()

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def _documentation_page(self) -> HTMLResponse:
        info = self.swagger.get("info")
        title = info.get("title") if isinstance(info, dict) else None
        response = get_swagger_ui_html(
            openapi_url=self.config.schema_route,
            title=title or "API documentation",
            **self._ui_urls,
        )
        if not self.config.stylesheet:
            return response
        link = f'<link type="text/css" rel="stylesheet" href="{self.config.custom_css_route}">'
        html = response.body.decode("utf-8").replace("</head>", f"{link}\n</head>", 1)
        return HTMLResponse(html)

    async def _serve_stylesheet(self) -> Response:
        css = self.config.stylesheet
        if not css:
            return _error(404, "not_found", "No custom stylesheet configured.")
        if self._stylesheet_file is not None:
            data = await run_in_threadpool(self.file_cache.get, self._stylesheet_file)
            if data is None:
                return _error(404, "not_found", "Custom stylesheet not found.")
        else:
            data = css.encode("utf-8")
        return Response(data, media_type="text/css")

    async def _serve_asset(self, path: str) -> Response:
        dist_path = self.build_dist_path(path)
        if not self.is_dist_path(dist_path):
            logger.warning("Rejected asset path outside dist directory: %s", path)
            return _error(404, "not_found", "Asset not found.")
        data = await run_in_threadpool(self.file_cache.get, dist_path)
        if data is None:
            return _error(404, "not_found", "Asset not found.")
        media_type = mimetypes.guess_type(dist_path)[0] or "application/octet-stream"
        return Response(data, media_type=media_type)

    # ------------------------------------------------------------------
    # Credential sources
    # ------------------------------------------------------------------

    async def credential_sources(self, request: Request) -> dict[CredentialSource, Mapping[str, Any]]:
        """Collect the configured credential sources from the request.

        Only configured sources are read, so the body is never consumed
        unless body credentials are accepted.
        """
        sources: dict[CredentialSource, Mapping[str, Any]] = {}
        for source in self.config.authentication.sources:
            if source is CredentialSource.query:
                sources[source] = request.query_params
            elif source is CredentialSource.body:
                sources[source] = await self._read_body(request)
            elif source is CredentialSource.header:
                sources[source] = request.headers
            elif source is CredentialSource.cookie:
                sources[source] = request.cookies
        return sources

    async def _read_body(self, request: Request) -> dict[str, Any]:
        content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        try:
            if content_type == "application/json" or content_type.endswith("+json"):
                payload = await request.json()
                return payload if isinstance(payload, dict) else {}
            if content_type in _FORM_TYPES:
                async with request.form() as form:
                    return {key: value for key, value in form.items() if isinstance(value, str)}
        # Starlette re-raises multipart parse failures as HTTPException(400).
        except (ValueError, MultiPartException, HTTPException) as e:
            logger.debug("Ignoring unparseable request body on %s: %s", request.url.path, e)
        return {}

    # ------------------------------------------------------------------
    # Adapter capabilities
    # ------------------------------------------------------------------

    def has_session(self, request: Request) -> bool:
        if self._session_token is None:
            return False
        return verify_session_token(request.cookies.get(self.session.name), self.session.value, self.settings.secret_key)

    def create_session(self, response: Response) -> None:
        response.set_cookie(
            self.session.name,
            value=self._session_token,
            httponly=True,
            samesite="lax",
            secure=self.settings.secure_cookies,
            max_age=self.settings.session_max_age,
            path=self.config.route_prefix or "/",
        )

    def unauthorized(self, request: Request) -> Response:
        """Default rejection: 401 with the standard error envelope."""
        return _error(401, "unauthorized", "Authentication required.")
