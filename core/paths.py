"""
core/paths.py -- Request path classification and dist path translation.

Pure functions of (Configuration, path). No I/O.

classify() checks categories in a fixed order and returns the first match.
The order is load-bearing: the custom stylesheet path is also an asset path,
so it must be tested before the generic asset prefix match.
"""

from __future__ import annotations

import os

from core.models import Configuration, PathCategory


def is_schema_source_path(config: Configuration, path: str) -> bool:
    return path == config.schema_route


def is_document_path(config: Configuration, path: str) -> bool:
    return path == config.documentation_route


def is_custom_css_path(config: Configuration, path: str) -> bool:
    return path == config.custom_css_route


def is_asset_path(config: Configuration, path: str) -> bool:
    return path.startswith(config.asset_prefix)


def is_dist_path(config: Configuration, path: str) -> bool:
    """True when path is the dist directory or lies inside it.

    A plain prefix test would also accept siblings such as /opt/app/dist-old,
    so the character after the directory must be a separator.
    """
    root = config.dist_directory.rstrip(os.sep) or os.sep
    if path == root:
        return True
    if root == os.sep:
        return path.startswith(os.sep)
    return path.startswith(root + os.sep)


def classify(config: Configuration, path: str) -> PathCategory:
    if is_schema_source_path(config, path):
        return PathCategory.SCHEMA_SOURCE
    if is_document_path(config, path):
        return PathCategory.DOCUMENTATION_PAGE
    if is_custom_css_path(config, path):
        return PathCategory.CUSTOM_STYLESHEET
    if is_asset_path(config, path):
        return PathCategory.ASSET_PATH
    if is_dist_path(config, path):
        return PathCategory.DIST_FILE
    return PathCategory.UNMATCHED


def build_dist_path(config: Configuration, public_path: str) -> str:
    """Translate a public asset URL path into an absolute path under dist.

    The route prefix and then the asset marker are stripped from the front
    of the path, the remainder is joined under the dist directory and
    normalised. Relative segments are collapsed, so a traversal attempt ends
    up outside the directory; callers must check is_dist_path() on the result
    before reading anything.
    """
    relative = public_path
    if config.route_prefix and relative.startswith(config.route_prefix):
        relative = relative[len(config.route_prefix) :]
    if config.assets and relative.startswith(config.assets):
        relative = relative[len(config.assets) :]
    return os.path.normpath(os.path.join(config.dist_directory, relative.lstrip("/")))
