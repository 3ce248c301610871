"""
core/schema.py -- One-time schema acquisition for a gateway instance.

The gateway serves the schema verbatim and never inspects its contents, so
this module only cares that the document exists, parses as JSON, and is a
non-empty object. It runs once, at construction; a failure here is fatal.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from core.errors import ConfigurationError

logger = logging.getLogger("swaggerinjector.schema")


def _parse(raw: str, origin: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Failed to parse swagger json from {origin}: {exc}") from exc


def load_schema(inline: Any = None, location: Optional[str] = None) -> dict[str, Any]:
    """Return the schema document from an inline value or a file location.

    An inline mapping is used as-is and the filesystem is not touched. An
    inline string is parsed as JSON. Otherwise location is resolved to an
    absolute path, read as UTF-8 and parsed.

    Raises ConfigurationError when nothing usable can be produced.
    """
    if inline:
        if isinstance(inline, Mapping):
            document = dict(inline)
        elif isinstance(inline, (str, bytes)):
            document = _parse(inline if isinstance(inline, str) else inline.decode("utf-8"), "inline value")
        else:
            raise ConfigurationError(f"Unsupported swagger value of type {type(inline).__name__}")
    elif location:
        schema_path = Path(location).resolve()
        try:
            raw = schema_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Could not read swagger file '{schema_path}': {exc}") from exc
        document = _parse(raw, str(schema_path))
        logger.info("Loaded swagger document from %s", schema_path)
    else:
        raise ConfigurationError("Failed to find swagger json from config")

    if not isinstance(document, dict) or not document:
        raise ConfigurationError("Failed to find swagger json from config")
    return document
