"""
auth/predicate.py -- Decide whether a request carries the configured credential.

Any one accepted source carrying the key (and, when configured, the exact
value) is enough: the sources are alternatives, not requirements that must
all hold. Evaluation is pure and never raises for a "not authorized" outcome.

Layer rule: auth/ may import from core/ (the kernel) but not from api/,
frameworks/ or cache/.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.models import AuthConfig


def is_authorized(auth: AuthConfig, sources: Mapping[Any, Mapping[str, Any]]) -> bool:
    """Return True when any accepted source carries the configured credential.

    sources maps a CredentialSource (or its string value) to the fields found
    in that part of the request, e.g. {"query": {"token": "secret"}}.

    Returns True unconditionally when auth is not configured.
    """
    if not auth.enabled:
        return True

    for source_name in auth.sources:
        fields = sources.get(source_name)

        # Source not supplied for this request
        if not fields:
            continue

        # Key must be present in the source. A value-only configuration has
        # no key to look up and never matches.
        if auth.key is None or auth.key not in fields:
            continue

        # If a value is required it must match exactly
        if auth.value and fields[auth.key] != auth.value:
            continue

        return True
    return False
