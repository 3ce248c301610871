"""
auth/session.py -- Session descriptor and the token stored in the browser.

A browser that passed the authorization check once receives a session cookie
so later requests skip the check. The descriptor value is derived from the
configured key/value only, never from request data, so every gateway with
the same auth configuration agrees on it.

The raw descriptor value is the credential itself, so it is never sent to
the client. The cookie carries HMAC-SHA256(SECRET_KEY, value) instead: the
server can recompute and compare it, the client cannot reverse it.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from core.models import AuthConfig, SessionDescriptor

SESSION_NAME = "swagger-injector"


def derive_session(auth: Optional[AuthConfig]) -> SessionDescriptor:
    """Return the session descriptor for an auth configuration.

    value is key + (value or "") when a key is configured, else None.
    """
    if auth is not None and auth.key:
        return SessionDescriptor(name=SESSION_NAME, value=auth.key + (auth.value or ""))
    return SessionDescriptor(name=SESSION_NAME, value=None)


def sign_session_value(value: str, secret_key: str) -> str:
    """Return HMAC-SHA256(secret_key, value) as a hex string."""
    return hmac.new(
        secret_key.encode(),
        value.encode(),
        hashlib.sha256,
    ).hexdigest()


def verify_session_token(token: Optional[str], value: Optional[str], secret_key: str) -> bool:
    """Return True if token is the signed form of value. Constant-time."""
    if not token or value is None:
        return False
    return hmac.compare_digest(token.encode(), sign_session_value(value, secret_key).encode())
