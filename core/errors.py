"""
core/errors.py -- Exception types raised by the documentation gateway.

Only two things are errors here. Everything else (an unauthorized request,
a path the gateway does not own) is an ordinary return value:

  ConfigurationError:
      Construction-time failure. No usable schema, an unreadable or
      unparseable schema file, or an option of the wrong type. A gateway
      instance is never returned in a half-built state.

  UnimplementedCapabilityError:
      A framework adapter forgot to override one of the capabilities in the
      adapter contract. This is an integration bug, so it subclasses
      NotImplementedError and is not meant to be caught at request time.

Layer rule: core/ is the kernel. This module imports nothing from the
project.
"""


class ConfigurationError(Exception):
    """Raised when the gateway configuration or its schema is unusable."""


class UnimplementedCapabilityError(NotImplementedError):
    """Raised when an adapter does not implement a required capability."""

    def __init__(self, capability: str, owner: str = "") -> None:
        self.capability = capability
        self.owner = owner
        where = f" for {owner}" if owner else ""
        super().__init__(f"No {capability} capability defined{where}")
