"""Proxy implementation resolution.

Detects whether an address is a proxy by calling accessor functions, reading
well-known storage slots and matching minimal-proxy bytecode.
"""

from proxylens.resolver.accessor import ChainStateAccessor
from proxylens.resolver.resolver import ProxyResolver, resolve_implementation

__all__ = [
    "ChainStateAccessor",
    "ProxyResolver",
    "resolve_implementation",
]
