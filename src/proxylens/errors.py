"""Exception hierarchy for proxylens."""

from typing import Any, Optional


class ProxyLensError(Exception):
    """Base class for all proxylens errors."""


class ReadFailure(ProxyLensError):
    """A single chain read (call, storage read, code fetch) produced no usable data.

    The resolver treats this as "this step found nothing" and moves on.
    """


class RPCError(ReadFailure):
    """The node answered with a JSON-RPC error object.

    Attributes:
        code: JSON-RPC error code (if provided)
        message: Error message from the node
        data: Extra error data, e.g. revert payload
    """

    def __init__(self, code: Optional[int], message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        parts: list[str] = []
        if code is not None:
            parts.append(f"code {code}")
        if message:
            parts.append(message)
        if data:
            parts.append(str(data))
        super().__init__(f"RPC error: {': '.join(parts) if parts else 'unknown error'}")


class TransportError(ProxyLensError):
    """The chain endpoint is unreachable or failed at the HTTP/protocol level.

    Never recovered inside the resolver; retry policy belongs to the caller.
    """


class ConfigError(ProxyLensError):
    """Invalid configuration value."""
