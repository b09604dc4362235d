"""proxylens - Resolve the implementation behind on-chain proxy contracts."""

__version__ = "0.1.0"
