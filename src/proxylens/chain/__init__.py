"""Chain access over JSON-RPC."""

from proxylens.chain.rpc_client import RPCClient

__all__ = ["RPCClient"]
