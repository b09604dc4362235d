"""Read-only chain-state accessor consumed by the resolver."""

from typing import Optional, Protocol, Sequence, runtime_checkable

from proxylens.models.core import Address
from proxylens.models.resolution import AbiFunction, CallRequest, CallResult


@runtime_checkable
class ChainStateAccessor(Protocol):
    """Read access to one chain.

    Implementations raise ReadFailure (or RPCError) when a single read yields
    no usable data and TransportError when the endpoint itself fails.
    Call reverts are reported through CallResult, not raised.
    """

    async def get_storage_at(self, address: Address, slot: str) -> Optional[str]:
        """Read a raw 32-byte storage word, None if the node returns nothing."""
        ...

    async def call(
        self, address: Address, function: AbiFunction, args: tuple = ()
    ) -> CallResult:
        """Call a view function."""
        ...

    async def multicall(self, requests: Sequence[CallRequest]) -> list[CallResult]:
        """Run several calls in one round-trip, results in request order."""
        ...

    async def get_code(self, address: Address) -> Optional[str]:
        """Fetch deployed bytecode, None for accounts without code."""
        ...
