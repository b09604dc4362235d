"""Proxy implementation resolver.

Strategies run cheapest first and stop at the first answer:

1. Call-based: masterCopy() and implementation() in one multicall.
2. Storage slots: EIP-1967 implementation and beacon, zeppelinOS, ERC-1822,
   then the address itself used as a slot index.
3. Bytecode: known minimal proxy and clone templates.

A failed read only ends its own step. TransportError always propagates.
"""

import asyncio
import logging
from typing import Optional

from proxylens.constants import (
    ADDRESS_SLOT,
    EIP1967_BEACON,
    IMPLEMENTATION_FUNCTION,
    IMPLEMENTATION_SLOTS,
    MASTER_COPY_FUNCTION,
)
from proxylens.errors import ReadFailure
from proxylens.known import KnownNonProxySet
from proxylens.models.core import (
    ZERO_ADDRESS,
    Address,
    address_to_slot,
    normalize_address,
    word_to_address,
)
from proxylens.models.resolution import (
    CallRequest,
    CallResult,
    DetectionStrategy,
    ProxyDetection,
)
from proxylens.patterns import match_bytecode
from proxylens.resolver.accessor import ChainStateAccessor

logger = logging.getLogger(__name__)

# Evaluation order: masterCopy() wins over implementation()
CALL_FUNCTIONS = (MASTER_COPY_FUNCTION, IMPLEMENTATION_FUNCTION)


def _call_address(result: CallResult, proxy: Address) -> Optional[Address]:
    """Address returned by a successful call.

    None for failed calls, the zero address and the proxy pointing at itself.
    """
    if not result.success or not result.value:
        return None
    try:
        address = normalize_address(result.value)
    except ValueError:
        return None
    if address in (ZERO_ADDRESS, proxy):
        return None
    return address


class ProxyResolver:
    """Resolves the implementation address behind a proxy contract.

    The resolver holds no per-call state, so one instance can serve many
    concurrent resolutions against the same accessor.
    """

    def __init__(
        self,
        accessor: ChainStateAccessor,
        known_non_proxies: Optional[KnownNonProxySet] = None,
    ):
        """Initialize resolver.

        Args:
            accessor: Chain-state accessor bound to one chain
            known_non_proxies: Exempted addresses, built-in defaults if None
        """
        self.accessor = accessor
        self.known_non_proxies = (
            known_non_proxies if known_non_proxies is not None else KnownNonProxySet.default()
        )

    async def resolve(self, address: str) -> Optional[Address]:
        """Resolve the implementation address.

        Args:
            address: Candidate proxy address

        Returns:
            Lowercase implementation address, or None if no proxy pattern matched

        Raises:
            ValueError: If address is malformed
            TransportError: If the chain endpoint fails
        """
        detection = await self.detect(address)
        return detection.implementation

    async def detect(self, address: str) -> ProxyDetection:
        """Run the detection pipeline and report which strategy matched.

        Args:
            address: Candidate proxy address

        Returns:
            ProxyDetection with the implementation and its provenance
        """
        proxy = normalize_address(address)
        detection = ProxyDetection(proxy_address=proxy)

        if proxy in self.known_non_proxies:
            logger.debug("%s is a known non-proxy (%s)", proxy, self.known_non_proxies.label(proxy))
            detection.strategy = DetectionStrategy.KNOWN_NON_PROXY
            return detection

        if await self._detect_by_call(proxy, detection):
            return detection
        if await self._detect_by_storage(proxy, detection):
            return detection
        await self._detect_by_bytecode(proxy, detection)
        return detection

    async def _detect_by_call(self, proxy: Address, detection: ProxyDetection) -> bool:
        requests = [CallRequest(address=proxy, function=function) for function in CALL_FUNCTIONS]
        try:
            results = await self.accessor.multicall(requests)
        except ReadFailure as e:
            logger.debug("%s: call-based detection failed: %s", proxy, e)
            detection.notes.append(f"multicall: {e}")
            return False

        for request, result in zip(requests, results):
            implementation = _call_address(result, proxy)
            if implementation:
                logger.debug("%s: %s returned %s", proxy, request.function.signature, implementation)
                detection.implementation = implementation
                detection.strategy = DetectionStrategy.CALL
                detection.source = request.function.signature
                return True
            if not result.success:
                detection.notes.append(f"{request.function.signature}: {result.error}")
        return False

    async def _read_slot(self, proxy: Address, name: str, slot: str) -> Optional[str]:
        try:
            return await self.accessor.get_storage_at(proxy, slot)
        except ReadFailure as e:
            logger.debug("%s: reading %s failed: %s", proxy, name, e)
            return None

    async def _detect_by_storage(self, proxy: Address, detection: ProxyDetection) -> bool:
        slots = [*IMPLEMENTATION_SLOTS, (ADDRESS_SLOT, address_to_slot(proxy))]
        values = await asyncio.gather(
            *(self._read_slot(proxy, name, slot) for name, slot in slots)
        )

        for (name, _), value in zip(slots, values):
            slot_address = word_to_address(value)
            if slot_address is None or slot_address == proxy:
                continue

            logger.debug("%s: slot %s holds %s", proxy, name, slot_address)
            detection.strategy = DetectionStrategy.STORAGE_SLOT
            detection.source = name
            if name == EIP1967_BEACON:
                detection.beacon = slot_address
                detection.implementation = await self._resolve_beacon(slot_address, detection)
            else:
                detection.implementation = slot_address
            return True
        return False

    async def _resolve_beacon(
        self, beacon: Address, detection: ProxyDetection
    ) -> Optional[Address]:
        """Ask a beacon for its current implementation."""
        try:
            result = await self.accessor.call(beacon, IMPLEMENTATION_FUNCTION)
        except ReadFailure as e:
            result = CallResult.failure(str(e))

        implementation = _call_address(result, detection.proxy_address)
        if implementation is None:
            logger.debug("beacon %s gave no implementation: %s", beacon, result.error)
            detection.notes.append(f"beacon {beacon}: {result.error or 'zero address'}")
        return implementation

    async def _detect_by_bytecode(self, proxy: Address, detection: ProxyDetection) -> bool:
        try:
            code = await self.accessor.get_code(proxy)
        except ReadFailure as e:
            logger.debug("%s: code fetch failed: %s", proxy, e)
            detection.notes.append(f"getCode: {e}")
            return False

        match = match_bytecode(code)
        if match is None or match[1] == proxy:
            logger.debug("%s: no proxy pattern recognized", proxy)
            return False

        name, implementation = match
        logger.debug("%s: bytecode matches %s, implementation %s", proxy, name, implementation)
        detection.implementation = implementation
        detection.strategy = DetectionStrategy.BYTECODE
        detection.source = name
        return True


async def resolve_implementation(
    accessor: ChainStateAccessor,
    address: str,
    known_non_proxies: Optional[KnownNonProxySet] = None,
) -> Optional[Address]:
    """Resolve the implementation behind a possible proxy.

    Args:
        accessor: Chain-state accessor bound to the target chain
        address: Candidate proxy address
        known_non_proxies: Exempted addresses, built-in defaults if None

    Returns:
        Lowercase implementation address, or None if no proxy pattern matched
    """
    return await ProxyResolver(accessor, known_non_proxies).resolve(address)
