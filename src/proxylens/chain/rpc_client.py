"""Async JSON-RPC client for EVM nodes."""

import asyncio
import itertools
import logging
import warnings
from typing import Any, Optional, Sequence

import aiohttp
from eth_abi.exceptions import DecodingError

from proxylens.chain.abi import decode_output, encode_call
from proxylens.errors import ReadFailure, RPCError, TransportError
from proxylens.models.core import Address
from proxylens.models.resolution import AbiFunction, CallRequest, CallResult

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429}


class RPCClient:
    """JSON-RPC 2.0 client implementing the chain-state accessor.

    Requests are retried on HTTP 429/5xx and connection errors. Once retries
    are exhausted a TransportError is raised. JSON-RPC error objects are
    raised as RPCError, except for eth_call where they become failed
    CallResults.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10,
        retries: int = 3,
        backoff_seconds: float = 0.5,
    ):
        """Initialize RPC client.

        Args:
            rpc_url: Node endpoint
            timeout: Per-request timeout in seconds
            retries: Attempts per request
            backoff_seconds: Linear backoff between attempts

        Raises:
            ValueError: If rpc_url is empty
        """
        url = (rpc_url or "").strip()
        if not url:
            raise ValueError("rpc_url must be a non-empty string.")
        if not url.startswith("https://"):
            warnings.warn(
                f"HTTPS recommended for RPC endpoints, got {url.split('://')[0]}://",
                UserWarning,
                stacklevel=2,
            )

        self.rpc_url = url
        self.timeout = timeout
        self.retries = max(1, int(retries))
        self.backoff_seconds = float(backoff_seconds)
        self._session: Optional[aiohttp.ClientSession] = None
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "RPCClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._session

    def _payload(self, method: str, params: list[Any]) -> dict[str, Any]:
        return {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

    async def _post(self, payload: Any) -> Any:
        """POST a JSON-RPC payload (single or batch) and return the decoded body.

        Raises:
            TransportError: On HTTP, connection or timeout failures
        """
        last_error: Optional[str] = None
        for attempt in range(1, self.retries + 1):
            try:
                session = self._get_session()
                async with session.post(self.rpc_url, json=payload) as response:
                    if response.status in RETRY_STATUSES or response.status >= 500:
                        last_error = f"HTTP {response.status}"
                    elif response.status >= 400:
                        raise TransportError(f"RPC endpoint returned HTTP {response.status}")
                    else:
                        try:
                            return await response.json(content_type=None)
                        except ValueError as e:
                            raise TransportError(f"RPC endpoint returned invalid JSON: {e}") from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = f"{type(e).__name__}: {e}"

            if attempt < self.retries:
                logger.debug("RPC attempt %d/%d failed (%s), retrying", attempt, self.retries, last_error)
                await asyncio.sleep(self.backoff_seconds * attempt)

        raise TransportError(f"RPC request failed after {self.retries} attempts: {last_error}")

    @staticmethod
    def _unwrap(data: Any) -> Any:
        if not isinstance(data, dict):
            raise TransportError("Unexpected JSON-RPC response (non-object).")
        error = data.get("error")
        if isinstance(error, dict):
            raise RPCError(error.get("code"), str(error.get("message") or ""), error.get("data"))
        if "result" not in data:
            raise TransportError("Unexpected JSON-RPC response (missing result).")
        return data["result"]

    async def request(self, method: str, params: Optional[list[Any]] = None) -> Any:
        """Send one JSON-RPC request.

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            The "result" member of the response

        Raises:
            RPCError: If the node returned an error object
            TransportError: On transport failures
        """
        data = await self._post(self._payload(method, params or []))
        return self._unwrap(data)

    async def batch(self, calls: Sequence[tuple[str, list[Any]]]) -> list[Any]:
        """Send several requests as one JSON-RPC batch.

        Args:
            calls: (method, params) pairs

        Returns:
            One entry per call in input order: the result, or the RPCError
            raised for that entry
        """
        if not calls:
            return []

        payloads = [self._payload(method, params) for method, params in calls]
        data = await self._post(payloads)
        if not isinstance(data, list):
            # Some nodes answer a batch with a single error object
            self._unwrap(data)
            raise TransportError("Unexpected JSON-RPC batch response (non-list).")

        by_id = {item.get("id"): item for item in data if isinstance(item, dict)}
        results: list[Any] = []
        for payload in payloads:
            item = by_id.get(payload["id"])
            if item is None:
                results.append(RPCError(None, f"missing response for request {payload['id']}"))
                continue
            try:
                results.append(self._unwrap(item))
            except RPCError as e:
                results.append(e)
        return results

    async def get_storage_at(
        self, address: Address, slot: str, block: str = "latest"
    ) -> Optional[str]:
        """Read a storage word.

        Args:
            address: Contract address
            slot: 32-byte slot index
            block: Block tag or number

        Returns:
            Raw hex word, or None if the node returned nothing
        """
        result = await self.request("eth_getStorageAt", [address, slot, block])
        if result is None:
            return None
        if not isinstance(result, str):
            raise ReadFailure(f"eth_getStorageAt returned {type(result).__name__}")
        return result

    async def get_code(self, address: Address, block: str = "latest") -> Optional[str]:
        """Fetch deployed bytecode, None for accounts without code."""
        result = await self.request("eth_getCode", [address, block])
        if not result or result == "0x":
            return None
        if not isinstance(result, str):
            raise ReadFailure(f"eth_getCode returned {type(result).__name__}")
        return result

    @staticmethod
    def _call_params(address: Address, function: AbiFunction, args: tuple) -> list[Any]:
        return [{"to": address, "data": encode_call(function, args)}, "latest"]

    @staticmethod
    def _to_call_result(function: AbiFunction, result: Any) -> CallResult:
        if isinstance(result, RPCError):
            return CallResult.failure(str(result))
        try:
            return CallResult(success=True, value=decode_output(function, result))
        except DecodingError as e:
            return CallResult.failure(f"{function.signature} returned undecodable data: {e}")
        except ValueError as e:
            return CallResult.failure(str(e))

    async def call(
        self, address: Address, function: AbiFunction, args: tuple = ()
    ) -> CallResult:
        """Call a view function with eth_call.

        Reverts and undecodable return data are reported as failed results.
        """
        try:
            result = await self.request("eth_call", self._call_params(address, function, args))
        except RPCError as e:
            return CallResult.failure(str(e))
        return self._to_call_result(function, result)

    async def multicall(self, requests: Sequence[CallRequest]) -> list[CallResult]:
        """Run several eth_calls in one JSON-RPC batch round-trip."""
        results = await self.batch(
            [
                ("eth_call", self._call_params(req.address, req.function, req.args))
                for req in requests
            ]
        )
        return [
            self._to_call_result(req.function, result)
            for req, result in zip(requests, results)
        ]
