"""Calldata encoding and return data decoding for view calls."""

from typing import Optional

from eth_abi import decode, encode

from proxylens.models.core import Address
from proxylens.models.resolution import AbiFunction


def encode_call(function: AbiFunction, args: tuple = ()) -> str:
    """Build calldata for a function call.

    Raises:
        ValueError: If the arguments do not match the function inputs
        eth_abi.exceptions.EncodingError: If an argument cannot be encoded
    """
    if len(args) != len(function.inputs):
        raise ValueError(
            f"{function.signature} takes {len(function.inputs)} arguments, got {len(args)}"
        )
    if not args:
        return function.selector
    return function.selector + encode(list(function.inputs), list(args)).hex()


def decode_output(function: AbiFunction, data: Optional[str]) -> Address:
    """Decode the address returned by a call.

    A zero address is returned as-is; callers decide what it means.

    Args:
        function: Function that was called
        data: Raw return data

    Returns:
        Lowercase address

    Raises:
        ValueError: If the call returned no data or non-hex data
        eth_abi.exceptions.DecodingError: If the data is not an ABI-encoded
            address (short word, non-zero padding bytes)
    """
    if data is not None and not isinstance(data, str):
        raise ValueError(f"{function.signature} returned {type(data).__name__}")
    raw = (data or "").removeprefix("0x")
    if not raw:
        raise ValueError(f"{function.signature} returned no data")

    (value,) = decode([function.output], bytes.fromhex(raw))
    return Address(value.lower())
