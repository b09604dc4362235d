"""Core value types shared across proxylens."""

import re
from typing import NewType, Optional

Address = NewType("Address", str)
StorageSlot = NewType("StorageSlot", str)

ZERO_ADDRESS = Address("0x" + "0" * 40)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]*$")


def is_address(value: str) -> bool:
    """Check whether a string has the shape of a 20-byte hex address."""
    return bool(_ADDRESS_RE.match(value or ""))


def normalize_address(value: str) -> Address:
    """Validate an address and return its lowercase canonical form.

    Args:
        value: 0x-prefixed address in any case

    Returns:
        Lowercase address

    Raises:
        ValueError: If value is not a 20-byte hex address
    """
    candidate = (value or "").strip()
    if not is_address(candidate):
        raise ValueError(f"Invalid address: {value!r}")
    return Address(candidate.lower())


def address_to_slot(address: str) -> StorageSlot:
    """Left-pad an address to a 32-byte storage slot index."""
    return StorageSlot("0x" + normalize_address(address)[2:].rjust(64, "0"))


def word_to_address(word: Optional[str]) -> Optional[Address]:
    """Interpret a 32-byte word as an address.

    The word is left-padded to 32 bytes when the node trims leading zeros.
    Returns None for an empty or all-zero word, and for a word whose
    high 12 bytes are not zero (the slot holds something other than an
    address).

    Args:
        word: Hex string as returned by the node

    Returns:
        Lowercase address or None
    """
    if not word or not _HEX_RE.match(word):
        return None

    digits = word[2:] if word.startswith("0x") else word
    digits = digits.lower()
    if len(digits) > 64:
        return None
    digits = digits.rjust(64, "0")

    if int(digits, 16) == 0:
        return None
    if digits[:24] != "0" * 24:
        return None

    return Address("0x" + digits[24:])
