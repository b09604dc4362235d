"""Data models for proxylens."""

from proxylens.models.core import (
    ZERO_ADDRESS,
    Address,
    StorageSlot,
    address_to_slot,
    is_address,
    normalize_address,
    word_to_address,
)
from proxylens.models.resolution import (
    AbiFunction,
    CallRequest,
    CallResult,
    DetectionStrategy,
    ProxyDetection,
)

__all__ = [
    "Address",
    "StorageSlot",
    "ZERO_ADDRESS",
    "address_to_slot",
    "is_address",
    "normalize_address",
    "word_to_address",
    "AbiFunction",
    "CallRequest",
    "CallResult",
    "DetectionStrategy",
    "ProxyDetection",
]
