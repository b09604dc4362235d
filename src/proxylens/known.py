"""Contracts that look like proxies but are not.

Factories and singletons in this set expose proxy-like selectors or storage
without delegating calls. Membership grows over time, so the set is seeded
from DEFAULT_KNOWN_NON_PROXIES and extended from configuration at start-up.
"""

from typing import Iterable, Iterator, Optional

from proxylens.models.core import Address, is_address, normalize_address

DEFAULT_KNOWN_NON_PROXIES: dict[str, str] = {
    "0x6723b44abeec4e71ebe3232bd5b455805badd22f": "ZeroDev Kernel Factory V3.0",
    "0xaac5d4240af87249b3f71bc8e4a2cae074a3e419": "ZeroDev Kernel Factory V3.1",
    "0x000000000000dd366cc2e4432bb998e41dfd47c7": "Nani Factory V0.0.0",
    "0x0000000000008dd2574908774527fd6da397d75b": "Nani Factory V1.1.1",
    "0x420dd381b31aef6683db6b902084cb0ffece40da": "Aerodrome Factory",
    "0xf1046053aa5682b4f9a81b5481394da16be5ff5a": "Velodrome Factory V2",
    "0x0ba5ed0c6aa8c49038f819e587e2633c4a9f428a": "Coinbase Smart Wallet Factory",
    "0x202a5598bdba2ce62bffa13ecccb04969719fad9": "Etherspot Modular V1 Account Implementation",
}


class KnownNonProxySet:
    """Case-insensitive set of addresses exempted from proxy detection."""

    def __init__(self, entries: Optional[dict[str, str]] = None) -> None:
        self._labels: dict[Address, str] = {}
        for address, label in (entries or {}).items():
            self.add(address, label)

    @classmethod
    def default(cls) -> "KnownNonProxySet":
        """Create a set seeded with the built-in exemptions."""
        return cls(DEFAULT_KNOWN_NON_PROXIES)

    def add(self, address: str, label: str = "") -> None:
        """Add an address.

        Raises:
            ValueError: If address is malformed
        """
        self._labels[normalize_address(address)] = label

    def update(self, addresses: Iterable[str]) -> None:
        for address in addresses:
            self.add(address)

    def label(self, address: str) -> Optional[str]:
        if not is_address(address):
            return None
        return self._labels.get(Address(address.lower()))

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, str) or not is_address(address):
            return False
        return Address(address.lower()) in self._labels

    def __iter__(self) -> Iterator[Address]:
        return iter(sorted(self._labels))

    def __len__(self) -> int:
        return len(self._labels)
