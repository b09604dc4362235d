"""Pytest configuration and fixtures."""

import os
from typing import Optional, Sequence

import pytest

from proxylens.models.core import Address
from proxylens.models.resolution import AbiFunction, CallRequest, CallResult

PROXY = Address("0x1234567890123456789012345678901234567890")
IMPL = Address("0xa1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2")
OTHER_IMPL = Address("0xb0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0b0")
BEACON = Address("0xbeac0000000000000000000000000000000000aa")


def word(address: str) -> str:
    """Left-pad an address into a 32-byte storage word."""
    return "0x" + address[2:].rjust(64, "0")


class FakeAccessor:
    """In-memory chain-state accessor.

    Storage, call results and code are keyed by lowercase address. Every read
    is recorded in `reads` so tests can assert what the resolver touched.
    """

    def __init__(self) -> None:
        self.storage: dict[tuple[str, str], str] = {}
        self.calls: dict[tuple[str, str], CallResult] = {}
        self.code: dict[str, str] = {}
        self.errors: dict[tuple, Exception] = {}
        self.reads: list[tuple] = []

    def set_slot(self, address: str, slot: str, value: str) -> None:
        self.storage[(address.lower(), slot.lower())] = value

    def set_call(self, address: str, function: str, value: Optional[str]) -> None:
        result = CallResult(success=True, value=value)
        self.calls[(address.lower(), function)] = result

    def fail_call(self, address: str, function: str, error: str = "execution reverted") -> None:
        self.calls[(address.lower(), function)] = CallResult.failure(error)

    def _raise_if_failing(self, *key: str) -> None:
        if key in self.errors:
            raise self.errors[key]

    def _call(self, address: str, function: AbiFunction) -> CallResult:
        return self.calls.get(
            (address.lower(), function.name), CallResult.failure("execution reverted")
        )

    async def get_storage_at(self, address: Address, slot: str) -> Optional[str]:
        self.reads.append(("storage", address, slot))
        self._raise_if_failing("storage", slot.lower())
        return self.storage.get((address.lower(), slot.lower()))

    async def call(self, address: Address, function: AbiFunction, args: tuple = ()) -> CallResult:
        self.reads.append(("call", address, function.name))
        self._raise_if_failing("call", address.lower())
        return self._call(address, function)

    async def multicall(self, requests: Sequence[CallRequest]) -> list[CallResult]:
        self.reads.append(("multicall", tuple(r.function.name for r in requests)))
        self._raise_if_failing("multicall")
        return [self._call(r.address, r.function) for r in requests]

    async def get_code(self, address: Address) -> Optional[str]:
        self.reads.append(("code", address))
        self._raise_if_failing("code")
        return self.code.get(address.lower())


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PROXYLENS_* variables from the host out of tests."""
    for key in list(os.environ):
        if key.startswith("PROXYLENS_"):
            monkeypatch.delenv(key)


@pytest.fixture
def accessor() -> FakeAccessor:
    return FakeAccessor()

