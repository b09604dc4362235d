"""Models for chain reads and proxy detection results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from proxylens.models.core import Address


class DetectionStrategy(Enum):
    """How an implementation address was found."""

    CALL = "call"
    STORAGE_SLOT = "storage_slot"
    BYTECODE = "bytecode"
    KNOWN_NON_PROXY = "known_non_proxy"
    NONE = "none"


@dataclass(frozen=True)
class AbiFunction:
    """A view function returning a single address.

    Attributes:
        name: Function name
        selector: 4-byte function selector (0x-prefixed)
        inputs: Solidity types of the arguments
        output: Solidity type of the return value
    """

    name: str
    selector: str
    inputs: tuple[str, ...] = ()
    output: str = "address"

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"


@dataclass(frozen=True)
class CallRequest:
    """One entry of a multicall batch."""

    address: Address
    function: AbiFunction
    args: tuple = ()


@dataclass
class CallResult:
    """Outcome of a contract call.

    Attributes:
        success: True if the call returned decodable data
        value: Decoded return value (lowercase address for address outputs)
        error: Failure reason when success is False
    """

    success: bool
    value: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "CallResult":
        return cls(success=False, error=error)


@dataclass
class ProxyDetection:
    """Result of running the detection pipeline against one address.

    Attributes:
        proxy_address: Address that was inspected
        implementation: Resolved implementation, None when nothing matched
        strategy: Strategy that produced the answer
        source: Name of the call, slot or bytecode pattern that matched
        beacon: Beacon address when resolved through an EIP-1967 beacon
        notes: Strategy steps that failed on the way
    """

    proxy_address: Address
    implementation: Optional[Address] = None
    strategy: DetectionStrategy = DetectionStrategy.NONE
    source: Optional[str] = None
    beacon: Optional[Address] = None
    notes: list[str] = field(default_factory=list)
