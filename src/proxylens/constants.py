"""Well-known proxy storage slots and ABI fragments."""

from proxylens.models.resolution import AbiFunction

# bytes32(uint256(keccak256('eip1967.proxy.implementation')) - 1)
EIP1967_IMPLEMENTATION_SLOT = "0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc"

# bytes32(uint256(keccak256('eip1967.proxy.beacon')) - 1)
EIP1967_BEACON_SLOT = "0xa3f0ad74e5423aebfd80d3ef4346578335a9a72aeaee59ff6cb3582b35133d50"

# keccak256("org.zeppelinos.proxy.implementation")
ZEPPELINOS_IMPLEMENTATION_SLOT = "0x7050c9e0f4ca769c69bd3a8ef740bc37934f8e2c036e5a723fd8ee048ed3f8c3"

# ERC-1822 (UUPS): keccak256("PROXIABLE")
ERC1822_PROXIABLE_SLOT = "0xc5f16f0fcc639fa48a6947836d9850f504798523bf8c9a3a87d5876cf622bcf7"

EIP1967_IMPLEMENTATION = "EIP1967_IMPL"
EIP1967_BEACON = "EIP1967_BEACON"
ZEPPELINOS_IMPLEMENTATION = "ZEPPELINOS_IMPL"
ERC1822_PROXIABLE = "PROXIABLE"
ADDRESS_SLOT = "ADDRESS_SLOT"

# Evaluated in this order. The address-as-slot fallback is appended per
# address by the resolver under ADDRESS_SLOT.
IMPLEMENTATION_SLOTS: tuple[tuple[str, str], ...] = (
    (EIP1967_IMPLEMENTATION, EIP1967_IMPLEMENTATION_SLOT),
    (EIP1967_BEACON, EIP1967_BEACON_SLOT),
    (ZEPPELINOS_IMPLEMENTATION, ZEPPELINOS_IMPLEMENTATION_SLOT),
    (ERC1822_PROXIABLE, ERC1822_PROXIABLE_SLOT),
)

# ERC-897 implementation() view returns (address)
IMPLEMENTATION_FUNCTION = AbiFunction(name="implementation", selector="0x5c60da1b")

# Safe proxy masterCopy() view returns (address)
MASTER_COPY_FUNCTION = AbiFunction(name="masterCopy", selector="0xa619486e")
