"""Chains served by the lookup service."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Chain:
    """A supported EVM chain.

    Attributes:
        chain_id: EIP-155 chain id
        name: Display name
        aliases: Lowercase names accepted on the command line
    """

    chain_id: int
    name: str
    aliases: tuple[str, ...] = field(default_factory=tuple)


SUPPORTED_CHAINS: tuple[Chain, ...] = (
    Chain(1, "Ethereum", ("ethereum", "mainnet", "eth")),
    Chain(11155111, "Sepolia", ("sepolia",)),
    Chain(10, "OP Mainnet", ("optimism", "op")),
    Chain(11155420, "OP Sepolia", ("optimism-sepolia", "op-sepolia")),
    Chain(137, "Polygon", ("polygon", "matic")),
    Chain(80002, "Polygon Amoy", ("polygon-amoy", "amoy")),
    Chain(8453, "Base", ("base",)),
    Chain(84532, "Base Sepolia", ("base-sepolia",)),
    Chain(42161, "Arbitrum One", ("arbitrum", "arb")),
    Chain(421614, "Arbitrum Sepolia", ("arbitrum-sepolia",)),
    Chain(34443, "Mode", ("mode",)),
    Chain(59144, "Linea", ("linea",)),
    Chain(42170, "Arbitrum Nova", ("arbitrum-nova",)),
    Chain(42220, "Celo", ("celo",)),
    Chain(43114, "Avalanche", ("avalanche", "avax")),
    Chain(43113, "Avalanche Fuji", ("avalanche-fuji", "fuji")),
    Chain(100, "Gnosis", ("gnosis", "xdai")),
    Chain(56, "BNB Smart Chain", ("bsc", "bnb")),
    Chain(10143, "Monad Testnet", ("monad-testnet",)),
    Chain(6342, "MegaETH Testnet", ("megaeth-testnet",)),
)

_BY_ID: dict[int, Chain] = {chain.chain_id: chain for chain in SUPPORTED_CHAINS}
_BY_ALIAS: dict[str, Chain] = {
    alias: chain for chain in SUPPORTED_CHAINS for alias in chain.aliases
}


def get_chain(value: str | int) -> Chain:
    """Look up a supported chain by numeric id or alias.

    Args:
        value: Chain id (int or decimal string) or alias such as "base"

    Returns:
        The matching chain

    Raises:
        ValueError: If the chain is not supported
    """
    if isinstance(value, int):
        chain = _BY_ID.get(value)
    else:
        normalized = value.strip().lower()
        chain = _BY_ID.get(int(normalized)) if normalized.isdigit() else _BY_ALIAS.get(normalized)

    if chain is None:
        raise ValueError(f"Unsupported chain: {value}")
    return chain
