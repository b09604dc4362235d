"""CLI interface for proxylens."""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from proxylens import __version__
from proxylens.chain.rpc_client import RPCClient
from proxylens.chains import SUPPORTED_CHAINS, Chain, get_chain
from proxylens.config import ProxyLensConfig, load_config
from proxylens.models.core import normalize_address
from proxylens.models.resolution import DetectionStrategy, ProxyDetection
from proxylens.resolver import ProxyResolver

console = Console()

STRATEGY_COLORS = {
    DetectionStrategy.CALL: "green",
    DetectionStrategy.STORAGE_SLOT: "cyan",
    DetectionStrategy.BYTECODE: "magenta",
    DetectionStrategy.KNOWN_NON_PROXY: "yellow",
    DetectionStrategy.NONE: "dim",
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _detection_dict(chain: Chain, detection: ProxyDetection) -> dict:
    return {
        "chain_id": chain.chain_id,
        "address": detection.proxy_address,
        "implementation": detection.implementation,
        "strategy": detection.strategy.value,
        "source": detection.source,
        "beacon": detection.beacon,
        "notes": detection.notes,
    }


def _print_detections_console(chain: Chain, detections: list[ProxyDetection]) -> None:
    """Print resolution results as a table."""
    table = Table(title=f"Proxy resolution on {chain.name} ({chain.chain_id})")
    table.add_column("Address", style="bold")
    table.add_column("Implementation")
    table.add_column("Strategy")
    table.add_column("Source", style="dim")

    for detection in detections:
        color = STRATEGY_COLORS[detection.strategy]
        source = detection.source or ""
        if detection.beacon:
            source = f"{source} via beacon {detection.beacon}"
        table.add_row(
            detection.proxy_address,
            detection.implementation or "[dim]-[/dim]",
            f"[{color}]{detection.strategy.value}[/{color}]",
            source,
        )

    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="proxylens")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """proxylens - Resolve the implementation behind on-chain proxy contracts."""
    _setup_logging(log_level)


@cli.command()
@click.argument("addresses", nargs=-1, required=True)
@click.option("--chain", "chain_name", help="Chain id or name (defaults to configured chain)")
@click.option("--rpc", help="RPC endpoint URL (overrides configuration)")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file (TOML)")
@click.option(
    "-o",
    "--output",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format",
)
def resolve(
    addresses: tuple[str, ...],
    chain_name: Optional[str],
    rpc: Optional[str],
    config_path: Optional[str],
    output: str,
) -> None:
    """Resolve implementation addresses of one or more contracts.

    Examples:
        proxylens resolve 0x... --rpc https://eth.example/v2/KEY
        proxylens resolve 0x... 0x... --chain base
    """

    async def run_resolution(config: ProxyLensConfig, chain: Chain, rpc_url: str) -> int:
        async with RPCClient(
            rpc_url,
            timeout=config.timeout,
            retries=config.retries,
            backoff_seconds=config.backoff_seconds,
        ) as client:
            resolver = ProxyResolver(client, config.known_non_proxies)
            detections = await asyncio.gather(*(resolver.detect(a) for a in addresses))

        if output == "json":
            console.print_json(data=[_detection_dict(chain, d) for d in detections])
        else:
            _print_detections_console(chain, list(detections))
        return 0

    try:
        config = load_config(config_path)
        chain = get_chain(chain_name) if chain_name else get_chain(config.default_chain)
        for address in addresses:
            normalize_address(address)

        rpc_url = rpc or config.rpc_url_for(chain.chain_id)
        if not rpc_url:
            raise click.UsageError(
                f"No RPC endpoint for {chain.name}; pass --rpc or set "
                f"PROXYLENS_RPC_URL_{chain.chain_id}"
            )

        exit_code = asyncio.run(run_resolution(config, chain, rpc_url))
    except click.UsageError:
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    sys.exit(exit_code)


@cli.command()
def chains() -> None:
    """List supported chains."""
    table = Table(title="Supported chains")
    table.add_column("Chain ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Aliases", style="dim")

    for chain in SUPPORTED_CHAINS:
        table.add_row(str(chain.chain_id), chain.name, ", ".join(chain.aliases))

    console.print(table)


@cli.command()
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file (TOML)")
def known(config_path: Optional[str]) -> None:
    """List contracts exempted from proxy detection."""
    try:
        config = load_config(config_path)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    table = Table(title=f"Known non-proxies ({len(config.known_non_proxies)})")
    table.add_column("Address", style="bold")
    table.add_column("Label")

    for address in config.known_non_proxies:
        table.add_row(address, config.known_non_proxies.label(address) or "")

    console.print(table)


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
