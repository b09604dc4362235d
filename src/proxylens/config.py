"""Configuration for proxylens.

Settings come from an optional TOML file and from PROXYLENS_* environment
variables; the environment wins.

Example file::

    [proxylens]
    default_chain = 1
    timeout = 10
    retries = 3

    [rpc_urls]
    1 = "https://eth-mainnet.example/v2/KEY"
    8453 = "https://base-mainnet.example/v2/KEY"

    [[known_non_proxies]]
    address = "0x420dd381b31aef6683db6b902084cb0ffece40da"
    label = "Aerodrome Factory"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from proxylens.chains import get_chain
from proxylens.errors import ConfigError
from proxylens.known import KnownNonProxySet

ENV_PREFIX = "PROXYLENS_"


@dataclass
class ProxyLensConfig:
    """Runtime configuration.

    Attributes:
        default_chain: Chain id used when none is given
        rpc_urls: RPC endpoint per chain id
        timeout: Per-request timeout in seconds
        retries: Attempts per RPC request
        backoff_seconds: Linear backoff between attempts
        known_non_proxies: Addresses exempted from proxy detection
    """

    default_chain: int = 1
    rpc_urls: dict[int, str] = field(default_factory=dict)
    timeout: float = 10
    retries: int = 3
    backoff_seconds: float = 0.5
    known_non_proxies: KnownNonProxySet = field(default_factory=KnownNonProxySet.default)

    def rpc_url_for(self, chain_id: int) -> str | None:
        """Return the configured RPC endpoint for a chain, if any."""
        return self.rpc_urls.get(chain_id)


def _number(value: Any, name: str, kind: type) -> Any:
    # TOML booleans and fractional retries are not silently coerced
    if isinstance(value, bool) or (kind is int and isinstance(value, float)):
        raise ConfigError(f"{name} must be a {kind.__name__}, got {value!r}")
    try:
        result = kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a {kind.__name__}, got {value!r}") from e
    if result < 0:
        raise ConfigError(f"{name} must not be negative")
    return result


def _chain_id(value: Any, name: str) -> int:
    try:
        return get_chain(value if isinstance(value, int) else str(value)).chain_id
    except ValueError as e:
        raise ConfigError(f"{name}: {e}") from e


def _table(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{name}] must be a table, got {type(value).__name__}")
    return value


def _apply_file(config: ProxyLensConfig, data: Mapping[str, Any]) -> None:
    section = _table(data, "proxylens")
    if "default_chain" in section:
        config.default_chain = _chain_id(section["default_chain"], "default_chain")
    if "timeout" in section:
        config.timeout = _number(section["timeout"], "timeout", float)
    if "retries" in section:
        config.retries = _number(section["retries"], "retries", int)
    if "backoff_seconds" in section:
        config.backoff_seconds = _number(section["backoff_seconds"], "backoff_seconds", float)

    for chain, url in _table(data, "rpc_urls").items():
        if not isinstance(url, str):
            raise ConfigError(f"rpc_urls.{chain} must be a string, got {url!r}")
        config.rpc_urls[_chain_id(chain, "rpc_urls")] = url

    entries = data.get("known_non_proxies", [])
    if not isinstance(entries, list):
        raise ConfigError("known_non_proxies must be an array of tables")
    for entry in entries:
        if not isinstance(entry, Mapping) or "address" not in entry:
            raise ConfigError("known_non_proxies entries need an 'address' key")
        try:
            config.known_non_proxies.add(entry["address"], str(entry.get("label", "")))
        except ValueError as e:
            raise ConfigError(str(e)) from e


def _apply_env(config: ProxyLensConfig, env: Mapping[str, str]) -> None:
    if f"{ENV_PREFIX}DEFAULT_CHAIN" in env:
        config.default_chain = _chain_id(env[f"{ENV_PREFIX}DEFAULT_CHAIN"], "PROXYLENS_DEFAULT_CHAIN")
    if f"{ENV_PREFIX}TIMEOUT" in env:
        config.timeout = _number(env[f"{ENV_PREFIX}TIMEOUT"], "PROXYLENS_TIMEOUT", float)
    if f"{ENV_PREFIX}RETRIES" in env:
        config.retries = _number(env[f"{ENV_PREFIX}RETRIES"], "PROXYLENS_RETRIES", int)
    if f"{ENV_PREFIX}BACKOFF_SECONDS" in env:
        config.backoff_seconds = _number(
            env[f"{ENV_PREFIX}BACKOFF_SECONDS"], "PROXYLENS_BACKOFF_SECONDS", float
        )

    url_prefix = f"{ENV_PREFIX}RPC_URL_"
    for key, value in env.items():
        if key.startswith(url_prefix) and value.strip():
            config.rpc_urls[_chain_id(key[len(url_prefix):], key)] = value.strip()
    # Plain PROXYLENS_RPC_URL applies to the default chain
    if env.get(f"{ENV_PREFIX}RPC_URL", "").strip():
        config.rpc_urls[config.default_chain] = env[f"{ENV_PREFIX}RPC_URL"].strip()

    extra = env.get(f"{ENV_PREFIX}KNOWN_NON_PROXIES", "")
    addresses = [item.strip() for item in extra.split(",") if item.strip()]
    try:
        config.known_non_proxies.update(addresses)
    except ValueError as e:
        raise ConfigError(f"PROXYLENS_KNOWN_NON_PROXIES: {e}") from e


def load_config(
    path: Path | str | None = None, env: Mapping[str, str] | None = None
) -> ProxyLensConfig:
    """Load configuration from a TOML file and the environment.

    Args:
        path: Config file; falls back to PROXYLENS_CONFIG when not given
        env: Environment mapping, os.environ by default

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the file is missing or a value is invalid
    """
    env = os.environ if env is None else env
    config = ProxyLensConfig()

    file_path = path or env.get(f"{ENV_PREFIX}CONFIG")
    if file_path:
        config_file = Path(file_path)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")
        try:
            data = tomllib.loads(config_file.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_file}: {e}") from e
        _apply_file(config, data)

    _apply_env(config, env)
    return config
