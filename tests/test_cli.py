"""Tests for the command line interface."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import BEACON, IMPL, PROXY, FakeAccessor, word
from proxylens.cli import cli
from proxylens.constants import EIP1967_BEACON_SLOT, EIP1967_IMPLEMENTATION_SLOT
from proxylens.errors import TransportError

NON_PROXY = "0x9999999999999999999999999999999999999999"


def fake_client(accessor: FakeAccessor) -> type:
    """Build an RPCClient replacement that hands out the fake accessor."""

    class _Client:
        instances: list["_Client"] = []

        def __init__(self, rpc_url: str, **kwargs: Any) -> None:
            self.rpc_url = rpc_url
            self.kwargs = kwargs
            _Client.instances.append(self)

        async def __aenter__(self) -> FakeAccessor:
            return accessor

        async def __aexit__(self, *exc_info: Any) -> None:
            return None

    return _Client


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestResolveCommand:
    """Tests for `proxylens resolve`."""

    def test_json_output(self, runner: CliRunner, accessor: FakeAccessor) -> None:
        accessor.set_slot(PROXY, EIP1967_IMPLEMENTATION_SLOT, word(IMPL))
        client = fake_client(accessor)

        with patch("proxylens.cli.RPCClient", client):
            result = runner.invoke(
                cli, ["resolve", PROXY, NON_PROXY, "--rpc", "https://rpc.example", "-o", "json"]
            )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data[0]["address"] == PROXY
        assert data[0]["implementation"] == IMPL
        assert data[0]["strategy"] == "storage_slot"
        assert data[0]["source"] == "EIP1967_IMPL"
        assert data[0]["chain_id"] == 1
        assert data[1]["implementation"] is None
        assert data[1]["strategy"] == "none"
        assert client.instances[0].rpc_url == "https://rpc.example"

    def test_beacon_in_json_output(self, runner: CliRunner, accessor: FakeAccessor) -> None:
        accessor.set_slot(PROXY, EIP1967_BEACON_SLOT, word(BEACON))
        accessor.set_call(BEACON, "implementation", IMPL)

        with patch("proxylens.cli.RPCClient", fake_client(accessor)):
            result = runner.invoke(
                cli, ["resolve", PROXY, "--rpc", "https://rpc.example", "-o", "json"]
            )

        data = json.loads(result.stdout)
        assert data[0]["implementation"] == IMPL
        assert data[0]["beacon"] == BEACON

    def test_console_output(self, runner: CliRunner, accessor: FakeAccessor) -> None:
        accessor.set_call(PROXY, "masterCopy", IMPL)

        with patch("proxylens.cli.RPCClient", fake_client(accessor)):
            result = runner.invoke(cli, ["resolve", PROXY, "--rpc", "https://rpc.example"])

        assert result.exit_code == 0, result.output
        assert "Proxy resolution on Ethereum" in result.stdout

    def test_rpc_from_config(
        self, runner: CliRunner, accessor: FakeAccessor, tmp_path: Path
    ) -> None:
        """Test the endpoint is taken from the config file for the chosen chain."""
        config = tmp_path / "proxylens.toml"
        config.write_text('[rpc_urls]\n8453 = "https://base.example"\n')
        client = fake_client(accessor)

        with patch("proxylens.cli.RPCClient", client):
            result = runner.invoke(
                cli,
                ["resolve", PROXY, "--chain", "base", "--config", str(config), "-o", "json"],
            )

        assert result.exit_code == 0, result.output
        assert client.instances[0].rpc_url == "https://base.example"
        assert json.loads(result.stdout)[0]["chain_id"] == 8453

    def test_missing_rpc(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["resolve", PROXY])

        assert result.exit_code == 2
        assert "No RPC endpoint" in result.output

    def test_invalid_address(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["resolve", "0x1234", "--rpc", "https://rpc.example"])

        assert result.exit_code == 1
        assert "Invalid address" in result.stdout

    def test_unknown_chain(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["resolve", PROXY, "--chain", "narnia", "--rpc", "https://x"])

        assert result.exit_code == 1
        assert "Unsupported chain" in result.stdout

    def test_transport_error(self, runner: CliRunner, accessor: FakeAccessor) -> None:
        """Test transport failures are reported and exit non-zero."""
        accessor.errors[("multicall",)] = TransportError("connection refused")

        with patch("proxylens.cli.RPCClient", fake_client(accessor)):
            result = runner.invoke(cli, ["resolve", PROXY, "--rpc", "https://rpc.example"])

        assert result.exit_code == 1
        assert "connection refused" in result.stdout


class TestListCommands:
    """Tests for `proxylens chains` and `proxylens known`."""

    def test_chains(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["chains"])

        assert result.exit_code == 0
        assert "8453" in result.stdout
        assert "Supported chains" in result.stdout

    def test_known(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "proxylens.toml"
        config.write_text(f'[[known_non_proxies]]\naddress = "{NON_PROXY}"\n')

        result = runner.invoke(cli, ["known", "--config", str(config)])

        assert result.exit_code == 0
        assert "Known non-proxies (9)" in result.stdout

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
