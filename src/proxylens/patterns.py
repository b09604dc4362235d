"""Bytecode templates of minimal proxies and clones.

Each pattern embeds the implementation address as its only capture group.
Templates follow https://banteg.xyz/posts/minimal-proxies/.
"""

import re
from typing import Optional

from proxylens.models.core import Address

BYTECODE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "Minimal",  # ERC-1167
        re.compile(r"^0x363d3d373d3d3d363d73([0-9a-f]{40})5af43d82803e903d91602b57fd5bf3$"),
    ),
    (
        "0age",
        re.compile(r"^0x3d3d3d3d363d3d37363d73([0-9a-f]{40})5af43d3d93803e602a57fd5bf3$"),
    ),
    (
        "Clones",
        re.compile(
            r"^0x36603057343d52307f830d2d700a97af574b186c80d40429385d24241565b08a7c559ba283a964d9b1"
            r"60203da23d3df35b3d3d3d3d363d3d37363d73([0-9a-f]{40})5af43d3d93803e605b57fd5bf3$"
        ),
    ),
    (
        "Vyper",
        re.compile(r"^0x366000600037611000600036600073([0-9a-f]{40})5af4602c57600080fd5b6110006000f3$"),
    ),
    (
        "VyperBeta",
        re.compile(r"^0x366000600037611000600036600073([0-9a-f]{40})5af41558576110006000f3$"),
    ),
    (
        "CWIA",
        re.compile(r"^0x3d3d3d3d363d3d3761.{4}603736393661.{4}013d73([0-9a-f]{40})5af43d3d93803e603557fd5bf3"),
    ),
    (
        "OldCWIA",
        re.compile(r"^0x363d3d3761.{4}603836393d3d3d3661.{4}013d73([0-9a-f]{40})5af43d82803e903d91603657fd5bf3"),
    ),
    (
        "SudoswapCWIA",
        re.compile(r"^0x3d3d3d3d363d3d37605160353639366051013d73([0-9a-f]{40})5af43d3d93803e603357fd5bf3"),
    ),
    (
        "SoladyCWIA",
        re.compile(
            r"36602c57343d527f9e4ac34f21c619cefc926c8bd93b54bf5a39c7ab2127a895af1cc0691d7e3dff593da1005b"
            r"363d3d373d3d3d3d61.{4}806062363936013d73([0-9a-f]{40})5af43d3d93803e606057fd5bf3"
        ),
    ),
    (
        "SplitsCWIA",
        re.compile(
            r"36602f57343d527f9e4ac34f21c619cefc926c8bd93b54bf5a39c7ab2127a895af1cc0691d7e3dff60203da1"
            r"3d3df35b3d3d3d3d363d3d3761.{4}606736393661.{4}013d73([0-9a-f]{40})5af43d3d93803e606557fd5bf3"
        ),
    ),
    (
        "SoladyPush0",
        re.compile(r"^0x5f5f365f5f37365f73([0-9a-f]{40})5af43d5f5f3e6029573d5ffd5b3d5ff3$"),
    ),
)


def match_bytecode(bytecode: Optional[str]) -> Optional[tuple[str, Address]]:
    """Find the first known proxy template matching the bytecode.

    Args:
        bytecode: Deployed bytecode (hex string, any case)

    Returns:
        (pattern name, embedded address) or None if no template matches
    """
    if not bytecode or bytecode == "0x":
        return None

    code = bytecode.lower()
    if not code.startswith("0x"):
        code = "0x" + code

    for name, pattern in BYTECODE_PATTERNS:
        match = pattern.search(code)
        if match:
            return name, Address("0x" + match.group(1))
    return None
