"""Tests for core value types and ABI helpers."""

import pytest
from eth_abi.exceptions import DecodingError, EncodingError

from proxylens.chain.abi import decode_output, encode_call
from proxylens.constants import IMPLEMENTATION_FUNCTION, MASTER_COPY_FUNCTION
from proxylens.models.core import (
    address_to_slot,
    is_address,
    normalize_address,
    word_to_address,
)
from proxylens.models.resolution import AbiFunction

ADDRESS = "0xa1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2"


class TestAddresses:
    """Tests for address normalization."""

    def test_normalize_lowercases(self) -> None:
        assert normalize_address(ADDRESS.upper().replace("0X", "0x")) == ADDRESS

    def test_normalize_strips_whitespace(self) -> None:
        assert normalize_address(f"  {ADDRESS}\n") == ADDRESS

    @pytest.mark.parametrize("value", ["", "0x1234", ADDRESS[2:], ADDRESS + "00", "0x" + "g" * 40])
    def test_normalize_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError):
            normalize_address(value)

    def test_is_address(self) -> None:
        assert is_address(ADDRESS)
        assert not is_address("0xabc")

    def test_address_to_slot(self) -> None:
        """Test an address is left-padded to a 32-byte slot."""
        assert address_to_slot(ADDRESS) == "0x" + "0" * 24 + ADDRESS[2:]


class TestWordToAddress:
    """Tests for interpreting storage words as addresses."""

    def test_valid_word(self) -> None:
        assert word_to_address("0x" + "0" * 24 + ADDRESS[2:]) == ADDRESS

    def test_upper_case_word(self) -> None:
        assert word_to_address("0x" + "0" * 24 + ADDRESS[2:].upper()) == ADDRESS

    def test_trimmed_word_is_padded(self) -> None:
        """Test nodes that drop leading zeros are handled."""
        assert word_to_address("0x" + ADDRESS[2:]) == ADDRESS

    @pytest.mark.parametrize("value", [None, "", "0x", "0x0", "0x" + "0" * 64])
    def test_zero_or_empty(self, value: str | None) -> None:
        assert word_to_address(value) is None

    def test_dirty_high_bytes(self) -> None:
        """Test words that are not addresses are rejected."""
        assert word_to_address("0x" + "0" * 23 + "1" + ADDRESS[2:]) is None

    def test_too_long(self) -> None:
        assert word_to_address("0x" + "0" * 66) is None

    def test_not_hex(self) -> None:
        assert word_to_address("0x" + "z" * 64) is None


class TestAbi:
    """Tests for calldata encoding and return data decoding."""

    def test_selectors(self) -> None:
        assert encode_call(IMPLEMENTATION_FUNCTION) == "0x5c60da1b"
        assert encode_call(MASTER_COPY_FUNCTION) == "0xa619486e"

    def test_encode_arguments(self) -> None:
        function = AbiFunction(name="getProxyImplementation", selector="0x204e1c7a", inputs=("address",))

        data = encode_call(function, (ADDRESS,))

        assert data == "0x204e1c7a" + "0" * 24 + ADDRESS[2:]
        assert function.signature == "getProxyImplementation(address)"

    def test_encode_argument_count_mismatch(self) -> None:
        with pytest.raises(ValueError, match="takes 0 arguments"):
            encode_call(IMPLEMENTATION_FUNCTION, (ADDRESS,))

    def test_encode_unsupported_argument(self) -> None:
        function = AbiFunction(name="getProxyImplementation", selector="0x204e1c7a", inputs=("address",))

        with pytest.raises(EncodingError):
            encode_call(function, ("not an address",))

    def test_decode_address(self) -> None:
        data = "0x" + "0" * 24 + ADDRESS[2:].upper()

        assert decode_output(IMPLEMENTATION_FUNCTION, data) == ADDRESS

    def test_decode_zero_address(self) -> None:
        assert decode_output(IMPLEMENTATION_FUNCTION, "0x" + "0" * 64) == "0x" + "0" * 40

    @pytest.mark.parametrize("data", [None, "0x"])
    def test_decode_empty_data(self, data: str | None) -> None:
        """Test empty return data (e.g. calls to accounts without code) fails."""
        with pytest.raises(ValueError, match="returned no data"):
            decode_output(IMPLEMENTATION_FUNCTION, data)

    def test_decode_short_word(self) -> None:
        with pytest.raises(DecodingError):
            decode_output(IMPLEMENTATION_FUNCTION, "0x1234")

    def test_decode_dirty_padding(self) -> None:
        """Test a word whose high 12 bytes are not zero is not an address."""
        with pytest.raises(DecodingError):
            decode_output(IMPLEMENTATION_FUNCTION, "0x" + "ff" * 12 + "ab" * 20)

    def test_decode_non_hex(self) -> None:
        with pytest.raises(ValueError):
            decode_output(IMPLEMENTATION_FUNCTION, "0x" + "zz" * 32)
