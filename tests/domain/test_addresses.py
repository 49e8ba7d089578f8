"""Tests for Qtum address parsing and base58check."""

from __future__ import annotations

import pytest
from fakes import make_address

from pqmctl.domain.addresses import (
    AddressError,
    QtumAddress,
    b58decode,
    b58encode,
    decode_base58check,
    encode_base58check,
    from_hex160,
    parse_address,
    parse_base58_address,
    parse_hex_address,
)


class TestBase58:
    def test_leading_zero_bytes_become_ones(self) -> None:
        assert b58encode(b"\x00\x00\x01") == "112"
        assert b58decode("112") == b"\x00\x00\x01"

    def test_all_zero_payload(self) -> None:
        assert decode_base58check("1111111111111111111114oLvT2") == bytes(21)

    def test_checksum_is_verified(self) -> None:
        text = encode_base58check(bytes([0x78]) + bytes(20))
        corrupted = text[:-1] + ("2" if text[-1] != "2" else "3")
        with pytest.raises(AddressError, match="checksum"):
            decode_base58check(corrupted)

    @pytest.mark.parametrize("text", ["0OIl", "abc!"])
    def test_foreign_characters(self, text: str) -> None:
        with pytest.raises(AddressError, match="Invalid base58 character"):
            b58decode(text)


class TestParse:
    def test_base58_testnet(self) -> None:
        text = make_address(0x42)
        address = parse_base58_address(text)
        assert address.hex160 == "42" * 20
        assert address.base58 == text
        assert address.network == "testnet"
        assert str(address) == text

    def test_base58_mainnet(self) -> None:
        address = parse_base58_address(make_address(7, version=0x3A))
        assert address.network == "mainnet"

    def test_unknown_version_byte(self) -> None:
        with pytest.raises(AddressError, match="version byte 0x00"):
            parse_base58_address(make_address(7, version=0x00))

    def test_wrong_length(self) -> None:
        with pytest.raises(AddressError, match="20-byte"):
            parse_base58_address(encode_base58check(bytes([0x78]) + bytes(19)))

    def test_empty(self) -> None:
        with pytest.raises(AddressError, match="empty"):
            parse_base58_address("  ")

    @pytest.mark.parametrize("prefix", ["", "0x"])
    def test_hex(self, prefix: str) -> None:
        address = parse_hex_address(prefix + "AB" * 20)
        assert address == QtumAddress(hex160="ab" * 20)
        assert address.raw == bytes.fromhex("ab" * 20)
        assert address.network is None
        assert str(address) == "ab" * 20

    def test_hex_wrong_length(self) -> None:
        with pytest.raises(AddressError, match="40-digit"):
            parse_hex_address("ab" * 19)

    def test_parse_address_accepts_both(self) -> None:
        assert parse_address("cd" * 20).base58 is None
        assert parse_address(make_address(3)).base58 is not None


def test_from_hex160_round_trips_to_base58() -> None:
    address = from_hex160("0x" + "42" * 20, version=0x78)
    assert address.base58 == make_address(0x42)
    assert from_hex160("42" * 20).base58 is None
