"""Qtum address encodings.

Contract ``address`` parameters are 20-byte hash160 values. On the command
line they are written either as base58check strings (``qUbx...``) or as
40-digit hex. Sender addresses handed to the node wallet must be base58check.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {ch: i for i, ch in enumerate(_B58_ALPHABET)}
_HEX160_RE = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")

# Known Qtum version bytes (P2PKH and P2SH for each network).
VERSION_BYTES: dict[int, str] = {
    0x3A: "mainnet",
    0x32: "mainnet",
    0x78: "testnet",
    0x6E: "testnet",
}


class AddressError(ValueError):
    """Raised when a string is not a valid address in the expected encoding."""


@dataclass(frozen=True)
class QtumAddress:
    """A validated address.

    ``hex160`` is always present (40 lowercase hex digits, no prefix).
    ``base58`` and ``version`` are only known when the address was given,
    or can be rebuilt, in base58check form.
    """

    hex160: str
    base58: str | None = None
    version: int | None = None

    @property
    def raw(self) -> bytes:
        return bytes.fromhex(self.hex160)

    @property
    def network(self) -> str | None:
        if self.version is None:
            return None
        return VERSION_BYTES.get(self.version)

    def __str__(self) -> str:
        return self.base58 or self.hex160


def _checksum(payload: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:4]


def b58encode(data: bytes) -> str:
    """Encode bytes with the Bitcoin base58 alphabet."""
    num = int.from_bytes(data, "big")
    chars: list[str] = []
    while num > 0:
        num, rem = divmod(num, 58)
        chars.append(_B58_ALPHABET[rem])
    pad = len(data) - len(data.lstrip(b"\x00"))
    return "1" * pad + "".join(reversed(chars))


def b58decode(text: str) -> bytes:
    """Decode a base58 string. Raises AddressError on foreign characters."""
    num = 0
    for ch in text:
        try:
            num = num * 58 + _B58_INDEX[ch]
        except KeyError:
            raise AddressError(f"Invalid base58 character {ch!r} in {text!r}") from None
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    pad = len(text) - len(text.lstrip("1"))
    return b"\x00" * pad + body


def encode_base58check(payload: bytes) -> str:
    return b58encode(payload + _checksum(payload))


def decode_base58check(text: str) -> bytes:
    """Decode and verify a base58check string, returning the payload."""
    raw = b58decode(text)
    if len(raw) < 5:
        raise AddressError(f"Too short for base58check: {text!r}")
    payload, checksum = raw[:-4], raw[-4:]
    if _checksum(payload) != checksum:
        raise AddressError(f"Bad base58check checksum: {text!r}")
    return payload


def parse_base58_address(text: str) -> QtumAddress:
    """Parse a base58check Qtum address (version byte + 20-byte hash160)."""
    text = text.strip()
    if not text:
        raise AddressError("Address is empty")
    payload = decode_base58check(text)
    if len(payload) != 21:
        raise AddressError(f"Not a 20-byte address: {text!r}")
    version = payload[0]
    if version not in VERSION_BYTES:
        raise AddressError(f"Unknown address version byte 0x{version:02x}: {text!r}")
    return QtumAddress(hex160=payload[1:].hex(), base58=text, version=version)


def parse_hex_address(text: str) -> QtumAddress:
    """Parse a 40-digit hex hash160, with or without ``0x``."""
    text = text.strip()
    if not _HEX160_RE.match(text):
        raise AddressError(f"Not a 40-digit hex address: {text!r}")
    return QtumAddress(hex160=text.removeprefix("0x").removeprefix("0X").lower())


def parse_address(text: str) -> QtumAddress:
    """Parse either encoding. Hex is tried first since it is unambiguous."""
    if _HEX160_RE.match(text.strip()):
        return parse_hex_address(text)
    return parse_base58_address(text)


def from_hex160(hex160: str, version: int | None = None) -> QtumAddress:
    """Build an address from a decoded hash160, adding base58 when *version* is known."""
    hex160 = hex160.removeprefix("0x").lower()
    if version is None:
        return QtumAddress(hex160=hex160)
    base58 = encode_base58check(bytes([version]) + bytes.fromhex(hex160))
    return QtumAddress(hex160=hex160, base58=base58, version=version)
