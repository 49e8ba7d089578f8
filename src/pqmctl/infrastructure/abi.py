"""Solidity ABI codec for contract calls.

Qtum contracts use the Ethereum ABI unchanged, so encoding is delegated to
``eth_abi``. This module adds the pieces around it: locating a function in
the descriptor's ABI, coercing CLI-level values (``QtumAddress``, ints, hex
strings) to what ``eth_abi`` expects, and turning decoded outputs into plain
JSON-friendly values (addresses and bytes become hex strings).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector

from pqmctl.domain.addresses import AddressError, QtumAddress, parse_address

_ARRAY_RE = re.compile(r"^(?P<base>.+)\[(?P<size>\d*)\]$")
_FIXED_BYTES_RE = re.compile(r"^bytes(?P<size>\d+)$")


class AbiError(ValueError):
    """A function or argument does not fit the contract's ABI."""


def canonical_type(param: dict[str, Any]) -> str:
    """Canonical type string for an ABI param, expanding tuple components."""
    abi_type = str(param["type"])
    if abi_type.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple') :]}"
    return abi_type


@dataclass(frozen=True)
class AbiFunction:
    """A callable function entry from a contract ABI."""

    name: str
    input_types: tuple[str, ...]
    input_names: tuple[str, ...]
    output_types: tuple[str, ...]
    payable: bool = False
    constant: bool = False

    @classmethod
    def from_entry(cls, entry: dict[str, Any]) -> AbiFunction:
        inputs = entry.get("inputs", [])
        outputs = entry.get("outputs", [])
        mutability = entry.get("stateMutability", "")
        return cls(
            name=str(entry["name"]),
            input_types=tuple(canonical_type(p) for p in inputs),
            input_names=tuple(str(p.get("name", "")) for p in inputs),
            output_types=tuple(canonical_type(p) for p in outputs),
            payable=bool(entry.get("payable")) or mutability == "payable",
            constant=bool(entry.get("constant")) or mutability in ("view", "pure"),
        )

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode_call(self, args: list[Any] | tuple[Any, ...]) -> str:
        """Return the hex call data (selector + encoded args), no ``0x``."""
        if len(args) != len(self.input_types):
            raise AbiError(
                f"{self.signature} takes {len(self.input_types)} argument(s), got {len(args)}"
            )
        coerced = [coerce_arg(t, v) for t, v in zip(self.input_types, args, strict=True)]
        return (self.selector + encode(list(self.input_types), coerced)).hex()

    def decode_output(self, output_hex: str) -> list[Any]:
        """Decode the hex return data of a call into plain Python values."""
        if not self.output_types:
            return []
        data = bytes.fromhex(output_hex.removeprefix("0x"))
        if not data:
            raise AbiError(f"{self.signature} returned no data")
        values = decode(list(self.output_types), data)
        return [normalize_output(t, v) for t, v in zip(self.output_types, values, strict=True)]


def find_function(
    abi: list[dict[str, Any]], name: str, arg_count: int | None = None
) -> AbiFunction:
    """Locate function *name*; overloads are disambiguated by *arg_count*."""
    candidates = [
        AbiFunction.from_entry(entry)
        for entry in abi
        if entry.get("type", "function") == "function" and entry.get("name") == name
    ]
    if not candidates:
        raise AbiError(f"Contract ABI has no function {name!r}")
    if arg_count is not None:
        matching = [fn for fn in candidates if len(fn.input_types) == arg_count]
        if matching:
            return matching[0]
        arities = ", ".join(str(len(fn.input_types)) for fn in candidates)
        raise AbiError(f"{name} takes {arities} argument(s), got {arg_count}")
    return candidates[0]


def _hex_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    text = str(value).removeprefix("0x").removeprefix("0X")
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise AbiError(f"Expected hex data, got {value!r}") from None


def coerce_arg(abi_type: str, value: Any) -> Any:
    """Convert a CLI-level value to the Python type eth_abi encodes for *abi_type*."""
    array = _ARRAY_RE.match(abi_type)
    if array:
        if not isinstance(value, (list, tuple)):
            raise AbiError(f"Expected a list for {abi_type}, got {value!r}")
        return [coerce_arg(array.group("base"), item) for item in value]

    if abi_type == "address":
        if isinstance(value, QtumAddress):
            return value.raw
        try:
            return parse_address(str(value)).raw
        except AddressError as exc:
            raise AbiError(str(exc)) from exc

    if abi_type.startswith(("uint", "int")):
        if isinstance(value, bool):
            raise AbiError(f"Expected an integer for {abi_type}, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise AbiError(f"Expected an integer for {abi_type}, got {value!r}") from None

    if abi_type == "bool":
        if isinstance(value, str):
            lowered = value.lower()
            if lowered not in ("true", "false", "1", "0"):
                raise AbiError(f"Expected a boolean, got {value!r}")
            return lowered in ("true", "1")
        return bool(value)

    if abi_type == "string":
        return str(value)

    fixed = _FIXED_BYTES_RE.match(abi_type)
    if fixed:
        size = int(fixed.group("size"))
        if isinstance(value, QtumAddress):
            data = value.raw
        else:
            data = _hex_bytes(value)
        if len(data) > size:
            raise AbiError(f"{abi_type} holds {size} bytes, got {len(data)}")
        return data.ljust(size, b"\x00")

    if abi_type == "bytes":
        return _hex_bytes(value)

    # Tuples and anything exotic pass through for eth_abi to validate.
    return value


def normalize_output(abi_type: str, value: Any) -> Any:
    """Make a decoded value JSON-friendly."""
    if isinstance(value, (list, tuple)):
        array = _ARRAY_RE.match(abi_type)
        item_type = array.group("base") if array else ""
        return [normalize_output(item_type, item) for item in value]
    if abi_type == "address" and isinstance(value, str):
        return value.removeprefix("0x").lower()
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return value
