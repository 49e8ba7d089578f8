"""Contract-interface descriptor loading.

The descriptor is the JSON file written by the ``solar`` deployment tool
(``solar.development.json``): a map of deployed contracts keyed by deploy
name, each carrying its hex address, ABI, and the sender that deployed it.
pqmctl only ever reads this file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class DescriptorError(Exception):
    """The descriptor file is missing, malformed, or lacks the contract."""


class DeployedContract(BaseModel):
    """One entry under ``contracts`` in the descriptor."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    name: str
    deploy_name: str = Field(default="", alias="deployName")
    address: str
    abi: list[dict[str, Any]]
    sender: str | None = None
    owner: str | None = None
    txid: str | None = None


class ContractDescriptor(BaseModel):
    """Root of the descriptor file."""

    model_config = ConfigDict(extra="allow", frozen=True)

    contracts: dict[str, DeployedContract] = Field(default_factory=dict)
    libraries: dict[str, DeployedContract] = Field(default_factory=dict)

    def contract(self, name: str) -> DeployedContract:
        """Look a contract up by deploy name (``TokenPQM.sol``) or contract name."""
        if name in self.contracts:
            return self.contracts[name]
        for entry in self.contracts.values():
            if entry.name == name:
                return entry
        known = ", ".join(sorted(self.contracts)) or "none"
        raise DescriptorError(f"Contract {name!r} not found in descriptor (known: {known})")


def load_descriptor(path: Path) -> ContractDescriptor:
    """Read and validate a descriptor file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DescriptorError(f"Contract descriptor not found: {path}") from None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"Invalid JSON in {path}: {exc}") from exc
    try:
        return ContractDescriptor.model_validate(data)
    except ValidationError as exc:
        raise DescriptorError(f"Invalid contract descriptor {path}: {exc}") from exc
