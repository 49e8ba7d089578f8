"""Shared pytest fixtures for pqmctl tests."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Generator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from fakes import CONTRACT_HEX, DEFAULT_SENDER, TOKEN_ABI, FakeContract

from pqmctl.services.telemetry import _current_span, disable_telemetry


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """AppContext configures logging and telemetry process-wide; undo it."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pqm = logging.getLogger("pqmctl")
    pqm_level = pqm.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pqm.setLevel(pqm_level)
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def descriptor_data() -> dict[str, Any]:
    """A solar.development.json payload with the token contract deployed."""
    return {
        "contracts": {
            "TokenPQM.sol": {
                "name": "TokenPQM",
                "deployName": "TokenPQM.sol",
                "address": CONTRACT_HEX,
                "txid": "ab" * 32,
                "abi": TOKEN_ABI,
                "bin": "6060",
                "binhash": "00" * 32,
                "createdAt": "2018-04-02T10:00:00.000Z",
                "confirmed": True,
                "sender": DEFAULT_SENDER,
                "senderHex": "01" * 20,
            }
        },
        "libraries": {},
        "related": {},
    }


@pytest.fixture
def descriptor_file(tmp_path: Path, descriptor_data: dict[str, Any]) -> Path:
    path = tmp_path / "solar.development.json"
    path.write_text(json.dumps(descriptor_data), encoding="utf-8")
    return path


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp dir with no pqmctl config or env overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PQMCTL_CONFIG", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.setenv("PQMCTL_CONFIRM__POLL_INTERVAL", "0")


@pytest.fixture
def fake_contract(monkeypatch: pytest.MonkeyPatch, _isolated_cwd: None) -> FakeContract:
    """Route every CLI command to an in-memory contract.

    ``fake_contract.opened`` counts how often a connection was requested.
    """
    contract = FakeContract()

    @asynccontextmanager
    async def _open(settings: Any) -> AsyncIterator[FakeContract]:
        contract.opened += 1
        contract.settings = settings
        yield contract

    monkeypatch.setattr("pqmctl.commands._context.open_contract", _open)
    return contract
