"""Tests for ContractClient against a scripted node."""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
import pytest
from eth_abi import encode
from fakes import CONTRACT_HEX, DEFAULT_SENDER, TOKEN_ABI, make_address

from pqmctl.config.settings import PqmSettings
from pqmctl.domain.addresses import parse_address
from pqmctl.infrastructure.contract import ContractClient, ContractError, open_contract
from pqmctl.infrastructure.descriptor import DeployedContract, DescriptorError


class ScriptedRPC:
    """Answers each RPC method from a canned response and records the calls."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    async def call(self, method: str, *params: Any) -> Any:
        self.calls.append((method, params))
        return self.responses[method]


def _client(responses: dict[str, Any], **kwargs: Any) -> tuple[ContractClient, ScriptedRPC]:
    rpc = ScriptedRPC(responses)
    deployed = DeployedContract(
        name="TokenPQM", address=CONTRACT_HEX, abi=TOKEN_ABI, sender=DEFAULT_SENDER
    )
    return ContractClient(rpc, deployed, **kwargs), rpc  # type: ignore[arg-type]


def _execution(output: bytes, excepted: str = "None") -> dict[str, Any]:
    return {
        "address": CONTRACT_HEX,
        "executionResult": {"gasUsed": 2143, "excepted": excepted, "output": output.hex()},
    }


class TestCall:
    def test_decodes_outputs(self) -> None:
        client, rpc = _client({"callcontract": _execution(encode(["uint256"], [7]))})
        result = asyncio.run(client.call("getNumReqs"))
        assert result.outputs == [7]
        assert result.gas_used == 2143
        method, params = rpc.calls[0]
        assert method == "callcontract"
        assert params[0] == CONTRACT_HEX
        assert params[2] == DEFAULT_SENDER

    def test_explicit_sender_wins(self) -> None:
        client, rpc = _client({"callcontract": _execution(encode(["uint256"], [0]))})
        other = make_address(9)
        asyncio.run(client.value("findBalance", sender=other))
        assert rpc.calls[0][1][2] == other

    def test_excepted_execution_raises(self) -> None:
        client, _ = _client({"callcontract": _execution(b"", excepted="Revert")})
        with pytest.raises(ContractError, match="getNumReqs\\(\\) failed: Revert"):
            asyncio.run(client.call("getNumReqs"))

    def test_unknown_method_never_reaches_the_node(self) -> None:
        client, rpc = _client({})
        with pytest.raises(ContractError, match="no function 'selfDestruct'"):
            asyncio.run(client.call("selfDestruct"))
        assert rpc.calls == []


class TestSend:
    def test_params(self) -> None:
        client, rpc = _client(
            {
                "sendtocontract": {
                    "txid": "ef" * 32,
                    "sender": DEFAULT_SENDER,
                    "hash160": "01" * 20,
                }
            },
            gas_limit=250_000,
            gas_price=Decimal("0.0000005"),
        )
        beneficiary = parse_address(make_address(2))
        handle = asyncio.run(client.send("buyTokens", [beneficiary], amount=Decimal("1.5")))
        assert handle.txid == "ef" * 32
        assert handle.method == "buyTokens"
        method, params = rpc.calls[0]
        assert method == "sendtocontract"
        assert params[0] == CONTRACT_HEX
        assert params[1].endswith("02" * 20)
        assert params[2:] == ("1.5", 250_000, "0.0000005", DEFAULT_SENDER)

    def test_zero_amount(self) -> None:
        client, rpc = _client({"sendtocontract": {"txid": "ef" * 32}})
        handle = asyncio.run(client.send("refillReqs"))
        assert rpc.calls[0][1][2] == "0"
        assert handle.sender == DEFAULT_SENDER


class TestConfirmations:
    def test_count(self) -> None:
        client, rpc = _client({"gettransaction": {"confirmations": 4, "txid": "ab"}})
        assert asyncio.run(client.get_confirmations("ab")) == 4
        assert rpc.calls == [("gettransaction", ("ab",))]

    def test_conflicted_is_an_error(self) -> None:
        client, _ = _client({"gettransaction": {"confirmations": -1}})
        with pytest.raises(ContractError, match="ab is conflicted"):
            asyncio.run(client.get_confirmations("ab"))

    def test_receipt(self) -> None:
        client, _ = _client({"gettransactionreceipt": [{"gasUsed": 99, "excepted": "None"}]})
        assert asyncio.run(client.receipt("ab")) == {"gasUsed": 99, "excepted": "None"}

    def test_receipt_not_mined(self) -> None:
        client, _ = _client({"gettransactionreceipt": []})
        assert asyncio.run(client.receipt("ab")) is None


@pytest.mark.usefixtures("_isolated_cwd")
class TestOpenContract:
    def test_bad_descriptor_fails_before_connecting(self, tmp_path: Path) -> None:
        settings = PqmSettings.from_cli(
            base_dir=tmp_path, overrides={"rpc": {"url": "http://127.0.0.1:1"}}
        )

        async def go() -> None:
            async with open_contract(settings):
                pass

        with pytest.raises(DescriptorError, match="not found"):
            asyncio.run(go())

    def test_yields_configured_client(
        self, tmp_path: Path, descriptor_data: dict[str, Any]
    ) -> None:
        (tmp_path / "solar.development.json").write_text(json.dumps(descriptor_data))
        settings = PqmSettings.from_cli(
            base_dir=tmp_path, overrides={"transaction": {"gas_limit": 300_000}}
        )

        async def go() -> ContractClient:
            async with open_contract(settings) as client:
                assert isinstance(client.rpc._client, httpx.AsyncClient)
                return client

        client = asyncio.run(go())
        assert client.address == CONTRACT_HEX
        assert client.gas_limit == 300_000
        assert client.default_sender == DEFAULT_SENDER
        assert client.rpc._client.is_closed
