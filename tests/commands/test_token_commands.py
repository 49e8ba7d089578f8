"""Tests for the token commands: info, buy, balances, mint, sendBack, transfers."""

from __future__ import annotations

import json
from decimal import Decimal

from click.testing import CliRunner
from fakes import DEFAULT_SENDER, FakeContract, called_methods, make_address, sent_methods

from pqmctl.cli import cli

ALICE = make_address(0xA1)
BOB = make_address(0xB0)


def _data(result) -> dict:
    return json.loads(result.stdout)["data"]


class TestInfoCommand:
    def test_human_output(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["info"])
        assert result.exit_code == 0, result.output
        assert "PQM Token (PQM)" in result.output
        assert "exchange rate: 100" in result.output
        assert "2 requests, total 3.00000000" in result.output
        assert fake_contract.opened == 1

    def test_sender_used_for_every_call(
        self, cli_runner: CliRunner, fake_contract: FakeContract
    ) -> None:
        result = cli_runner.invoke(cli, ["--json", "info", ALICE])
        assert result.exit_code == 0, result.output
        assert {sender for _, _, sender in fake_contract.calls} == {ALICE}
        assert _data(result)["items"][1] == {
            "index": 2,
            "address": f"{2:040x}",
            "amount": "2.00000000",
        }


class TestBuyCommand:
    def test_buy(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "buy", BOB, "2.5", ALICE])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent[0][0] == "buyTokens"
        assert str(fake_contract.sent[0][1][0]) == BOB
        assert fake_contract.sent[0][2:] == (ALICE, Decimal("2.5"))
        data = _data(result)
        assert data["status"] == "confirmed"
        assert data["beneficiary"] == BOB

    def test_buy_for_hex_beneficiary(
        self, cli_runner: CliRunner, fake_contract: FakeContract
    ) -> None:
        result = cli_runner.invoke(cli, ["buy", "ab" * 20, "1"])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent[0][1][0].hex160 == "ab" * 20
        assert fake_contract.sent[0][2] is None

    def test_quiet_prints_txid(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["-q", "buy", BOB, "1"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"{1:064x}"


class TestBalanceCommands:
    def test_balance_of(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["balanceOf", ALICE])
        assert result.exit_code == 0, result.output
        assert "balance: 1.23456789" in result.output
        assert called_methods(fake_contract) == ["balanceOf"]

    def test_token_balance_calls_as_address(
        self, cli_runner: CliRunner, fake_contract: FakeContract
    ) -> None:
        result = cli_runner.invoke(cli, ["--json", "tokenBalance", ALICE])
        assert result.exit_code == 0, result.output
        assert fake_contract.calls == [("findBalance", [], ALICE)]
        assert _data(result)["balance"] == "0.00000005"


class TestTokenTransactions:
    def test_mint(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "mint", "5_000_000_000"])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent[0][:2] == ("mintReservedTokens", [5_000_000_000])
        assert _data(result)["tokens"] == "50.00000000"

    def test_send_back(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["sendBack", ALICE, "100000000"])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent == [("reqRedeemEntry", [100_000_000], ALICE, Decimal(0))]
        assert "tokens: 1.00000000" in result.output

    def test_transfer(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "transferTokens", ALICE, BOB, "25"])
        assert result.exit_code == 0, result.output
        method, args, sender, _ = fake_contract.sent[0]
        assert (method, sender) == ("transfer", ALICE)
        assert [str(args[0]), args[1]] == [BOB, 25]
        assert _data(result)["to"] == BOB

    def test_send_qtum(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "sendQtumFrom", "0.5"])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent == [("feedContract", [], None, Decimal("0.5"))]
        data = _data(result)
        assert data["sender"] == DEFAULT_SENDER
        assert data["amount"] == "0.5"
        assert sent_methods(fake_contract) == ["feedContract"]
