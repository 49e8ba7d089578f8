"""Tests for the redeem request commands."""

from __future__ import annotations

import json

from click.testing import CliRunner
from fakes import FakeContract, called_methods, make_address, sent_methods

from pqmctl.cli import cli

OWNER = make_address(0x0E)


class TestRequestReads:
    def test_num_requests(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["getNumReqs"])
        assert result.exit_code == 0, result.output
        assert "count: 2" in result.output

    def test_total_requests(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["getTotQReqs"])
        assert result.exit_code == 0, result.output
        assert "total: 3.00000000" in result.output
        assert called_methods(fake_contract) == ["getTotReqs"]

    def test_single_request(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "getSingleRequest", "3"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"] == {
            "index": 3,
            "address": f"{3:040x}",
            "amount": "3.00000000",
        }

    def test_all_requests_table(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["getAllRequests"])
        assert result.exit_code == 0, result.output
        assert "Address" in result.output
        assert f"{1:040x}" in result.output
        assert "2 requests, total 3.00000000" in result.output

    def test_no_requests(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        fake_contract.values["getNumReqs"] = [0]
        fake_contract.values["getTotReqs"] = [0]
        result = cli_runner.invoke(cli, ["getAllRequests"])
        assert result.exit_code == 0, result.output
        assert "0 requests, total 0.00000000" in result.output
        assert "getSingleRedeemReq" not in called_methods(fake_contract)


class TestRequestAdministration:
    def test_refill(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["refill", OWNER])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent[0][:3] == ("refillReqs", [], OWNER)
        assert "status: confirmed" in result.output
        assert "gas_used: 51234" in result.output

    def test_reset_all(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "resetOwnerVars"])
        assert result.exit_code == 0, result.output
        assert sent_methods(fake_contract) == ["resetAllReqs"]
        data = json.loads(result.stdout)["data"]
        assert (data["count"], data["total"]) == (2, "3.00000000")

    def test_reset_single(self, cli_runner: CliRunner, fake_contract: FakeContract) -> None:
        result = cli_runner.invoke(cli, ["--json", "resetOwnerSigleVars", "4", OWNER])
        assert result.exit_code == 0, result.output
        assert fake_contract.sent[0][:3] == ("resetSingleReq", [4], OWNER)
        assert json.loads(result.stdout)["data"]["index"] == 4

    def test_reset_without_waiting_skips_read_back(
        self, cli_runner: CliRunner, fake_contract: FakeContract
    ) -> None:
        result = cli_runner.invoke(cli, ["--json", "--no-wait", "resetOwnerVars"])
        assert result.exit_code == 0, result.output
        assert fake_contract.calls == []
        assert "count" not in json.loads(result.stdout)["data"]
