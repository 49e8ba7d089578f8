"""TokenService — one operation per CLI subcommand of the PQM token contract.

Read operations go through ``callcontract`` and format token amounts with
the configured decimals. Write operations broadcast a transaction, wait for
confirmations, and report the txid, confirmation count and gas used; a few
then read back the state they changed.

Arguments arrive already validated (``QtumAddress``, positive ints,
positive ``Decimal`` QTUM amounts); nothing here parses user input.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pqmctl.domain.addresses import QtumAddress
from pqmctl.domain.amounts import QTUM_DECIMALS, format_token_amount
from pqmctl.services.base import BaseService, remote_operation, run_all
from pqmctl.services.result import ServiceResult
from pqmctl.services.telemetry import traced

# Getters shown by ``info``: (result key, contract method, is a token amount)
_INFO_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("name", "getName", False),
    ("symbol", "getSymbol", False),
    ("exchange_rate", "getExchangeRate", False),
    ("total_supply", "totalSupply", True),
    ("tokens_sold", "getTokenSold", True),
    ("min_purchase", "getMinPurchase", True),
    ("min_redeem", "getMinRedeem", True),
    ("max_requests", "getMaxReqs", False),
)


def _sender(address: QtumAddress | None) -> str | None:
    return str(address) if address is not None else None


class TokenService(BaseService):
    """Operations on the PQM token contract."""

    def _amount(self, value: Any) -> str:
        return format_token_amount(int(value), self._decimals)

    # ------------------------------------------------------------------
    # Overview and redeem requests
    # ------------------------------------------------------------------

    @traced
    @remote_operation("info")
    async def info(self, sender: QtumAddress | None = None) -> ServiceResult:
        """Token metadata, limits, and the pending redeem requests."""
        from_addr = _sender(sender)
        values = await run_all(
            *(self._value(method, sender=from_addr) for _, method, _ in _INFO_FIELDS)
        )
        data: dict[str, Any] = {}
        for (key, _, is_amount), value in zip(_INFO_FIELDS, values, strict=True):
            data[key] = self._amount(value) if is_amount else value
        data.update(await self._requests(from_addr))
        return ServiceResult(ok=True, op="info", data=data)

    async def _request(self, index: int, sender: str | None) -> dict[str, Any]:
        address, amount = (await self._call("getSingleRedeemReq", [index], sender=sender))[:2]
        return {"index": index, "address": address, "amount": self._amount(amount)}

    async def _requests(self, sender: str | None) -> dict[str, Any]:
        count = int(await self._value("getNumReqs", sender=sender))
        items = await run_all(*(self._request(i, sender) for i in range(1, count + 1)))
        total = await self._value("getTotReqs", sender=sender)
        return {"count": count, "items": list(items), "total": self._amount(total)}

    @traced
    @remote_operation("all_requests")
    async def all_requests(self, sender: QtumAddress | None = None) -> ServiceResult:
        """Every pending redeem request plus the requested total."""
        data = await self._requests(_sender(sender))
        return ServiceResult(ok=True, op="all_requests", data=data)

    @traced
    @remote_operation("num_requests")
    async def num_requests(self) -> ServiceResult:
        count = int(await self._value("getNumReqs"))
        return ServiceResult(ok=True, op="num_requests", data={"count": count})

    @traced
    @remote_operation("total_requests")
    async def total_requests(self) -> ServiceResult:
        total = await self._value("getTotReqs")
        return ServiceResult(ok=True, op="total_requests", data={"total": self._amount(total)})

    @traced
    @remote_operation("single_request")
    async def single_request(self, index: int) -> ServiceResult:
        data = await self._request(index, None)
        return ServiceResult(ok=True, op="single_request", data=data)

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------

    @traced
    @remote_operation("balance_of")
    async def balance_of(self, address: QtumAddress) -> ServiceResult:
        balance = await self._value("balanceOf", [address])
        return ServiceResult(
            ok=True,
            op="balance_of",
            data={"address": str(address), "balance": self._amount(balance)},
        )

    @traced
    @remote_operation("token_balance")
    async def token_balance(self, address: QtumAddress) -> ServiceResult:
        """Balance as the contract sees it when *address* is the caller."""
        balance = await self._value("findBalance", sender=str(address))
        return ServiceResult(
            ok=True,
            op="token_balance",
            data={"address": str(address), "balance": self._amount(balance)},
        )

    @traced
    @remote_operation("contract_balance")
    async def contract_balance(self, owner: QtumAddress | None = None) -> ServiceResult:
        """QTUM held by the contract."""
        balance = await self._value("getContractBal", sender=_sender(owner))
        return ServiceResult(
            ok=True,
            op="contract_balance",
            data={"balance": format_token_amount(int(balance), QTUM_DECIMALS), "unit": "QTUM"},
        )

    # ------------------------------------------------------------------
    # Limits
    # ------------------------------------------------------------------

    @traced
    @remote_operation("min_purchase")
    async def min_purchase(self, owner: QtumAddress | None = None) -> ServiceResult:
        value = await self._value("getMinPurchase", sender=_sender(owner))
        return ServiceResult(ok=True, op="min_purchase", data={"min_purchase": self._amount(value)})

    @traced
    @remote_operation("min_redeem")
    async def min_redeem(self, owner: QtumAddress | None = None) -> ServiceResult:
        value = await self._value("getMinRedeem", sender=_sender(owner))
        return ServiceResult(ok=True, op="min_redeem", data={"min_redeem": self._amount(value)})

    @traced
    @remote_operation("max_requests")
    async def max_requests(self, owner: QtumAddress | None = None) -> ServiceResult:
        value = await self._value("getMaxReqs", sender=_sender(owner))
        return ServiceResult(ok=True, op="max_requests", data={"max_requests": int(value)})

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @traced
    @remote_operation("buy")
    async def buy(
        self,
        beneficiary: QtumAddress,
        amount: Decimal,
        sender: QtumAddress | None = None,
    ) -> ServiceResult:
        """Buy tokens for *beneficiary*, paying *amount* QTUM from *sender*."""
        warnings: list[str] = []
        data = await self._submit(
            "buyTokens", [beneficiary], sender=_sender(sender), amount=amount, warnings=warnings
        )
        data["beneficiary"] = str(beneficiary)
        return ServiceResult(ok=True, op="buy", data=data, warnings=warnings)

    @traced
    @remote_operation("mint")
    async def mint(self, amount: int, sender: QtumAddress | None = None) -> ServiceResult:
        """Mint *amount* reserved tokens (base units) to the owner."""
        warnings: list[str] = []
        data = await self._submit(
            "mintReservedTokens", [amount], sender=_sender(sender), warnings=warnings
        )
        data["tokens"] = self._amount(amount)
        return ServiceResult(ok=True, op="mint", data=data, warnings=warnings)

    @traced
    @remote_operation("send_back")
    async def send_back(self, sender: QtumAddress, amount: int) -> ServiceResult:
        """File a redeem request for *amount* base units held by *sender*."""
        warnings: list[str] = []
        data = await self._submit("reqRedeemEntry", [amount], sender=str(sender), warnings=warnings)
        data["tokens"] = self._amount(amount)
        return ServiceResult(ok=True, op="send_back", data=data, warnings=warnings)

    @traced
    @remote_operation("transfer_tokens")
    async def transfer_tokens(
        self,
        from_addr: QtumAddress,
        to_addr: QtumAddress,
        amount: int,
    ) -> ServiceResult:
        warnings: list[str] = []
        data = await self._submit(
            "transfer", [to_addr, amount], sender=str(from_addr), warnings=warnings
        )
        data["to"] = str(to_addr)
        data["tokens"] = self._amount(amount)
        return ServiceResult(ok=True, op="transfer_tokens", data=data, warnings=warnings)

    @traced
    @remote_operation("send_qtum")
    async def send_qtum(self, amount: Decimal, sender: QtumAddress | None = None) -> ServiceResult:
        """Fund the contract with *amount* QTUM."""
        warnings: list[str] = []
        data = await self._submit(
            "feedContract", sender=_sender(sender), amount=amount, warnings=warnings
        )
        return ServiceResult(ok=True, op="send_qtum", data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Owner administration
    # ------------------------------------------------------------------

    async def _owner_tx(
        self,
        method: str,
        args: list[Any],
        owner: QtumAddress | None,
    ) -> tuple[dict[str, Any], list[str]]:
        warnings: list[str] = []
        data = await self._submit(method, args, sender=_sender(owner), warnings=warnings)
        return data, warnings

    @traced
    @remote_operation("refill")
    async def refill(self, owner: QtumAddress | None = None) -> ServiceResult:
        """Pay out the pending redeem requests."""
        data, warnings = await self._owner_tx("refillReqs", [], owner)
        return ServiceResult(ok=True, op="refill", data=data, warnings=warnings)

    @traced
    @remote_operation("reset_requests")
    async def reset_requests(self, owner: QtumAddress | None = None) -> ServiceResult:
        """Clear every redeem request, then report the counters."""
        data, warnings = await self._owner_tx("resetAllReqs", [], owner)
        if data["status"] == "confirmed":
            data.update(await self._counters())
        return ServiceResult(ok=True, op="reset_requests", data=data, warnings=warnings)

    @traced
    @remote_operation("reset_request")
    async def reset_request(self, index: int, owner: QtumAddress | None = None) -> ServiceResult:
        """Clear redeem request *index*, then report the counters."""
        data, warnings = await self._owner_tx("resetSingleReq", [index], owner)
        data["index"] = index
        if data["status"] == "confirmed":
            data.update(await self._counters())
        return ServiceResult(ok=True, op="reset_request", data=data, warnings=warnings)

    async def _counters(self) -> dict[str, Any]:
        count, total = await run_all(self._value("getNumReqs"), self._value("getTotReqs"))
        return {"count": int(count), "total": self._amount(total)}

    @traced
    @remote_operation("set_stake_wallet")
    async def set_stake_wallet(
        self,
        wallet: QtumAddress,
        owner: QtumAddress | None = None,
    ) -> ServiceResult:
        data, warnings = await self._owner_tx("setStakeWallet", [wallet], owner)
        if data["status"] == "confirmed":
            data["stake_wallet"] = await self._value("getStakeWallet", sender=_sender(owner))
        return ServiceResult(ok=True, op="set_stake_wallet", data=data, warnings=warnings)

    @traced
    @remote_operation("set_min_purchase")
    async def set_min_purchase(
        self, amount: int, owner: QtumAddress | None = None
    ) -> ServiceResult:
        data, warnings = await self._owner_tx("setMinPurchase", [amount], owner)
        data["min_purchase"] = self._amount(amount)
        return ServiceResult(ok=True, op="set_min_purchase", data=data, warnings=warnings)

    @traced
    @remote_operation("set_min_redeem")
    async def set_min_redeem(self, amount: int, owner: QtumAddress | None = None) -> ServiceResult:
        data, warnings = await self._owner_tx("setMinRedeem", [amount], owner)
        data["min_redeem"] = self._amount(amount)
        return ServiceResult(ok=True, op="set_min_redeem", data=data, warnings=warnings)

    @traced
    @remote_operation("set_max_requests")
    async def set_max_requests(self, count: int, owner: QtumAddress | None = None) -> ServiceResult:
        data, warnings = await self._owner_tx("setMaxReqs", [count], owner)
        data["max_requests"] = count
        return ServiceResult(ok=True, op="set_max_requests", data=data, warnings=warnings)

    @traced
    @remote_operation("withdraw_qtum")
    async def withdraw_qtum(self, owner: QtumAddress | None = None) -> ServiceResult:
        """Withdraw the contract's QTUM balance to the owner."""
        data, warnings = await self._owner_tx("withdrawQtum", [], owner)
        return ServiceResult(ok=True, op="withdraw_qtum", data=data, warnings=warnings)
