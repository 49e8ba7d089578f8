"""ContractClient — the capability object every command receives.

Wraps one deployed contract behind three node RPCs:

* ``callcontract``   — read-only execution, outputs decoded by the ABI
* ``sendtocontract`` — broadcast a transaction, returns a txid
* ``gettransaction`` — confirmation count, for the confirmation tracker

A client is built per invocation by :func:`open_contract` and handed to the
service layer explicitly; nothing here is module-global.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import structlog

from pqmctl.domain.transaction import TransactionHandle
from pqmctl.infrastructure.abi import AbiError, AbiFunction, find_function
from pqmctl.infrastructure.descriptor import DeployedContract, load_descriptor
from pqmctl.infrastructure.rpc import QtumRPC

if TYPE_CHECKING:
    from pqmctl.config.settings import PqmSettings

logger = structlog.get_logger(__name__)


class ContractError(Exception):
    """A call could not be encoded, or the contract execution threw."""


@dataclass(frozen=True)
class CallResult:
    """Decoded result of a ``callcontract`` execution."""

    method: str
    outputs: list[Any] = field(default_factory=list)
    gas_used: int | None = None


class ContractClient:
    """Typed access to one deployed contract through a :class:`QtumRPC`."""

    def __init__(
        self,
        rpc: QtumRPC,
        contract: DeployedContract,
        *,
        default_sender: str | None = None,
        gas_limit: int = 200_000,
        gas_price: Decimal = Decimal("0.0000004"),
    ) -> None:
        self.rpc = rpc
        self.name = contract.name
        self.address = contract.address.removeprefix("0x").lower()
        self.abi = contract.abi
        self.default_sender = default_sender or contract.sender
        self.gas_limit = gas_limit
        self.gas_price = gas_price

    def _function(self, method: str, args: Sequence[Any]) -> tuple[AbiFunction, str]:
        try:
            fn = find_function(self.abi, method, len(args))
            return fn, fn.encode_call(list(args))
        except AbiError as exc:
            raise ContractError(f"{self.name}.{method}: {exc}") from exc

    def _sender(self, sender: str | None) -> str | None:
        return sender or self.default_sender

    async def call(
        self,
        method: str,
        args: Sequence[Any] = (),
        *,
        sender: str | None = None,
    ) -> CallResult:
        """Execute *method* locally on the node without creating a transaction."""
        fn, data = self._function(method, args)
        params: list[Any] = [self.address, data]
        from_addr = self._sender(sender)
        if from_addr:
            params.append(from_addr)

        result = await self.rpc.call("callcontract", *params)
        execution = result.get("executionResult", {}) if isinstance(result, dict) else {}
        excepted = execution.get("excepted", "None")
        if excepted and excepted != "None":
            raise ContractError(f"{fn.signature} failed: {excepted}")
        try:
            outputs = fn.decode_output(str(execution.get("output", "")))
        except AbiError as exc:
            raise ContractError(f"{self.name}.{method}: {exc}") from exc
        gas_used = execution.get("gasUsed")
        return CallResult(method=method, outputs=outputs, gas_used=gas_used)

    async def value(
        self,
        method: str,
        args: Sequence[Any] = (),
        *,
        sender: str | None = None,
    ) -> Any:
        """Like :meth:`call` but return only the first output."""
        result = await self.call(method, args, sender=sender)
        if not result.outputs:
            raise ContractError(f"{self.name}.{method} returned no outputs")
        return result.outputs[0]

    async def send(
        self,
        method: str,
        args: Sequence[Any] = (),
        *,
        sender: str | None = None,
        amount: Decimal = Decimal(0),
    ) -> TransactionHandle:
        """Broadcast a transaction calling *method*, optionally sending *amount* QTUM."""
        fn, data = self._function(method, args)
        if amount and not fn.payable:
            logger.warning("contract.value_to_nonpayable", method=fn.signature, amount=str(amount))

        # Amounts travel as strings so no float rounding touches them.
        params: list[Any] = [
            self.address,
            data,
            format(amount, "f"),
            self.gas_limit,
            format(self.gas_price, "f"),
        ]
        from_addr = self._sender(sender)
        if from_addr:
            params.append(from_addr)

        result = await self.rpc.call("sendtocontract", *params)
        handle = TransactionHandle(
            txid=str(result["txid"]),
            method=method,
            sender=result.get("sender", from_addr),
            hash160=result.get("hash160"),
        )
        logger.info("contract.sent", method=fn.signature, txid=handle.txid, sender=handle.sender)
        return handle

    async def get_confirmations(self, txid: str) -> int:
        """Current confirmation count.

        A negative count means the wallet sees the transaction as conflicted
        (double-spent or orphaned). It will never confirm, so that is an error.
        """
        tx = await self.rpc.call("gettransaction", txid)
        count = int(tx.get("confirmations", 0))
        if count < 0:
            logger.warning("contract.tx_conflicted", txid=txid, confirmations=count)
            raise ContractError(f"Transaction {txid} is conflicted ({count} confirmations)")
        return count

    async def receipt(self, txid: str) -> dict[str, Any] | None:
        """First execution receipt of a mined transaction, if the node has one."""
        receipts = await self.rpc.call("gettransactionreceipt", txid)
        if not receipts:
            return None
        return dict(receipts[0])


@asynccontextmanager
async def open_contract(settings: PqmSettings) -> AsyncIterator[ContractClient]:
    """Load the descriptor, connect to the node, and yield a ContractClient.

    The descriptor is read before any connection is made, so a bad
    descriptor never reaches the network.
    """
    descriptor = load_descriptor(settings.descriptor_path)
    deployed = descriptor.contract(settings.contract.name)
    async with QtumRPC(
        settings.rpc.url,
        user=settings.rpc.user,
        password=settings.rpc.password,
        timeout=settings.rpc.timeout,
    ) as rpc:
        yield ContractClient(
            rpc,
            deployed,
            default_sender=settings.contract.sender,
            gas_limit=settings.transaction.gas_limit,
            gas_price=settings.transaction.gas_price,
        )
