"""BaseService — shared plumbing for contract-backed services.

Every service receives its :class:`ContractClient` at construction time
rather than reaching for a process-wide proxy. The base class owns the two
paths every operation goes through:

* read  — ``callcontract`` wrapped in a telemetry span
* write — ``sendtocontract`` → confirmation wait → receipt

and the translation of remote failures into ``ServiceResult`` errors.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from contextlib import AbstractContextManager, nullcontext
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from pqmctl.config.logging import transaction_context
from pqmctl.config.models import ConfirmConfig
from pqmctl.domain.amounts import DEFAULT_DECIMALS
from pqmctl.infrastructure.contract import ContractError
from pqmctl.infrastructure.descriptor import DescriptorError
from pqmctl.infrastructure.rpc import RPCError
from pqmctl.services.confirmation import (
    ConfirmationCancelled,
    ConfirmationError,
    ConfirmationTimeout,
    ConfirmationTracker,
)
from pqmctl.services.result import ServiceResult
from pqmctl.services.telemetry import trace_span

if TYPE_CHECKING:
    from pqmctl.domain.transaction import TransactionHandle
    from pqmctl.infrastructure.contract import ContractClient

logger = structlog.get_logger(__name__)

# Shows progress while a tracker waits; sets ``tracker.on_update`` itself.
ProgressFactory = Callable[[ConfirmationTracker], AbstractContextManager[Any]]

# Most specific first.
_ERROR_CODES: tuple[tuple[type[BaseException], str], ...] = (
    (ConfirmationTimeout, "CONFIRMATION_TIMEOUT"),
    (ConfirmationCancelled, "CONFIRMATION_CANCELLED"),
    (ConfirmationError, "CONFIRMATION_FAILED"),
    (DescriptorError, "DESCRIPTOR_ERROR"),
    (ContractError, "CONTRACT_ERROR"),
    (RPCError, "RPC_ERROR"),
    (httpx.HTTPError, "NETWORK_ERROR"),
)
REMOTE_ERRORS = tuple(exc_type for exc_type, _ in _ERROR_CODES)


def failure_from_exception(op: str, exc: BaseException) -> ServiceResult:
    """Build the failed ServiceResult for a remote error, message unchanged."""
    code = next(c for exc_type, c in _ERROR_CODES if isinstance(exc, exc_type))
    detail: dict[str, Any] = {"exception": type(exc).__name__}
    if isinstance(exc, ConfirmationError):
        detail["txid"] = exc.handle.txid
        detail["broadcast"] = True
    if isinstance(exc, RPCError) and exc.code is not None:
        detail["rpc_code"] = exc.code
    return ServiceResult.failure(op, code, str(exc) or type(exc).__name__, detail=detail)


_AsyncOp = Callable[..., Awaitable[ServiceResult]]


def remote_operation(op: str) -> Callable[[_AsyncOp], _AsyncOp]:
    """Decorator: turn remote failures raised by *func* into a failed result.

    No retries. Anything outside ``REMOTE_ERRORS`` is a bug and propagates.
    """

    def decorator(func: _AsyncOp) -> _AsyncOp:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> ServiceResult:
            try:
                return await func(self, *args, **kwargs)
            except REMOTE_ERRORS as exc:
                logger.debug("service.remote_failure", op=op, error=repr(exc))
                return failure_from_exception(op, exc)

        return wrapper

    return decorator


async def run_all(*coros: Coroutine[Any, Any, Any]) -> list[Any]:
    """Run *coros* concurrently and return their results in order.

    The first failure cancels the others and is re-raised on its own, not
    wrapped in an ExceptionGroup, so ``remote_operation`` still sees it.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(coro) for coro in coros]
    except BaseExceptionGroup as group:
        raise group.exceptions[0] from None
    return [task.result() for task in tasks]


class BaseService:
    """Abstract base for contract-backed services.

    Usage::

        class TokenService(BaseService):
            @remote_operation("balance_of")
            async def balance_of(self, address) -> ServiceResult:
                value = await self._value("balanceOf", [address])
                ...
    """

    def __init__(
        self,
        contract: ContractClient,
        *,
        confirm: ConfirmConfig | None = None,
        decimals: int = DEFAULT_DECIMALS,
        progress: ProgressFactory | None = None,
    ) -> None:
        self._contract = contract
        self._confirm = confirm or ConfirmConfig()
        self._decimals = decimals
        self._progress = progress

    async def _call(
        self,
        method: str,
        args: Sequence[Any] = (),
        *,
        sender: str | None = None,
    ) -> list[Any]:
        """All decoded outputs of a read-only call."""
        with trace_span(f"call.{method}"):
            result = await self._contract.call(method, args, sender=sender)
        return result.outputs

    async def _value(
        self,
        method: str,
        args: Sequence[Any] = (),
        *,
        sender: str | None = None,
    ) -> Any:
        """First decoded output of a read-only call."""
        with trace_span(f"call.{method}"):
            return await self._contract.value(method, args, sender=sender)

    async def _submit(
        self,
        method: str,
        args: Sequence[Any] = (),
        *,
        sender: str | None = None,
        amount: Decimal = Decimal(0),
        warnings: list[str],
    ) -> dict[str, Any]:
        """Broadcast *method*, wait for confirmations, and summarize the outcome.

        Errors while waiting become :class:`ConfirmationError` carrying the
        handle, since the transaction is already broadcast by then.
        """
        with trace_span(f"send.{method}"):
            handle = await self._contract.send(method, args, sender=sender, amount=amount)

        data: dict[str, Any] = {
            "txid": handle.txid,
            "method": method,
            "sender": handle.sender,
        }
        if amount:
            data["amount"] = format(amount, "f")

        if not self._confirm.wait:
            data["status"] = "submitted"
            data["confirmations"] = 0
            return data

        with transaction_context(handle):
            await self._confirm_and_check(handle, data, warnings)
        return data

    async def _confirm_and_check(
        self,
        handle: TransactionHandle,
        data: dict[str, Any],
        warnings: list[str],
    ) -> None:
        tracker = ConfirmationTracker(
            self._contract,
            handle,
            required=self._confirm.required,
            poll_interval=self._confirm.poll_interval,
            timeout=self._confirm.timeout,
        )
        progress = self._progress(tracker) if self._progress else nullcontext()
        with trace_span(f"confirm.{handle.method}") as span, progress:
            try:
                count = await tracker.wait()
            except (RPCError, ContractError, httpx.HTTPError) as exc:
                raise ConfirmationError(handle, str(exc) or type(exc).__name__) from exc
            if span:
                span.annotate("polls", tracker.polls)

        data["status"] = "confirmed"
        data["confirmations"] = count

        try:
            receipt = await self._contract.receipt(handle.txid)
        except (RPCError, httpx.HTTPError) as exc:
            warnings.append(f"Receipt unavailable for {handle.txid}: {exc}")
            return
        if receipt:
            data["gas_used"] = receipt.get("gasUsed")
            excepted = receipt.get("excepted")
            if excepted and excepted != "None":
                data["status"] = "excepted"
                logger.debug("service.tx_excepted", excepted=excepted)
                warnings.append(f"{handle.method} was mined but its execution failed: {excepted}")
