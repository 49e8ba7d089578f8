"""Confirmation tracking for submitted transactions.

After ``sendtocontract`` returns a txid, the transaction is broadcast but
not yet mined. :class:`ConfirmationTracker` polls the node until the
transaction has at least ``required`` confirmations.

State machine::

    SUBMITTED ──wait()──▶ POLLING ──count ≥ required──▶ CONFIRMED
                             │
                             └──poll error / timeout / cancel()──▶ FAILED

INVARIANTS:
  * ``wait()`` returns only after a poll observed ``count >= required``.
  * A poll error is never retried; it moves the tracker to FAILED and
    propagates unchanged.
  * Polling is read-only. The broadcast transaction is never resubmitted or
    cancelled, whatever happens to the wait.

Between polls the tracker suspends on an :class:`asyncio.Event` with a
timeout, so other tasks keep running and :meth:`cancel` wakes it at once.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Protocol

import structlog

from pqmctl.domain.transaction import TransactionHandle

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL = 3.0


class ConfirmationSource(Protocol):
    """Anything that can report a transaction's confirmation count."""

    async def get_confirmations(self, txid: str) -> int: ...


class ConfirmationState(StrEnum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class ConfirmationError(Exception):
    """Base for waits that ended without reaching the required count."""

    def __init__(self, handle: TransactionHandle, message: str) -> None:
        super().__init__(message)
        self.handle = handle


class ConfirmationCancelled(ConfirmationError):
    """``cancel()`` was called while waiting."""


class ConfirmationTimeout(ConfirmationError):
    """The overall timeout elapsed before enough confirmations arrived."""


class ConfirmationTracker:
    """Poll a :class:`ConfirmationSource` until *handle* is confirmed.

    Args:
        source: Where confirmation counts come from (the contract client).
        handle: The submitted transaction.
        required: Confirmations needed, at least 1.
        poll_interval: Seconds to suspend between polls. The first poll is
            immediate.
        timeout: Optional overall limit in seconds.
        on_update: Called with the tracker after every successful poll.
    """

    def __init__(
        self,
        source: ConfirmationSource,
        handle: TransactionHandle,
        *,
        required: int = 1,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float | None = None,
        on_update: Callable[[ConfirmationTracker], None] | None = None,
    ) -> None:
        if required < 1:
            raise ValueError(f"required confirmations must be >= 1, got {required}")
        if poll_interval < 0:
            raise ValueError(f"poll_interval must be >= 0, got {poll_interval}")
        self.source = source
        self.handle = handle
        self.required = required
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.on_update = on_update

        self.state = ConfirmationState.SUBMITTED
        self.confirmations = 0
        self.polls = 0
        self.error: BaseException | None = None
        self._cancelled = asyncio.Event()

    @property
    def done(self) -> bool:
        return self.state in (ConfirmationState.CONFIRMED, ConfirmationState.FAILED)

    def cancel(self) -> None:
        """Abandon the wait. The transaction itself stays broadcast."""
        self._cancelled.set()

    async def wait(self) -> int:
        """Poll until confirmed; return the observed confirmation count."""
        if self.done:
            raise RuntimeError(f"tracker for {self.handle.txid} already {self.state}")

        self.state = ConfirmationState.POLLING
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        log = logger.bind(txid=self.handle.txid, method=self.handle.method, required=self.required)
        log.debug("confirm.start")

        try:
            while True:
                if self._cancelled.is_set():
                    raise ConfirmationCancelled(
                        self.handle, f"Wait for {self.handle.txid} cancelled"
                    )

                count = await self.source.get_confirmations(self.handle.txid)
                self.polls += 1
                if count < self.confirmations:
                    # Reorg or a different node behind the load balancer
                    log.debug("confirm.count_decreased", previous=self.confirmations, count=count)
                self.confirmations = count
                if self.on_update is not None:
                    self.on_update(self)

                if count >= self.required:
                    self.state = ConfirmationState.CONFIRMED
                    log.debug("confirm.done", confirmations=count, polls=self.polls)
                    return count

                await self._pause(deadline)
        except BaseException as exc:
            self.state = ConfirmationState.FAILED
            self.error = exc
            log.debug("confirm.failed", error=repr(exc), polls=self.polls)
            raise

    async def _pause(self, deadline: float | None) -> None:
        delay = self.poll_interval
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ConfirmationTimeout(
                    self.handle,
                    f"{self.handle.txid} has {self.confirmations}/{self.required} "
                    f"confirmations after {self.timeout}s",
                )
            delay = min(delay, remaining)
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=delay)
        except TimeoutError:
            pass


async def await_confirmations(
    source: ConfirmationSource,
    handle: TransactionHandle,
    required: int = 1,
    **kwargs: object,
) -> int:
    """Convenience wrapper: build a tracker and wait on it."""
    tracker = ConfirmationTracker(
        source, handle, required=required, **kwargs  # type: ignore[arg-type]
    )
    return await tracker.wait()
