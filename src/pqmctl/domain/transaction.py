"""Transaction handle — the identity of a submitted contract call."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TransactionHandle:
    """A submitted transaction: its txid plus the call that produced it.

    ``hash160`` is the sender's hash160 as reported by ``sendtocontract``.
    """

    txid: str
    method: str
    sender: str | None = None
    hash160: str | None = None
