"""Click parameter types for command-line arguments.

Every positional argument is checked here, so a malformed value stops the
command with a usage error (exit code 2) before any node is contacted.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import click

from pqmctl.domain.addresses import (
    AddressError,
    QtumAddress,
    parse_address,
    parse_base58_address,
)
from pqmctl.domain.amounts import AmountError, parse_positive_int, parse_qtum_amount


class QtumAmountType(click.ParamType):
    """A positive QTUM amount with at most 8 decimal places."""

    name = "qtum"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            return parse_qtum_amount(str(value))
        except AmountError as exc:
            self.fail(str(exc), param, ctx)


class PositiveIntType(click.ParamType):
    """A positive integer: token base units, counts, request indexes."""

    name = "integer"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> int:
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        try:
            return parse_positive_int(str(value))
        except AmountError as exc:
            self.fail(str(exc), param, ctx)


class AddressType(click.ParamType):
    """A Qtum address.

    Senders must be base58check (the wallet signs with them); contract
    arguments also accept the 40-digit hex form.
    """

    def __init__(self, *, base58_only: bool = False) -> None:
        self.base58_only = base58_only
        self.name = "sender" if base58_only else "address"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> QtumAddress:
        if isinstance(value, QtumAddress):
            return value
        parse = parse_base58_address if self.base58_only else parse_address
        try:
            return parse(str(value))
        except AddressError as exc:
            self.fail(str(exc), param, ctx)


QTUM_AMOUNT = QtumAmountType()
POSITIVE_INT = PositiveIntType()
SENDER = AddressType(base58_only=True)
ADDRESS = AddressType()
