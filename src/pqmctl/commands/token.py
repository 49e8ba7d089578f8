"""Commands: token purchase, balances, transfers and redemption."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pqmctl.commands._base import PqmCommand
from pqmctl.commands._types import ADDRESS, POSITIVE_INT, QTUM_AMOUNT, SENDER

if TYPE_CHECKING:
    from decimal import Decimal

    from pqmctl.commands._context import AppContext
    from pqmctl.domain.addresses import QtumAddress

SECTION = "Token"


@click.command(
    "info",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl info
  pqmctl info qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R
  pqmctl --json info""",
)
@click.argument("sender", type=SENDER, required=False)
@click.pass_obj
def info(app: AppContext, sender: QtumAddress | None) -> None:
    """Show token details, limits and pending redeem requests."""
    app.emit(app.run("info", sender))


@click.command(
    "buy",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl buy qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R 10
  pqmctl buy 7926223070547d2d15b2ef5e7383e541c338ffe9 0.5 qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R
  pqmctl --no-wait buy qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R 1""",
)
@click.argument("beneficiary", type=ADDRESS)
@click.argument("amount", type=QTUM_AMOUNT)
@click.argument("sender", type=SENDER, required=False)
@click.pass_obj
def buy(
    app: AppContext, beneficiary: QtumAddress, amount: Decimal, sender: QtumAddress | None
) -> None:
    """Buy tokens for BENEFICIARY, paying AMOUNT QTUM."""
    app.emit(app.run("buy", beneficiary, amount, sender))


@click.command(
    "balanceOf",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl balanceOf qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R
  pqmctl -q balanceOf 7926223070547d2d15b2ef5e7383e541c338ffe9""",
)
@click.argument("address", type=ADDRESS)
@click.pass_obj
def balance_of(app: AppContext, address: QtumAddress) -> None:
    """Show the token balance of ADDRESS."""
    app.emit(app.run("balance_of", address))


@click.command(
    "tokenBalance",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl tokenBalance qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("address", type=SENDER)
@click.pass_obj
def token_balance(app: AppContext, address: QtumAddress) -> None:
    """Show the token balance the contract reports to ADDRESS as caller."""
    app.emit(app.run("token_balance", address))


@click.command(
    "mint",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl mint 100000000
  pqmctl mint 5_000_000_000 qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("amount", type=POSITIVE_INT)
@click.argument("sender", type=SENDER, required=False)
@click.pass_obj
def mint(app: AppContext, amount: int, sender: QtumAddress | None) -> None:
    """Mint AMOUNT reserved tokens (base units)."""
    app.emit(app.run("mint", amount, sender))


@click.command(
    "sendBack",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl sendBack qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R 100000000""",
)
@click.argument("sender", type=SENDER)
@click.argument("amount", type=POSITIVE_INT)
@click.pass_obj
def send_back(app: AppContext, sender: QtumAddress, amount: int) -> None:
    """Request redemption of AMOUNT tokens (base units) held by SENDER."""
    app.emit(app.run("send_back", sender, amount))


@click.command(
    "transferTokens",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl transferTokens qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R qdgznat81MfTHZUrQrLZDZteAx212X4Wjj 25""",
)
@click.argument("from_addr", metavar="FROM", type=SENDER)
@click.argument("to_addr", metavar="TO", type=ADDRESS)
@click.argument("amount", type=POSITIVE_INT)
@click.pass_obj
def transfer_tokens(
    app: AppContext, from_addr: QtumAddress, to_addr: QtumAddress, amount: int
) -> None:
    """Transfer AMOUNT tokens (base units) from FROM to TO."""
    app.emit(app.run("transfer_tokens", from_addr, to_addr, amount))


@click.command(
    "sendQtumFrom",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl sendQtumFrom 25
  pqmctl sendQtumFrom 2.5 qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("amount", type=QTUM_AMOUNT)
@click.argument("sender", type=SENDER, required=False)
@click.pass_obj
def send_qtum(app: AppContext, amount: Decimal, sender: QtumAddress | None) -> None:
    """Fund the contract with AMOUNT QTUM."""
    app.emit(app.run("send_qtum", amount, sender))
