"""Commands: owner settings, limits and contract funds."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pqmctl.commands._base import PqmCommand
from pqmctl.commands._types import ADDRESS, POSITIVE_INT, SENDER

if TYPE_CHECKING:
    from pqmctl.commands._context import AppContext
    from pqmctl.domain.addresses import QtumAddress

SECTION = "Owner"


@click.command(
    "setStakeWallet",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl setStakeWallet qdgznat81MfTHZUrQrLZDZteAx212X4Wjj
  pqmctl setStakeWallet qdgznat81MfTHZUrQrLZDZteAx212X4Wjj qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("wallet", type=ADDRESS)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def set_stake_wallet(app: AppContext, wallet: QtumAddress, owner: QtumAddress | None) -> None:
    """Set the wallet that receives staked QTUM."""
    app.emit(app.run("set_stake_wallet", wallet, owner))


@click.command("setMinPurch", cls=PqmCommand, section=SECTION)
@click.argument("amount", type=POSITIVE_INT)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def set_min_purchase(app: AppContext, amount: int, owner: QtumAddress | None) -> None:
    """Set the minimum purchase to AMOUNT tokens (base units)."""
    app.emit(app.run("set_min_purchase", amount, owner))


@click.command("minPurch", cls=PqmCommand, section=SECTION)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def min_purchase(app: AppContext, owner: QtumAddress | None) -> None:
    """Show the minimum purchase."""
    app.emit(app.run("min_purchase", owner))


@click.command("setMinRed", cls=PqmCommand, section=SECTION)
@click.argument("amount", type=POSITIVE_INT)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def set_min_redeem(app: AppContext, amount: int, owner: QtumAddress | None) -> None:
    """Set the minimum redemption to AMOUNT tokens (base units)."""
    app.emit(app.run("set_min_redeem", amount, owner))


@click.command("minRedeem", cls=PqmCommand, section=SECTION)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def min_redeem(app: AppContext, owner: QtumAddress | None) -> None:
    """Show the minimum redemption."""
    app.emit(app.run("min_redeem", owner))


@click.command("setMaxRqs", cls=PqmCommand, section=SECTION)
@click.argument("count", type=POSITIVE_INT)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def set_max_requests(app: AppContext, count: int, owner: QtumAddress | None) -> None:
    """Set the maximum number of pending redeem requests."""
    app.emit(app.run("set_max_requests", count, owner))


@click.command("maxRqs", cls=PqmCommand, section=SECTION)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def max_requests(app: AppContext, owner: QtumAddress | None) -> None:
    """Show the maximum number of pending redeem requests."""
    app.emit(app.run("max_requests", owner))


@click.command("getQRC20Bal", cls=PqmCommand, section=SECTION)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def contract_balance(app: AppContext, owner: QtumAddress | None) -> None:
    """Show the QTUM held by the contract."""
    app.emit(app.run("contract_balance", owner))


@click.command(
    "withdrawQtum",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl withdrawQtum
  pqmctl --no-wait withdrawQtum qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def withdraw_qtum(app: AppContext, owner: QtumAddress | None) -> None:
    """Withdraw the contract's QTUM to the owner."""
    app.emit(app.run("withdraw_qtum", owner))
