"""Commands: redeem request queue (listing, refill, reset)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pqmctl.commands._base import PqmCommand
from pqmctl.commands._types import POSITIVE_INT, SENDER

if TYPE_CHECKING:
    from pqmctl.commands._context import AppContext
    from pqmctl.domain.addresses import QtumAddress

SECTION = "Redeem requests"


@click.command("getNumReqs", cls=PqmCommand, section=SECTION)
@click.pass_obj
def num_requests(app: AppContext) -> None:
    """Show the number of pending redeem requests."""
    app.emit(app.run("num_requests"))


@click.command("getTotQReqs", cls=PqmCommand, section=SECTION)
@click.pass_obj
def total_requests(app: AppContext) -> None:
    """Show the total amount of tokens requested for redemption."""
    app.emit(app.run("total_requests"))


@click.command(
    "getSingleRequest",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl getSingleRequest 1
  pqmctl --json getSingleRequest 3""",
)
@click.argument("index", type=POSITIVE_INT)
@click.pass_obj
def single_request(app: AppContext, index: int) -> None:
    """Show redeem request INDEX (1-based)."""
    app.emit(app.run("single_request", index))


@click.command(
    "getAllRequests",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl getAllRequests
  pqmctl --json getAllRequests qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("sender", type=SENDER, required=False)
@click.pass_obj
def all_requests(app: AppContext, sender: QtumAddress | None) -> None:
    """List every pending redeem request."""
    app.emit(app.run("all_requests", sender))


@click.command(
    "refill",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl refill
  pqmctl --confirmations 3 refill qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def refill(app: AppContext, owner: QtumAddress | None) -> None:
    """Pay out the pending redeem requests (owner only)."""
    app.emit(app.run("refill", owner))


@click.command("resetOwnerVars", cls=PqmCommand, section=SECTION)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def reset_requests(app: AppContext, owner: QtumAddress | None) -> None:
    """Clear every redeem request (owner only)."""
    app.emit(app.run("reset_requests", owner))


@click.command(
    "resetOwnerSigleVars",
    cls=PqmCommand,
    section=SECTION,
    examples="""\
  pqmctl resetOwnerSigleVars 2
  pqmctl resetOwnerSigleVars 2 qUbxboqjBRp96j3La8D1RYkzqx5ndvqH5R""",
)
@click.argument("index", type=POSITIVE_INT)
@click.argument("owner", type=SENDER, required=False)
@click.pass_obj
def reset_request(app: AppContext, index: int, owner: QtumAddress | None) -> None:
    """Clear redeem request INDEX (owner only)."""
    app.emit(app.run("reset_request", index, owner))
