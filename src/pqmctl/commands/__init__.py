"""Subcommand modules for pqmctl.

Provides register_commands() which uses deferred imports to keep
``pqmctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every subcommand on the root CLI group.

    Subcommand names keep the contract tooling's camelCase spelling.
    """
    # --- Token ---
    from pqmctl.commands.token import (
        balance_of,
        buy,
        info,
        mint,
        send_back,
        send_qtum,
        token_balance,
        transfer_tokens,
    )

    for cmd in (info, buy, balance_of, mint, send_back, transfer_tokens, token_balance, send_qtum):
        cli.add_command(cmd)

    # --- Redeem requests ---
    from pqmctl.commands.redeem import (
        all_requests,
        num_requests,
        refill,
        reset_request,
        reset_requests,
        single_request,
        total_requests,
    )

    for cmd in (
        num_requests,
        total_requests,
        single_request,
        all_requests,
        refill,
        reset_requests,
        reset_request,
    ):
        cli.add_command(cmd)

    # --- Owner ---
    from pqmctl.commands.owner import (
        contract_balance,
        max_requests,
        min_purchase,
        min_redeem,
        set_max_requests,
        set_min_purchase,
        set_min_redeem,
        set_stake_wallet,
        withdraw_qtum,
    )

    for cmd in (
        set_stake_wallet,
        set_min_purchase,
        min_purchase,
        set_min_redeem,
        min_redeem,
        set_max_requests,
        max_requests,
        contract_balance,
        withdraw_qtum,
    ):
        cli.add_command(cmd)
