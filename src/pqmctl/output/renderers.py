"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pqmctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from pqmctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Transactions print their txid so scripts can capture it.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    txid = result.data.get("txid")
    if txid:
        return str(txid)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="pqm.ok")
    op = Text(f"  {result.op}", style="pqm.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pqm.key")
    if key == "txid":
        v = Text(str(value), style="pqm.txid")
    elif key in ("sender", "address", "beneficiary", "to", "stake_wallet"):
        v = Text(str(value), style="pqm.address")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _request_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Address", style="pqm.address", no_wrap=True)
    table.add_column("Amount", style="pqm.amount", justify="right")
    for item in items:
        table.add_row(
            str(item.get("index", "")),
            str(item.get("address", "")),
            str(item.get("amount", "")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pqm.error")
    op = Text(f"  {result.op}", style="pqm.op")
    console.print(label, op, Text(": "), Text(msg), sep="", end="")
    console.print()

    # A broadcast transaction is worth reporting even when the wait failed.
    if err and err.detail.get("txid"):
        _field(console, "txid", err.detail["txid"])

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Transaction renderer ─────────────────────────────────────────────

_TX_KEYS = (
    "txid",
    "method",
    "sender",
    "amount",
    "status",
    "confirmations",
    "gas_used",
)


def _render_transaction(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render any op that broadcast a transaction."""
    _status_line(console, result)
    for key in _TX_KEYS:
        if key in result.data:
            _field(console, key, result.data[key])
    # Op-specific extras (beneficiary, tokens, read-back values)
    for key, value in result.data.items():
        if key not in _TX_KEYS:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Read renderers ────────────────────────────────────────────────────


def _render_info(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render token metadata as a panel, then the request table."""
    d = result.data
    lines = [
        f"exchange rate: {d.get('exchange_rate')}",
        f"total supply: {d.get('total_supply')}",
        f"tokens sold: {d.get('tokens_sold')}",
        f"min purchase: {d.get('min_purchase')}",
        f"min redeem: {d.get('min_redeem')}",
        f"max requests: {d.get('max_requests')}",
    ]
    title = f"{d.get('name', '?')} ({d.get('symbol', '?')})"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    _render_requests(result, console, verbose=verbose)


def _render_requests(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render redeem requests as a table with the requested total."""
    items = result.data.get("items", [])
    if items:
        console.print(_request_table(items))
    console.print(
        f"\n{result.data.get('count', len(items))} requests, "
        f"total {result.data.get('total', '?')}"
    )
    if verbose:
        _render_meta(console, result)


def _render_balance(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    if "address" in result.data:
        _field(console, "address", result.data["address"])
    balance = str(result.data.get("balance", "?"))
    unit = result.data.get("unit")
    _field(console, "balance", f"{balance} {unit}" if unit else balance)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Overview
    "info": _render_info,
    "all_requests": _render_requests,
    # Balances
    "balance_of": _render_balance,
    "token_balance": _render_balance,
    "contract_balance": _render_balance,
    # Transactions
    "buy": _render_transaction,
    "mint": _render_transaction,
    "send_back": _render_transaction,
    "transfer_tokens": _render_transaction,
    "send_qtum": _render_transaction,
    "refill": _render_transaction,
    "reset_requests": _render_transaction,
    "reset_request": _render_transaction,
    "set_stake_wallet": _render_transaction,
    "set_min_purchase": _render_transaction,
    "set_min_redeem": _render_transaction,
    "set_max_requests": _render_transaction,
    "withdraw_qtum": _render_transaction,
}
