"""Amount parsing and formatting.

Two units appear on the command line:

* QTUM amounts sent as transaction value (decimal, at most 8 places).
* Contract integers — token base units, request numbers, limits.

Token balances come back from the contract as integers scaled by the
token's decimals and are rendered as exact decimal strings.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

DEFAULT_DECIMALS = 8
QTUM_DECIMALS = 8


class AmountError(ValueError):
    """Raised when an amount or count argument is malformed."""


def parse_qtum_amount(text: str) -> Decimal:
    """Parse a strictly positive QTUM amount.

    Examples:
        >>> parse_qtum_amount("1.5")
        Decimal('1.5')
        >>> parse_qtum_amount("0.00000001")
        Decimal('1E-8')
    """
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise AmountError(f"Invalid amount: {text}") from None
    if not value.is_finite() or value <= 0:
        raise AmountError(f"Invalid amount: {text}")
    exponent = value.as_tuple().exponent
    if isinstance(exponent, int) and -exponent > QTUM_DECIMALS:
        raise AmountError(f"Invalid amount: {text} (more than {QTUM_DECIMALS} decimal places)")
    return value


def parse_positive_int(text: str) -> int:
    """Parse a strictly positive base-10 integer (underscores allowed)."""
    cleaned = text.strip().replace("_", "")
    # isdigit() alone admits superscripts and non-ASCII digits int() rejects
    if not (cleaned.isascii() and cleaned.isdigit()):
        raise AmountError(f"Invalid amount: {text}")
    value = int(cleaned, 10)
    if value <= 0:
        raise AmountError(f"Invalid amount: {text}")
    return value


def format_token_amount(value: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render an integer amount of base units with *decimals* places.

    Examples:
        >>> format_token_amount(123456789)
        '1.23456789'
        >>> format_token_amount(5)
        '0.00000005'
        >>> format_token_amount(7, decimals=0)
        '7'
    """
    if decimals <= 0:
        return str(value)
    whole, frac = divmod(abs(value), 10**decimals)
    sign = "-" if value < 0 else ""
    return f"{sign}{whole}.{frac:0{decimals}d}"
