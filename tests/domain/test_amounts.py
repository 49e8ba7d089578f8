"""Tests for amount parsing and formatting."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pqmctl.domain.amounts import (
    AmountError,
    format_token_amount,
    parse_positive_int,
    parse_qtum_amount,
)


class TestParseQtumAmount:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("1", Decimal("1")), ("0.5", Decimal("0.5")), ("0.00000001", Decimal("0.00000001"))],
    )
    def test_valid(self, text: str, expected: Decimal) -> None:
        assert parse_qtum_amount(text) == expected

    @pytest.mark.parametrize("text", ["abc", "", "0", "-1", "NaN", "Infinity", "0.000000001"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(AmountError, match="Invalid amount"):
            parse_qtum_amount(text)


class TestParsePositiveInt:
    def test_underscores(self) -> None:
        assert parse_positive_int("5_000_000") == 5_000_000

    @pytest.mark.parametrize(
        "text", ["abc", "0", "-3", "1.5", "1e8", "", "\u00b2", "\u0661\u0662", "\uff11"]
    )
    def test_invalid(self, text: str) -> None:
        with pytest.raises(AmountError):
            parse_positive_int(text)


class TestFormatTokenAmount:
    @pytest.mark.parametrize(
        ("value", "decimals", "expected"),
        [
            (123456789, 8, "1.23456789"),
            (5, 8, "0.00000005"),
            (10**26, 8, "1000000000000000000.00000000"),
            (7, 0, "7"),
            (150, 2, "1.50"),
            (10**40 + 1, 8, "100000000000000000000000000000000.00000001"),
            (
                2**256 - 1,
                18,
                "115792089237316195423570985008687907853269984665640564039457.584007913129639935",
            ),
            (-150, 2, "-1.50"),
        ],
    )
    def test_exact(self, value: int, decimals: int, expected: str) -> None:
        assert format_token_amount(value, decimals) == expected
