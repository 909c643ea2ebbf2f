"""Tests for ot_common.currency and ot_common.datetime_utils."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

from src.ot_common.currency import as_number, format_compact_usd
from src.ot_common.datetime_utils import to_iso_utc


class TestAsNumber:
    def test_none_is_zero(self) -> None:
        assert as_number(None) == 0

    def test_integral_decimal_becomes_int(self) -> None:
        result = as_number(Decimal("150000"))
        assert result == 150000
        assert isinstance(result, int)

    def test_fractional_decimal_becomes_float(self) -> None:
        assert as_number(Decimal("150000.50")) == 150000.5

    def test_integral_float_becomes_int(self) -> None:
        result = as_number(2.0)
        assert result == 2
        assert isinstance(result, int)

    def test_non_finite_is_zero(self) -> None:
        assert as_number(Decimal("NaN")) == 0
        assert as_number(float("inf")) == 0

    def test_int_passthrough(self) -> None:
        assert as_number(7) == 7


class TestFormatCompactUsd:
    def test_millions_one_decimal(self) -> None:
        assert format_compact_usd(1_500_000) == "$1.5M"

    def test_exact_million_keeps_decimal(self) -> None:
        assert format_compact_usd(1_000_000) == "$1.0M"

    def test_millions_round_binary_value(self) -> None:
        # 1.45 is stored just below the tie
        assert format_compact_usd(1_450_000) == "$1.4M"

    def test_millions_exact_tie_rounds_up(self) -> None:
        assert format_compact_usd(1_250_000) == "$1.3M"

    def test_thousands_no_decimal(self) -> None:
        assert format_compact_usd(45_000) == "$45K"

    def test_thousands_round_half_up(self) -> None:
        assert format_compact_usd(1_500) == "$2K"

    def test_below_thousand(self) -> None:
        assert format_compact_usd(999) == "$999"

    def test_below_thousand_fraction(self) -> None:
        assert format_compact_usd(999.5) == "$999.5"

    def test_zero(self) -> None:
        assert format_compact_usd(0) == "$0"


class TestToIsoUtc:
    def test_naive_is_treated_as_utc(self) -> None:
        assert to_iso_utc(datetime(2025, 3, 1, 12, 0, 0)) == "2025-03-01T12:00:00.000Z"

    def test_aware_is_converted(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        dt = datetime(2025, 3, 1, 14, 0, 0, 123000, tzinfo=plus_two)
        assert to_iso_utc(dt) == "2025-03-01T12:00:00.123Z"

    def test_utc_passthrough(self) -> None:
        dt = datetime(2024, 12, 31, 23, 59, 59, tzinfo=UTC)
        assert to_iso_utc(dt) == "2024-12-31T23:59:59.000Z"
