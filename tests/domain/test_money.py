"""Tests for roundup.domain.money pure functions."""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from roundup.domain.models import Money
from roundup.domain.money import (
    ROUND_UNIT,
    ceil_to_round_unit,
    format_money,
    parse_money,
    parse_money_field,
    to_display,
    validate_range,
)
from roundup.errors import InvalidAmountError, OutOfRangeError


class TestParseMoney:
    """Tests for parse_money."""

    def test_parses_integer(self) -> None:
        """Should convert whole rupees to paise."""
        assert parse_money(250) == Money(25000)

    def test_parses_float(self) -> None:
        """Should parse a float through its decimal text."""
        assert parse_money(12.34) == Money(1234)

    def test_parses_string_with_whitespace(self) -> None:
        """Should trim surrounding whitespace."""
        assert parse_money("  99.5 ") == Money(9950)

    def test_parses_decimal(self) -> None:
        """Should accept Decimal values."""
        assert parse_money(Decimal("7.05")) == Money(705)

    def test_parses_tiny_float(self) -> None:
        """Should read floats whose repr uses exponent notation."""
        assert parse_money(0.00001) == Money(0)
        assert parse_money(1e-3) == Money(0)
        assert parse_money(5e-3) == Money(1)

    def test_parses_large_float(self) -> None:
        """Should read large floats written with an exponent."""
        assert parse_money(1e16) == Money(10**18)

    def test_parses_exponent_decimal(self) -> None:
        """Should accept Decimals in exponent form."""
        assert parse_money(Decimal("1E+2")) == Money(10000)
        assert parse_money(Decimal("2.5E-1")) == Money(25)

    def test_rounds_half_up_on_third_digit(self) -> None:
        """Should round up when the third decimal is 5 or more."""
        assert parse_money("1.005") == Money(101)
        assert parse_money("1.004") == Money(100)

    def test_ignores_digits_after_third(self) -> None:
        """Should decide rounding on the third decimal only."""
        assert parse_money("0.0049") == Money(0)

    def test_carries_into_whole_part(self) -> None:
        """Should carry 100 hundredths into the whole part."""
        assert parse_money("0.995") == Money(100)
        assert parse_money("9.999") == Money(1000)

    def test_parses_negative(self) -> None:
        """Should keep the sign."""
        assert parse_money("-12.50") == Money(-1250)

    def test_parses_explicit_plus_sign(self) -> None:
        """Should accept a leading plus sign."""
        assert parse_money("+3") == Money(300)

    @pytest.mark.parametrize("raw", ["abc", "1.2.3", "1e5", ".5", "5.", "1,000", "₹10"])
    def test_rejects_malformed_text(self, raw: str) -> None:
        """Should reject anything other than [sign]digits[.digits]."""
        with pytest.raises(InvalidAmountError, match="must be a valid decimal value"):
            parse_money(raw)

    def test_rejects_empty_string(self) -> None:
        """Should reject blank strings."""
        with pytest.raises(InvalidAmountError, match="must not be empty"):
            parse_money("   ")

    @pytest.mark.parametrize("raw", [float("nan"), float("inf"), float("-inf")])
    def test_rejects_non_finite(self, raw: float) -> None:
        """Should reject NaN and infinities."""
        with pytest.raises(InvalidAmountError, match="must be a finite number"):
            parse_money(raw)

    @pytest.mark.parametrize("raw", [None, True, [1], {"amount": 1}])
    def test_rejects_other_types(self, raw: object) -> None:
        """Should reject booleans, None and containers."""
        with pytest.raises(InvalidAmountError, match="must be a number or numeric string"):
            parse_money(raw)

    def test_field_error_is_path_qualified(self) -> None:
        """Should prefix the field path to the message."""
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_money_field("oops", "transactions[2].amount")
        assert exc_info.value.message == "transactions[2].amount must be a valid decimal value"


class TestToDisplay:
    """Tests for to_display and format_money."""

    def test_two_decimal_value(self) -> None:
        """Should produce rupees with two decimals."""
        assert to_display(Money(12345)) == 123.45

    def test_small_negative(self) -> None:
        """Should keep the sign of sub-rupee negatives."""
        assert to_display(Money(-5)) == -0.05

    def test_zero_is_not_negative(self) -> None:
        """Should never produce negative zero."""
        assert str(to_display(Money(0))) == "0.0"

    def test_format_money_groups_thousands(self) -> None:
        """Should group thousands with commas."""
        assert format_money(Money(123456789)) == "1,234,567.89"
        assert format_money(Money(-5)) == "-0.05"

    @given(st.integers(min_value=-(10**12), max_value=10**12))
    def test_round_trip_through_display(self, paise: int) -> None:
        """Should reproduce the same paise after display and re-parse."""
        assert parse_money(to_display(Money(paise))) == paise


class TestValidateRange:
    """Tests for validate_range."""

    def test_accepts_lower_bound(self) -> None:
        """Should include the lower bound."""
        validate_range(Money(0), Money(0), Money(100), "amount")

    def test_rejects_upper_bound(self) -> None:
        """Should exclude the upper bound."""
        with pytest.raises(OutOfRangeError, match="amount out of allowed range"):
            validate_range(Money(100), Money(0), Money(100), "amount")

    def test_rejects_below_lower_bound(self) -> None:
        """Should reject negatives when the range starts at zero."""
        with pytest.raises(OutOfRangeError):
            validate_range(Money(-1), Money(0), Money(100), "amount")


class TestCeilToRoundUnit:
    """Tests for ceil_to_round_unit."""

    def test_rounds_up_to_next_hundred_rupees(self) -> None:
        """Should round 250 up to 300."""
        assert ceil_to_round_unit(Money(25000)) == Money(30000)

    def test_keeps_exact_multiple(self) -> None:
        """Should leave multiples unchanged."""
        assert ceil_to_round_unit(Money(40000)) == Money(40000)

    def test_rounds_paise_up(self) -> None:
        """Should round a single paisa above a multiple up a whole unit."""
        assert ceil_to_round_unit(Money(40001)) == Money(50000)

    def test_negative_rounds_toward_positive_infinity(self) -> None:
        """Should round -50 rupees up to 0."""
        assert ceil_to_round_unit(Money(-5000)) == Money(0)
        assert ceil_to_round_unit(Money(-15000)) == Money(-10000)

    def test_custom_unit(self) -> None:
        """Should accept a different rounding unit."""
        assert ceil_to_round_unit(Money(1234), Money(100)) == Money(1300)

    @given(st.integers(min_value=0, max_value=10**12))
    def test_ceiling_properties(self, paise: int) -> None:
        """Should return the smallest multiple that is not below the amount."""
        ceiling = ceil_to_round_unit(Money(paise))
        assert ceiling % ROUND_UNIT == 0
        assert ceiling >= paise
        assert ceiling - paise < ROUND_UNIT
        assert (ceiling == paise) == (paise % ROUND_UNIT == 0)
