"""Tests for roundup.domain.periods."""

import pytest

from roundup.dates import parse_timestamp
from roundup.domain.models import Money
from roundup.domain.periods import parse_additive_periods, parse_aggregation_windows, parse_override_periods
from roundup.errors import InvalidAmountError, InvalidRequestError, InvalidTimestampError, OutOfRangeError

MAX_AMOUNT = Money(500_000 * 100)


class TestParseOverridePeriods:
    """Tests for parse_override_periods."""

    def test_parses_fields(self) -> None:
        """Should parse amount, bounds and a default id."""
        [period] = parse_override_periods(
            [{"fixed": "12.5", "start": "2023-07-01 00:00:00", "end": "2023-07-31 23:59:59"}], MAX_AMOUNT
        )
        assert period.id == "q-0"
        assert period.fixed == Money(1250)
        assert period.start == parse_timestamp("2023-07-01 00:00:00")
        assert period.end == parse_timestamp("2023-07-31 23:59:59")
        assert period.position == 0

    def test_keeps_given_id(self) -> None:
        """Should keep a caller-supplied id."""
        [period] = parse_override_periods(
            [{"id": "july", "fixed": 0, "start": "2023-07-01 00:00:00", "end": "2023-07-01 00:00:00"}], MAX_AMOUNT
        )
        assert period.id == "july"

    def test_start_after_end(self) -> None:
        """Should reject inverted bounds."""
        with pytest.raises(InvalidRequestError, match=r"q\[0\] start cannot be after end"):
            parse_override_periods(
                [{"fixed": 0, "start": "2023-08-01 00:00:00", "end": "2023-07-01 00:00:00"}], MAX_AMOUNT
            )

    def test_missing_fixed(self) -> None:
        """Should require the fixed amount."""
        with pytest.raises(InvalidAmountError, match=r"q\[0\]\.fixed"):
            parse_override_periods([{"start": "2023-07-01 00:00:00", "end": "2023-07-01 00:00:00"}], MAX_AMOUNT)


class TestParseAdditivePeriods:
    """Tests for parse_additive_periods."""

    def test_negative_extra(self) -> None:
        """Should reject negative extras."""
        with pytest.raises(OutOfRangeError, match=r"p\[1\]\.extra out of allowed range"):
            parse_additive_periods(
                [
                    {"extra": 1, "start": "2023-01-01 00:00:00", "end": "2023-01-02 00:00:00"},
                    {"extra": -1, "start": "2023-01-01 00:00:00", "end": "2023-01-02 00:00:00"},
                ],
                MAX_AMOUNT,
            )

    def test_bad_end_timestamp(self) -> None:
        """Should name the end field."""
        with pytest.raises(InvalidTimestampError, match=r"p\[0\]\.end must follow"):
            parse_additive_periods([{"extra": 1, "start": "2023-01-01 00:00:00", "end": "2023-01-02"}], MAX_AMOUNT)


class TestParseAggregationWindows:
    """Tests for parse_aggregation_windows."""

    def test_keeps_original_text(self) -> None:
        """Should keep the start and end text for reporting."""
        [window] = parse_aggregation_windows([{"start": "2023-01-01 00:00:00", "end": "2023-12-31 23:59:59"}])
        assert window.start_text == "2023-01-01 00:00:00"
        assert window.end_text == "2023-12-31 23:59:59"
        assert window.id == "k-0"

    def test_single_instant_window(self) -> None:
        """Should allow start equal to end."""
        [window] = parse_aggregation_windows([{"start": "2023-01-01 00:00:00", "end": "2023-01-01 00:00:00"}])
        assert window.start == window.end
