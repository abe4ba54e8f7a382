"""Parsing of override (q), additive (p) and aggregation (k) period records.

Any malformed period aborts the whole request, so these functions raise
instead of collecting rejections.
"""

from typing import Any

from roundup.dates import parse_timestamp
from roundup.domain.models import AdditivePeriod, AggregationWindow, Instant, Money, OverridePeriod
from roundup.domain.money import parse_money_field, validate_range
from roundup.errors import InvalidRequestError


def _field(record: Any, key: str) -> Any:
    return record.get(key) if isinstance(record, dict) else None


def _bounds(record: Any, path: str) -> tuple[Instant, Instant]:
    start = parse_timestamp(_field(record, "start"), f"{path}.start")
    end = parse_timestamp(_field(record, "end"), f"{path}.end")
    if start > end:
        raise InvalidRequestError(f"{path} start cannot be after end")
    return start, end


def _period_id(record: Any, prefix: str, index: int) -> str:
    value = _field(record, "id")
    return f"{prefix}-{index}" if value is None else str(value)


def parse_override_periods(records: list[Any], max_amount: Money) -> list[OverridePeriod]:
    """Parse q records into override periods, in input order."""
    periods = []
    for index, record in enumerate(records):
        path = f"q[{index}]"
        fixed = parse_money_field(_field(record, "fixed"), f"{path}.fixed")
        validate_range(fixed, Money(0), max_amount, f"{path}.fixed")
        start, end = _bounds(record, path)
        periods.append(
            OverridePeriod(id=_period_id(record, "q", index), fixed=fixed, start=start, end=end, position=index)
        )
    return periods


def parse_additive_periods(records: list[Any], max_amount: Money) -> list[AdditivePeriod]:
    """Parse p records into additive periods, in input order."""
    periods = []
    for index, record in enumerate(records):
        path = f"p[{index}]"
        extra = parse_money_field(_field(record, "extra"), f"{path}.extra")
        validate_range(extra, Money(0), max_amount, f"{path}.extra")
        start, end = _bounds(record, path)
        periods.append(
            AdditivePeriod(id=_period_id(record, "p", index), extra=extra, start=start, end=end, position=index)
        )
    return periods


def parse_aggregation_windows(records: list[Any]) -> list[AggregationWindow]:
    """Parse k records into aggregation windows, keeping their original text."""
    windows = []
    for index, record in enumerate(records):
        path = f"k[{index}]"
        start, end = _bounds(record, path)
        windows.append(
            AggregationWindow(
                id=_period_id(record, "k", index),
                start=start,
                end=end,
                start_text=_field(record, "start"),
                end_text=_field(record, "end"),
                position=index,
            )
        )
    return windows
