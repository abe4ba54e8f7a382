"""Request-level operations for roundup.

Each function takes a plain payload mapping (as decoded from JSON), runs the
engine and returns a plain response mapping. Field errors raise typed
``RoundupError`` subclasses; per-record failures inside a batch are reported
in the response instead.
"""

import math
from typing import Any

from roundup.config import DEFAULT_SETTINGS, Settings
from roundup.domain.models import Money, Transaction, WindowSum
from roundup.domain.money import parse_money_field, to_display
from roundup.domain.periods import parse_additive_periods, parse_aggregation_windows, parse_override_periods
from roundup.domain.pipeline import RuleOutcome, apply_rules, compute_totals
from roundup.domain.returns import (
    Instrument,
    growth_rate,
    investment_years,
    normalize_inflation,
    project,
)
from roundup.domain.transactions import (
    filter_batch,
    parse_expense_record,
    serialize_rejection,
    serialize_transaction,
    validate_batch,
)
from roundup.errors import InvalidRequestError, PayloadTooLargeError, UnsupportedInstrumentError
from roundup.logging_setup import get_logger

logger = get_logger("roundup.api")


def _field(payload: Any, key: str) -> Any:
    return payload.get(key) if isinstance(payload, dict) else None


def require_records(value: Any, field_name: str, max_records: int) -> list[Any]:
    """Check that a field is a list within the record cap.

    Raises:
        InvalidRequestError: If the value is not a list.
        PayloadTooLargeError: If it holds more than ``max_records`` items.
    """
    if not isinstance(value, list):
        raise InvalidRequestError(f"{field_name} must be an array")
    if len(value) > max_records:
        raise PayloadTooLargeError(
            f"{field_name} cannot exceed {max_records} records",
            details={"field": field_name, "limit": max_records, "received": len(value)},
        )
    return value


def _optional_records(payload: Any, field_name: str, max_records: int) -> list[Any]:
    # Only a missing or null field defaults to empty; other shapes are rejected
    value = _field(payload, field_name)
    return require_records([] if value is None else value, field_name, max_records)


def _totals_payload(transactions: list[Transaction], final: bool = True) -> dict[str, float]:
    totals = compute_totals(transactions, final=final)
    return {
        "transactionsTotalAmount": to_display(totals.amount),
        "transactionsTotalCeiling": to_display(totals.ceiling),
        "transactionsTotalRemanent": to_display(totals.remanent),
    }


def _window_payload(window_sum: WindowSum) -> dict[str, Any]:
    return {
        "start": window_sum.window.start_text,
        "end": window_sum.window.end_text,
        "amount": to_display(window_sum.amount),
    }


def parse_transactions(payload: Any, settings: Settings = DEFAULT_SETTINGS) -> dict[str, Any]:
    """Compute ceilings and remanents for a list of expenses.

    Any malformed expense fails the whole request.
    """
    expenses = require_records(_field(payload, "expenses"), "expenses", settings.max_records)
    transactions = [parse_expense_record(expense, i, settings.max_amount) for i, expense in enumerate(expenses)]
    logger.debug("Parsed %d expenses", len(transactions))

    return {
        "transactions": [serialize_transaction(t) for t in transactions],
        **_totals_payload(transactions, final=False),
    }


def validate_transactions(payload: Any, settings: Settings = DEFAULT_SETTINGS) -> dict[str, Any]:
    """Partition transactions into valid, invalid and duplicate records."""
    parse_money_field(_field(payload, "wage"), "wage")
    records = require_records(_field(payload, "transactions"), "transactions", settings.max_records)

    outcome = validate_batch(records, settings.max_amount)
    logger.info(
        "Validated %d transactions: %d valid, %d invalid, %d duplicates",
        len(records),
        len(outcome.valid),
        len(outcome.invalid),
        len(outcome.duplicates),
    )

    return {
        "valid": [serialize_transaction(t) for t in outcome.valid],
        "invalid": [serialize_rejection(r) for r in outcome.invalid],
        "duplicates": [serialize_transaction(t) for t in outcome.duplicates],
    }


def _run_filter(payload: Any, settings: Settings) -> tuple[RuleOutcome, list[Any]]:
    records = require_records(_field(payload, "transactions"), "transactions", settings.max_records)
    raw_q = _optional_records(payload, "q", settings.max_records)
    raw_p = _optional_records(payload, "p", settings.max_records)
    raw_k = _optional_records(payload, "k", settings.max_records)

    outcome = filter_batch(records, settings.max_amount)
    overrides = parse_override_periods(raw_q, settings.max_amount)
    additions = parse_additive_periods(raw_p, settings.max_amount)
    windows = parse_aggregation_windows(raw_k)

    logger.debug(
        "Applying %d override, %d additive and %d window rules to %d transactions",
        len(overrides),
        len(additions),
        len(windows),
        len(outcome.valid),
    )
    result = apply_rules(outcome.valid, overrides, additions, windows)
    return result, [serialize_rejection(r) for r in outcome.invalid]


def filter_transactions(payload: Any, settings: Settings = DEFAULT_SETTINGS) -> dict[str, Any]:
    """Apply the q, p and k rules and sum remanents per window."""
    result, invalid = _run_filter(payload, settings)

    return {
        "valid": [serialize_transaction(t) for t in result.transactions],
        "invalid": invalid,
        "savingsByDates": [_window_payload(w) for w in result.window_sums],
        **_totals_payload(result.transactions),
    }


def _parse_age(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        # JSON decoders may hand back 29.0 for 29
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise InvalidRequestError("age must be an integer")
    if value < 0 or value > 120:
        raise InvalidRequestError("age must be between 0 and 120")
    return value


def _parse_inflation(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidRequestError("inflation must be a finite number")
    if value < 0:
        raise InvalidRequestError("inflation cannot be negative")
    return normalize_inflation(float(value))


def calculate_returns(
    payload: Any,
    instrument: Instrument | str,
    settings: Settings = DEFAULT_SETTINGS,
) -> dict[str, Any]:
    """Project returns for each aggregation window.

    Args:
        payload: Mapping with age, wage, inflation, transactions and q/p/k.
        instrument: "nps" or "index".
        settings: Limits and rates.

    Returns:
        Totals plus one projection per window.

    Raises:
        UnsupportedInstrumentError: If the instrument is unknown.
    """
    try:
        instrument = Instrument(instrument)
    except ValueError as e:
        raise UnsupportedInstrumentError("Unsupported instrument") from e

    age = _parse_age(_field(payload, "age"))
    inflation = _parse_inflation(_field(payload, "inflation"))
    wage = parse_money_field(_field(payload, "wage"), "wage")
    if wage <= Money(0):
        raise InvalidRequestError("wage must be greater than 0")

    years = investment_years(age)
    annual_income = wage / 100 * 12
    rate = growth_rate(instrument, settings.nps_rate, settings.index_rate)

    result, _ = _run_filter(payload, settings)
    logger.info("Projecting %s returns over %d years for %d windows", instrument.value, years, len(result.window_sums))

    savings = []
    for window_sum in result.window_sums:
        projection = project(
            principal=window_sum.amount / 100,
            instrument=instrument,
            years=years,
            inflation=inflation,
            annual_income=annual_income,
            rate=rate,
            deduction_cap=settings.nps_deduction_cap,
        )
        savings.append(
            {
                "start": window_sum.window.start_text,
                "end": window_sum.window.end_text,
                "amount": projection.amount,
                "profits": projection.profits,
                "taxBenefit": projection.tax_benefit,
                "realValue": projection.real_value,
            }
        )

    return {
        **_totals_payload(result.transactions),
        "savingsByDates": savings,
    }
