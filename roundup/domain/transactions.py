"""Pure functions for building, validating and serializing transactions.

This module contains the functional core for transaction records:
- No I/O operations (no console, no files)
- No side effects
- Raw mapping records in, typed Transactions out

Two validation profiles exist. The validator profile checks a declared
remanent and reports duplicates separately; the filter profile only rejects
malformed records and repeated instants.

All monetary amounts are in paise (Money type).
"""

from typing import Any

from roundup.dates import parse_timestamp, select_timestamp_text
from roundup.domain.models import (
    Instant,
    Money,
    Rejection,
    RejectionCode,
    Transaction,
    ValidationOutcome,
)
from roundup.domain.money import (
    ceil_to_round_unit,
    is_round_amount,
    parse_money_field,
    to_display,
    validate_range,
)
from roundup.errors import (
    InvalidAmountError,
    InvalidRequestError,
    InvalidTimestampError,
    OutOfRangeError,
)

# Errors confined to a single record; anything else aborts the batch
RECORD_ERRORS = (InvalidAmountError, InvalidRequestError, InvalidTimestampError, OutOfRangeError)


def build_transaction(
    timestamp: str,
    instant: Instant,
    amount: Money,
    position: int,
    ceiling: Money | None = None,
) -> Transaction:
    """Create a transaction with its base remanent.

    Args:
        timestamp: Original timestamp text.
        instant: Parsed instant.
        amount: Amount in paise.
        position: Index of the record in its input list.
        ceiling: Declared ceiling; defaults to the amount rounded up.

    Returns:
        Transaction whose final remanent equals its base remanent.
    """
    if ceiling is None:
        ceiling = ceil_to_round_unit(amount)
    remanent = Money(ceiling - amount)
    return Transaction(
        timestamp=timestamp,
        instant=instant,
        amount=amount,
        ceiling=ceiling,
        remanent_base=remanent,
        remanent_final=remanent,
        position=position,
    )


def _record_timestamp(record: Any, path: str) -> tuple[str, Instant]:
    try:
        text = select_timestamp_text(record)
    except InvalidTimestampError as e:
        raise InvalidRequestError(f"{path}.{e.message}") from e
    return text, parse_timestamp(text, f"{path}.timestamp")


def _record_amount(record: Any, path: str, max_amount: Money) -> Money:
    raw = record.get("amount") if isinstance(record, dict) else None
    amount = parse_money_field(raw, f"{path}.amount")
    validate_range(amount, Money(0), max_amount, f"{path}.amount")
    return amount


def parse_expense_record(record: Any, index: int, max_amount: Money) -> Transaction:
    """Parse a raw expense into a transaction with a computed ceiling.

    Raises:
        RoundupError: With a message qualified by ``expenses[index]``.
    """
    path = f"expenses[{index}]"
    timestamp, instant = _record_timestamp(record, path)
    amount = _record_amount(record, path, max_amount)
    return build_transaction(timestamp, instant, amount, index)


def parse_transaction_record(
    record: Any,
    index: int,
    max_amount: Money,
    source: str = "transactions",
) -> Transaction:
    """Parse a raw transaction, honouring a declared ceiling.

    A declared ceiling must not be below the amount and must be a whole
    multiple of the round unit.

    Raises:
        RoundupError: With a message qualified by ``source[index]``.
    """
    path = f"{source}[{index}]"
    timestamp, instant = _record_timestamp(record, path)
    amount = _record_amount(record, path, max_amount)

    ceiling: Money | None = None
    if "ceiling" in record:
        ceiling = parse_money_field(record["ceiling"], f"{path}.ceiling")
        if ceiling < amount:
            raise InvalidRequestError(f"{path}.ceiling cannot be less than amount")
        if not is_round_amount(ceiling):
            raise InvalidRequestError(f"{path}.ceiling must be a multiple of 100")

    return build_transaction(timestamp, instant, amount, index, ceiling)


def serialize_transaction(transaction: Transaction) -> dict[str, Any]:
    """Convert a transaction to its external record shape."""
    return {
        "timestamp": transaction.timestamp,
        "amount": to_display(transaction.amount),
        "ceiling": to_display(transaction.ceiling),
        "remanent": to_display(transaction.remanent_final),
        "remanentBase": to_display(transaction.remanent_base),
        "remanentFinal": to_display(transaction.remanent_final),
    }


def serialize_rejection(rejection: Rejection) -> dict[str, Any]:
    record = rejection.record
    if isinstance(record, Transaction):
        record = serialize_transaction(record)
    return {
        "transaction": record,
        "code": rejection.code.value,
        "message": rejection.message,
    }


def _duplicate_message(first_index: int) -> str:
    return f"Duplicate timestamp with transactions[{first_index}]"


def validate_batch(records: list[Any], max_amount: Money) -> ValidationOutcome:
    """Partition records using the validator profile.

    Malformed records are rejected as INVALID_TRANSACTION with the raw record.
    A repeated instant is rejected as DUPLICATE_TIMESTAMP and also listed in
    ``duplicates``. A declared ``remanent`` must equal ceiling - amount, else
    REMANENT_MISMATCH.

    Args:
        records: Raw transaction records.
        max_amount: Exclusive upper bound for amounts in paise.

    Returns:
        ValidationOutcome with accepted transactions in input order.
    """
    valid: list[Transaction] = []
    invalid: list[Rejection] = []
    duplicates: list[Transaction] = []
    seen: dict[Instant, int] = {}

    for index, record in enumerate(records):
        try:
            transaction = parse_transaction_record(record, index, max_amount)
        except RECORD_ERRORS as e:
            invalid.append(Rejection(record, RejectionCode.INVALID_TRANSACTION, e.message))
            continue

        first = seen.get(transaction.instant)
        if first is not None:
            invalid.append(Rejection(transaction, RejectionCode.DUPLICATE_TIMESTAMP, _duplicate_message(first)))
            duplicates.append(transaction)
            continue
        seen[transaction.instant] = index

        if "remanent" in record:
            try:
                declared = parse_money_field(record["remanent"], f"transactions[{index}].remanent")
            except InvalidAmountError as e:
                invalid.append(Rejection(record, RejectionCode.INVALID_TRANSACTION, e.message))
                continue
            if declared != transaction.remanent_base:
                invalid.append(
                    Rejection(transaction, RejectionCode.REMANENT_MISMATCH, "remanent must equal ceiling - amount")
                )
                continue

        valid.append(transaction)

    return ValidationOutcome(valid=valid, invalid=invalid, duplicates=duplicates)


def filter_batch(records: list[Any], max_amount: Money) -> ValidationOutcome:
    """Partition records using the filter profile.

    Rejections carry the raw record. There is no remanent check and
    ``duplicates`` is always empty.

    Args:
        records: Raw transaction records.
        max_amount: Exclusive upper bound for amounts in paise.

    Returns:
        ValidationOutcome with accepted transactions in input order.
    """
    valid: list[Transaction] = []
    invalid: list[Rejection] = []
    seen: dict[Instant, int] = {}

    for index, record in enumerate(records):
        try:
            transaction = parse_transaction_record(record, index, max_amount)
        except RECORD_ERRORS as e:
            invalid.append(Rejection(record, RejectionCode.INVALID_TRANSACTION, e.message))
            continue

        first = seen.get(transaction.instant)
        if first is not None:
            invalid.append(Rejection(record, RejectionCode.DUPLICATE_TIMESTAMP, _duplicate_message(first)))
            continue
        seen[transaction.instant] = index

        valid.append(transaction)

    return ValidationOutcome(valid=valid, invalid=invalid, duplicates=[])
