"""Domain type definitions for roundup.

These NewTypes and records describe the values the rule engine works on:
- Money: Amount in paise (minor units)
- Instant: Seconds since the Unix epoch
- Transaction, periods and windows: parsed, validated input records
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NewType

# Money amounts are stored as paise (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Absolute point in time, independent of the display timezone
Instant = NewType("Instant", int)


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction with its round-up amounts."""

    timestamp: str
    instant: Instant
    amount: Money
    ceiling: Money
    remanent_base: Money
    remanent_final: Money
    position: int


@dataclass(frozen=True)
class OverridePeriod:
    """Window that replaces the remanent with a fixed amount."""

    id: str
    fixed: Money
    start: Instant
    end: Instant  # inclusive
    position: int


@dataclass(frozen=True)
class AdditivePeriod:
    """Window that adds an extra amount on top of the remanent."""

    id: str
    extra: Money
    start: Instant
    end: Instant  # inclusive
    position: int


@dataclass(frozen=True)
class AggregationWindow:
    """Independent inclusive range over which remanents are summed."""

    id: str
    start: Instant
    end: Instant  # inclusive
    start_text: str
    end_text: str
    position: int


@dataclass(frozen=True)
class WindowSum:
    """Aggregated remanent for one window."""

    window: AggregationWindow
    amount: Money


class RejectionCode(str, Enum):
    """Reason a record was excluded from a batch."""

    INVALID_TRANSACTION = "INVALID_TRANSACTION"
    DUPLICATE_TIMESTAMP = "DUPLICATE_TIMESTAMP"
    REMANENT_MISMATCH = "REMANENT_MISMATCH"


@dataclass(frozen=True)
class Rejection:
    """A record excluded from a batch, with the reason."""

    record: Any
    code: RejectionCode
    message: str


@dataclass(frozen=True)
class ValidationOutcome:
    """Partition of a batch into accepted and rejected records."""

    valid: list[Transaction]
    invalid: list[Rejection]
    duplicates: list[Transaction]
