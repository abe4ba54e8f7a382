"""Pure functions for exact money parsing, rounding and display.

This module contains the functional core for money handling:
- No I/O operations
- No floating point arithmetic on amounts
- Half-up rounding performed on the decimal text

All monetary amounts are in paise (Money type).
"""

import math
import re
from decimal import Decimal

from roundup.domain.models import Money
from roundup.errors import InvalidAmountError, OutOfRangeError

MONEY_RE = re.compile(r"^([+-]?)(\d+)(?:\.(\d+))?$", re.ASCII)

# Ceilings are whole multiples of 100 rupees (10000 paise)
ROUND_UNIT = Money(10000)


def _money_text(raw: object) -> str:
    if isinstance(raw, bool):
        raise InvalidAmountError("must be a number or numeric string")

    if isinstance(raw, int):
        return str(raw)

    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise InvalidAmountError("must be a finite number")
        raw = Decimal(repr(raw))

    if isinstance(raw, Decimal):
        if not raw.is_finite():
            raise InvalidAmountError("must be a finite number")
        # Fixed-point, never exponent notation (1e-05, 1E+2)
        return format(raw, "f")

    if isinstance(raw, str):
        trimmed = raw.strip()
        if not trimmed:
            raise InvalidAmountError("must not be empty")
        return trimmed

    raise InvalidAmountError("must be a number or numeric string")


def parse_money(raw: object) -> Money:
    """Parse a decimal number or numeric string into paise.

    Digits beyond the second decimal place only decide rounding: a third
    fractional digit of 5 or more rounds the hundredths up, carrying into
    the whole part.

    Args:
        raw: int, float, Decimal or string such as "12.345".

    Returns:
        Amount in paise.

    Raises:
        InvalidAmountError: If the value is not a finite decimal.
    """
    match = MONEY_RE.match(_money_text(raw))
    if not match:
        raise InvalidAmountError("must be a valid decimal value")

    sign, whole_text, frac = match.group(1), match.group(2), match.group(3) or ""
    digits = (frac + "000")[:3]

    whole = int(whole_text)
    cents = int(digits[:2])
    if int(digits[2]) >= 5:
        cents += 1
    if cents >= 100:
        whole += 1
        cents -= 100

    value = whole * 100 + cents
    return Money(-value if sign == "-" else value)


def parse_money_field(raw: object, path: str) -> Money:
    """Parse a money field, qualifying any error with the field's path.

    Raises:
        InvalidAmountError: e.g. "transactions[2].amount must be a valid decimal value".
    """
    try:
        return parse_money(raw)
    except InvalidAmountError as e:
        raise InvalidAmountError(f"{path} {e.message}") from e


def to_display(amount: Money) -> float:
    """Convert paise to a two-decimal number for serialization.

    Args:
        amount: Amount in paise.

    Returns:
        Amount in rupees, never negative zero.
    """
    whole, frac = divmod(abs(amount), 100)
    sign = "-" if amount < 0 else ""
    return float(f"{sign}{whole}.{frac:02d}")


def format_money(amount: Money) -> str:
    """Format paise for display (e.g., "1,234.50" or "-0.05")."""
    whole, frac = divmod(abs(amount), 100)
    sign = "-" if amount < 0 else ""
    return f"{sign}{whole:,}.{frac:02d}"


def validate_range(amount: Money, min_inclusive: Money, max_exclusive: Money, field_name: str) -> None:
    """Check that an amount lies in [min_inclusive, max_exclusive).

    Raises:
        OutOfRangeError: If the amount is outside the range.
    """
    if amount < min_inclusive or amount >= max_exclusive:
        raise OutOfRangeError(field_name)


def ceil_to_round_unit(amount: Money, unit: Money = ROUND_UNIT) -> Money:
    """Round up to the next multiple of ``unit``.

    Rounds toward positive infinity, so -50 becomes 0 and exact multiples are
    returned unchanged.

    Args:
        amount: Amount in paise.
        unit: Rounding unit in paise.

    Returns:
        Smallest multiple of ``unit`` that is >= amount.
    """
    return Money(-(-amount // unit) * unit)


def is_round_amount(amount: Money, unit: Money = ROUND_UNIT) -> bool:
    return amount % unit == 0
