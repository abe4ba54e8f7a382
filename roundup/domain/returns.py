"""Pure functions for return projections and tax benefit.

Unlike the rest of the engine this module works in floating point rupees,
mirroring the real-valued growth and tax formulas. Values are rounded to two
decimals only when a projection is built.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from roundup.errors import UnsupportedInstrumentError

RETIREMENT_AGE = 60
MIN_YEARS = 5

NPS_RATE = 0.0711
INDEX_RATE = 0.1449
NPS_DEDUCTION_CAP = 200_000.0
NPS_WAGE_SHARE = 0.10

# (upper bound of bracket, marginal rate); the last bracket is unbounded
TAX_BRACKETS: tuple[tuple[float, float], ...] = (
    (700_000.0, 0.0),
    (1_000_000.0, 0.10),
    (1_200_000.0, 0.15),
    (1_500_000.0, 0.20),
    (float("inf"), 0.30),
)


class Instrument(str, Enum):
    """Investment vehicle for a projection."""

    NPS = "nps"
    INDEX = "index"


@dataclass(frozen=True)
class Projection:
    """Rounded projection for one principal."""

    amount: float
    profits: float
    tax_benefit: float
    real_value: float


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero.

    Negative halves round away from zero too (-2.675 -> -2.68), so a
    negative projection mirrors its positive counterpart. Negative values
    only arise when a configured growth rate is negative.
    """
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def investment_years(age: int) -> int:
    """Years until retirement, with a floor for those already at or past it."""
    return RETIREMENT_AGE - age if age < RETIREMENT_AGE else MIN_YEARS


def normalize_inflation(rate: float) -> float:
    """Treat values above 1 as percentages (5.5 -> 0.055)."""
    return rate / 100 if rate > 1 else rate


def tax_for_income(income: float) -> float:
    """Progressive tax on an annual income.

    Args:
        income: Annual income in rupees.

    Returns:
        Tax owed in rupees; 0 for incomes up to the first threshold.
    """
    tax = 0.0
    lower = 0.0
    for upper, rate in TAX_BRACKETS:
        if income <= lower:
            break
        tax += (min(income, upper) - lower) * rate
        lower = upper
    return tax


def nps_tax_benefit(
    principal: float,
    annual_income: float,
    deduction_cap: float = NPS_DEDUCTION_CAP,
) -> float:
    """Tax saved by deducting an NPS contribution from annual income.

    The deduction is capped at 10% of annual income and at ``deduction_cap``.
    """
    deduction = min(principal, annual_income * NPS_WAGE_SHARE, deduction_cap)
    return tax_for_income(annual_income) - tax_for_income(max(annual_income - deduction, 0.0))


def growth_rate(instrument: Instrument, nps_rate: float = NPS_RATE, index_rate: float = INDEX_RATE) -> float:
    if instrument is Instrument.NPS:
        return nps_rate
    if instrument is Instrument.INDEX:
        return index_rate
    raise UnsupportedInstrumentError("Unsupported instrument")


def project(
    principal: float,
    instrument: Instrument,
    years: int,
    inflation: float,
    annual_income: float,
    rate: float,
    deduction_cap: float = NPS_DEDUCTION_CAP,
) -> Projection:
    """Project compounded growth, inflation-adjusted value and tax benefit.

    Args:
        principal: Invested amount in rupees.
        instrument: Investment vehicle.
        years: Investment horizon.
        inflation: Annual inflation as a fraction.
        annual_income: Annual income in rupees, for the NPS tax benefit.
        rate: Annual growth rate as a fraction.
        deduction_cap: Absolute cap on the NPS deduction.

    Returns:
        Projection with every value rounded to two decimals.
    """
    nominal = principal * (1 + rate) ** years
    real_value = nominal / (1 + inflation) ** years

    tax_benefit = 0.0
    if instrument is Instrument.NPS:
        tax_benefit = nps_tax_benefit(principal, annual_income, deduction_cap)

    return Projection(
        amount=round2(principal),
        profits=round2(nominal - principal),
        tax_benefit=round2(tax_benefit),
        real_value=round2(real_value),
    )
