"""Rule pipeline: base remanent, override, additive top-up, window sums.

The order is fixed. Override amounts replace the base remanent, additive
extras are added on top of whatever the override step produced, and window
sums are taken over the final values.
"""

from dataclasses import dataclass, replace

from roundup.domain.models import (
    AdditivePeriod,
    AggregationWindow,
    Money,
    OverridePeriod,
    Transaction,
    WindowSum,
)
from roundup.domain.rules import accumulate_extras, resolve_overrides, sum_windows


@dataclass(frozen=True)
class RuleOutcome:
    """Transactions with final remanents, plus per-window sums."""

    transactions: list[Transaction]
    window_sums: list[WindowSum]


@dataclass(frozen=True)
class Totals:
    """Running totals across accepted transactions."""

    amount: Money
    ceiling: Money
    remanent: Money


def apply_rules(
    transactions: list[Transaction],
    overrides: list[OverridePeriod],
    additions: list[AdditivePeriod],
    windows: list[AggregationWindow],
) -> RuleOutcome:
    """Run the temporal rules over a batch of accepted transactions.

    Args:
        transactions: Accepted transactions in input order, with unique instants.
        overrides: Override periods.
        additions: Additive periods.
        windows: Aggregation windows.

    Returns:
        RuleOutcome with transactions in their original order.
    """
    order = sorted(range(len(transactions)), key=lambda i: transactions[i].instant)
    instants = [transactions[i].instant for i in order]

    fixed = resolve_overrides(instants, overrides)
    extras = accumulate_extras(instants, additions)

    finals: list[Money] = []
    for i, override, extra in zip(order, fixed, extras):
        base = transactions[i].remanent_base if override is None else override
        finals.append(Money(base + extra))

    updated = list(transactions)
    for i, final in zip(order, finals):
        updated[i] = replace(transactions[i], remanent_final=final)

    return RuleOutcome(
        transactions=updated,
        window_sums=sum_windows(instants, finals, windows),
    )


def compute_totals(transactions: list[Transaction], final: bool = True) -> Totals:
    """Total the amount, ceiling and remanent of a batch.

    Args:
        transactions: Transactions to total.
        final: Use the final remanent (True) or the base remanent (False).

    Returns:
        Totals in paise.
    """
    return Totals(
        amount=Money(sum(t.amount for t in transactions)),
        ceiling=Money(sum(t.ceiling for t in transactions)),
        remanent=Money(sum(t.remanent_final if final else t.remanent_base for t in transactions)),
    )
