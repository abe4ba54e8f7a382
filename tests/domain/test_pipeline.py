"""Tests for roundup.domain.pipeline."""

from roundup.dates import parse_timestamp
from roundup.domain.models import Money
from roundup.domain.periods import parse_additive_periods, parse_aggregation_windows, parse_override_periods
from roundup.domain.pipeline import apply_rules, compute_totals
from roundup.domain.transactions import build_transaction

MAX_AMOUNT = Money(500_000 * 100)


def sample_transactions():
    rows = [
        ("2023-10-12 20:15:00", 25000),
        ("2023-02-28 15:49:00", 37500),
        ("2023-07-01 21:59:00", 62000),
        ("2023-12-17 08:09:00", 48000),
    ]
    return [build_transaction(ts, parse_timestamp(ts), Money(amount), i) for i, (ts, amount) in enumerate(rows)]


def sample_rules():
    overrides = parse_override_periods(
        [{"fixed": 0, "start": "2023-07-01 00:00:00", "end": "2023-07-31 23:59:59"}], MAX_AMOUNT
    )
    additions = parse_additive_periods(
        [{"extra": 25, "start": "2023-10-01 08:00:00", "end": "2023-12-31 19:59:59"}], MAX_AMOUNT
    )
    windows = parse_aggregation_windows(
        [
            {"start": "2023-03-01 00:00:00", "end": "2023-11-30 23:59:59"},
            {"start": "2023-01-01 00:00:00", "end": "2023-12-31 23:59:59"},
        ]
    )
    return overrides, additions, windows


class TestApplyRules:
    """Tests for apply_rules."""

    def test_base_remanents(self) -> None:
        """Should round each amount up to the next hundred rupees."""
        transactions = sample_transactions()
        assert [t.remanent_base for t in transactions] == [5000, 2500, 8000, 2000]
        assert compute_totals(transactions, final=False).remanent == Money(17500)

    def test_reference_scenario(self) -> None:
        """Should apply override, then additive, then window sums."""
        outcome = apply_rules(sample_transactions(), *sample_rules())

        finals = {t.timestamp: t.remanent_final for t in outcome.transactions}
        assert finals["2023-07-01 21:59:00"] == 0
        assert finals["2023-10-12 20:15:00"] == 7500
        assert finals["2023-12-17 08:09:00"] == 4500
        assert finals["2023-02-28 15:49:00"] == 2500

        assert [s.amount for s in outcome.window_sums] == [7500, 14500]

    def test_keeps_input_order(self) -> None:
        """Should return transactions in their original order."""
        outcome = apply_rules(sample_transactions(), *sample_rules())
        assert [t.position for t in outcome.transactions] == [0, 1, 2, 3]

    def test_does_not_mutate_inputs(self) -> None:
        """Should leave the caller's transactions untouched."""
        transactions = sample_transactions()
        apply_rules(transactions, *sample_rules())
        assert transactions[2].remanent_final == 8000

    def test_additive_applies_on_top_of_override(self) -> None:
        """Should add extras to the overridden value, not the base."""
        transactions = sample_transactions()
        overrides = parse_override_periods(
            [{"fixed": 10, "start": "2023-10-01 00:00:00", "end": "2023-10-31 23:59:59"}], MAX_AMOUNT
        )
        additions = parse_additive_periods(
            [
                {"extra": 5, "start": "2023-10-01 00:00:00", "end": "2023-10-31 23:59:59"},
                {"extra": 2.5, "start": "2023-10-12 00:00:00", "end": "2023-10-12 23:59:59"},
            ],
            MAX_AMOUNT,
        )

        outcome = apply_rules(transactions, overrides, additions, [])

        assert outcome.transactions[0].remanent_final == Money(1750)
        assert outcome.window_sums == []

    def test_no_rules(self) -> None:
        """Should keep base remanents when no periods are given."""
        outcome = apply_rules(sample_transactions(), [], [], [])
        assert [t.remanent_final for t in outcome.transactions] == [5000, 2500, 8000, 2000]

    def test_totals_use_final_remanent(self) -> None:
        """Should total the final remanents after the rules."""
        outcome = apply_rules(sample_transactions(), *sample_rules())
        totals = compute_totals(outcome.transactions)
        assert totals.amount == Money(172500)
        assert totals.ceiling == Money(190000)
        assert totals.remanent == Money(14500)
