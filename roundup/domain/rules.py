"""Pure interval algorithms for the temporal rules.

Each function walks a list of transaction instants that is already sorted
ascending and returns one result per instant (or per window), aligned with
its input. All amounts are in paise (Money type).
"""

import heapq
from bisect import bisect_left, bisect_right
from itertools import accumulate

from roundup.domain.models import (
    AdditivePeriod,
    AggregationWindow,
    Instant,
    Money,
    OverridePeriod,
    WindowSum,
)


def resolve_overrides(instants: list[Instant], periods: list[OverridePeriod]) -> list[Money | None]:
    """Find the winning override amount for each instant.

    Among the periods containing an instant, the one that started most
    recently wins; on equal starts the one declared first wins.

    Args:
        instants: Transaction instants, sorted ascending.
        periods: Override periods in input order.

    Returns:
        Fixed amount of the winning period per instant, or None where no
        period applies.
    """
    if not periods:
        return [None] * len(instants)

    pending = sorted(periods, key=lambda period: (period.start, period.position))
    # Min-heap on (-start, position): latest start first, then earliest declared
    active: list[tuple[int, int, OverridePeriod]] = []
    next_pending = 0
    winners: list[Money | None] = []

    for instant in instants:
        while next_pending < len(pending) and pending[next_pending].start <= instant:
            period = pending[next_pending]
            heapq.heappush(active, (-period.start, period.position, period))
            next_pending += 1

        # Only the current top needs to be unexpired
        while active and active[0][2].end < instant:
            heapq.heappop(active)

        winners.append(active[0][2].fixed if active else None)

    return winners


def accumulate_extras(instants: list[Instant], periods: list[AdditivePeriod]) -> list[Money]:
    """Sum the extras of every additive period containing each instant.

    Args:
        instants: Transaction instants, sorted ascending.
        periods: Additive periods.

    Returns:
        Total extra per instant (0 where no period applies).
    """
    if not periods:
        return [Money(0)] * len(instants)

    events: list[tuple[int, int]] = []
    for period in periods:
        events.append((period.start, period.extra))
        events.append((period.end + 1, -period.extra))
    events.sort(key=lambda event: event[0])

    running = 0
    next_event = 0
    totals: list[Money] = []

    for instant in instants:
        while next_event < len(events) and events[next_event][0] <= instant:
            running += events[next_event][1]
            next_event += 1
        totals.append(Money(running))

    return totals


def sum_windows(
    instants: list[Instant],
    values: list[Money],
    windows: list[AggregationWindow],
) -> list[WindowSum]:
    """Sum values whose instant falls inside each inclusive window.

    Windows are independent: they may overlap and a value may count toward
    several of them.

    Args:
        instants: Transaction instants, sorted ascending.
        values: Value per instant, aligned with ``instants``.
        windows: Aggregation windows in input order.

    Returns:
        One WindowSum per window, in input order.
    """
    prefix = list(accumulate(values, initial=0))

    sums: list[WindowSum] = []
    for window in windows:
        lower = bisect_left(instants, window.start)
        upper = bisect_right(instants, window.end)
        sums.append(WindowSum(window=window, amount=Money(prefix[upper] - prefix[lower])))

    return sums
