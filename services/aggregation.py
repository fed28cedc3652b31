"""Pure aggregations over the amounts of a user's records."""

from typing import Iterable, Tuple


def best_worst(amounts: Iterable[float]) -> Tuple[float, float]:
    """Return (highest, lowest) amount; (0, 0) when there are no amounts."""
    amounts = list(amounts)
    if not amounts:
        return 0, 0
    return max(amounts), min(amounts)


def total_amount(amounts: Iterable[float]) -> float:
    return sum(amounts, 0)


def count_positive(amounts: Iterable[float]) -> int:
    """Count amounts strictly greater than zero.

    This backs the ``daysWithRecords`` field, which counts records and not
    distinct calendar days.
    """
    return sum(1 for amount in amounts if amount > 0)
