"""Weighted random quote selection.

Unread quotes are drawn three times as often as read ones.
"""

import random
from typing import Optional, Sequence, TypeVar

from .models import Quote

UNREAD_WEIGHT = 3
READ_WEIGHT = 1

Q = TypeVar("Q", bound=Quote)


def quote_weight(quote: Quote) -> int:
    """Selection weight of a single quote."""
    return READ_WEIGHT if quote.is_read else UNREAD_WEIGHT


def pick_weighted(quotes: Sequence[Q], rng: Optional[random.Random] = None) -> Optional[Q]:
    """Pick one quote, favouring unread ones.

    Walks ``quotes`` in the order given, subtracting each weight from a
    uniform draw over the total weight, and returns the first quote where the
    remainder reaches zero.

    Args:
        quotes: Candidate quotes in a stable order
        rng: Random source; a freshly seeded generator when omitted

    Returns:
        The chosen quote, or None if ``quotes`` is empty
    """
    if not quotes:
        return None

    rng = rng or random.Random()
    total_weight = sum(quote_weight(q) for q in quotes)
    remaining = rng.uniform(0, total_weight)

    for quote in quotes:
        remaining -= quote_weight(quote)
        if remaining <= 0:
            return quote

    # Unreachable while weights are positive; kept for float edge cases
    return rng.choice(quotes)
