"""
Vocabulary Closing

Add-delta smoothing hands probability mass to every possible continuation of
every observed context, so the tables must contain those continuations. This
module inserts the missing ones with count 0.
"""

import logging
from typing import Dict, Iterable

from .counts import NGramCounts


logger = logging.getLogger(__name__)


def close_vocabulary(counts: NGramCounts, vocabulary: Iterable[str]) -> Dict[int, int]:
    """
    Close the frequency tables over a vocabulary.

    Every vocabulary token is ensured in the unigram table. Then, for each
    order from 2 upward, every key of the (already closed) lower order is
    extended by every vocabulary token. Existing counts and per-order totals
    are never changed.

    Args:
        counts: Tables to expand in place
        vocabulary: Unigram tokens

    Returns:
        Number of entries inserted per order
    """
    vocab = sorted(set(vocabulary))
    added = {order: 0 for order in range(1, counts.max_order + 1)}
    if not vocab or counts.max_order == 0:
        return added

    for token in vocab:
        if counts.ensure(1, token):
            added[1] += 1

    for order in range(2, counts.max_order + 1):
        for context in counts.table(order - 1):
            for token in vocab:
                if counts.ensure(order, context + " " + token):
                    added[order] += 1

    logger.debug("Vocabulary closing added %s entries", added)
    return added
