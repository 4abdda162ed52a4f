"""
Smoothing Methods for N-gram Language Models

This module turns the frequency tables into conditional probabilities using
add-delta (Lidstone) smoothing. Unsmoothed maximum likelihood and Laplace
smoothing are the delta = 0 and delta = 1 cases.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .counts import NGramCounts


class SmoothingMethod(Enum):
    """Available smoothing methods."""
    NONE = "none"                 # Maximum likelihood (delta = 0)
    LAPLACE = "laplace"           # Add-one smoothing
    ADD_DELTA = "add_delta"       # Add-delta (Lidstone) smoothing


class MissingContextError(KeyError):
    """An n-gram's context is absent from the next lower order's table."""

    def __init__(self, order: int, ngram: str, context: str):
        super().__init__(context)
        self.order = order
        self.ngram = ngram
        self.context = context

    def __str__(self):
        return (f"context {self.context!r} of {self.order}-gram {self.ngram!r} "
                f"is missing from the {self.order - 1}-gram table; "
                f"close the vocabulary or check the counts file")


@dataclass
class ScoredNGram:
    """One n-gram with its count and estimated probabilities."""
    order: int
    ngram: str
    count: int
    probability: float
    log2_probability: float


def context_of(ngram: str) -> str:
    """Drop the last token of an n-gram."""
    return " ".join(ngram.split()[:-1])


def log2_probability(probability: float) -> float:
    """Base-2 log of a probability; 0 maps to negative infinity."""
    return math.log2(probability) if probability > 0 else float('-inf')


class AddDeltaSmoothing:
    """
    Add-Delta (Lidstone) Smoothing

    Unigrams:  P(w) = (count(w) + delta) / (total_1 + U_1 * delta)
    Higher:    P(w|context) = (count(context, w) + delta) / (count(context) + U_n * delta)

    Where U_n is the number of distinct n-grams of order n and total_1 the
    number of unigram occurrences.
    """

    def __init__(self, delta: float = 1.0):
        if delta < 0:
            raise ValueError(f"delta must not be negative, got {delta}")
        self.delta = delta

    def smooth(self, count: int, context_count: float, num_types: int) -> float:
        denominator = context_count + num_types * self.delta
        if denominator == 0:
            return 0.0
        return (count + self.delta) / denominator

    def probability(self, counts: NGramCounts, order: int, ngram: str) -> float:
        """
        Smoothed probability of an n-gram present in ``counts``.

        Raises:
            MissingContextError: if the n-gram's context is not in the table
                of order - 1
        """
        count = counts.get(order, ngram)
        if order == 1:
            context_count = counts.total(1)
        else:
            context = context_of(ngram)
            if (order - 1, context) not in counts:
                raise MissingContextError(order, ngram, context)
            context_count = counts.get(order - 1, context)
        return self.smooth(count, context_count, counts.unique(order))

    def score_order(self, counts: NGramCounts, order: int) -> Iterator[ScoredNGram]:
        """Score one order's n-grams by count descending, ties in n-gram order."""
        for ngram, count in counts.sorted_by_count(order):
            prob = self.probability(counts, order, ngram)
            yield ScoredNGram(order, ngram, count, prob, log2_probability(prob))

    def score(self, counts: NGramCounts) -> Iterator[ScoredNGram]:
        """Score every n-gram of every order, from unigrams upward."""
        for order in range(1, counts.max_order + 1):
            yield from self.score_order(counts, order)


class NoSmoothing(AddDeltaSmoothing):
    """No smoothing - raw maximum likelihood estimation."""

    def __init__(self):
        super().__init__(delta=0.0)


class LaplaceSmoothing(AddDeltaSmoothing):
    """Laplace (Add-One) Smoothing."""

    def __init__(self):
        super().__init__(delta=1.0)


def get_smoother(method: SmoothingMethod, delta: float = 1.0) -> AddDeltaSmoothing:
    """Factory function to create the appropriate smoother."""
    if method == SmoothingMethod.NONE:
        return NoSmoothing()
    elif method == SmoothingMethod.LAPLACE:
        return LaplaceSmoothing()
    elif method == SmoothingMethod.ADD_DELTA:
        return AddDeltaSmoothing(delta)
    else:
        raise ValueError(f"Unknown smoothing method: {method}")
