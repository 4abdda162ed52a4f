"""
N-gram Frequency Tables

One ``Counter`` per n-gram order, keyed by the space-joined n-gram text,
together with the running total of occurrences per order. Also reads and
writes the intermediate counts file (``<count>\\t<ngram>`` per line).
"""

import logging
from collections import Counter
from typing import Iterable, Iterator, List, TextIO, Tuple


logger = logging.getLogger(__name__)


class CountsFormatError(ValueError):
    """A counts file line could not be parsed."""


class NGramCounts:
    """
    Frequency tables for n-gram orders 1..max_order.

    Attributes:
        tables: ``tables[i - 1]`` maps order-i n-grams to their counts
        totals: ``totals[i - 1]`` is the number of order-i occurrences
    """

    def __init__(self, max_order: int = 0):
        if max_order < 0:
            raise ValueError("max_order must not be negative")
        self.tables: List[Counter] = []
        self.totals: List[int] = []
        self._grow_to(max_order)

    def _grow_to(self, order: int) -> None:
        while len(self.tables) < order:
            self.tables.append(Counter())
            self.totals.append(0)

    def _check_order(self, order: int) -> None:
        if order < 1:
            raise ValueError(f"n-gram order must be at least 1, got {order}")

    @property
    def max_order(self) -> int:
        return len(self.tables)

    def table(self, order: int) -> Counter:
        self._check_order(order)
        return self.tables[order - 1]

    def increment(self, order: int, ngram: str) -> None:
        """Record one occurrence of ``ngram``."""
        self.add(order, ngram, 1)

    def add(self, order: int, ngram: str, count: int) -> None:
        """Add ``count`` occurrences of ``ngram``, inserting it if absent."""
        self._check_order(order)
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        self._grow_to(order)
        self.tables[order - 1][ngram] += count
        self.totals[order - 1] += count

    def ensure(self, order: int, ngram: str) -> bool:
        """
        Insert ``ngram`` with count 0 unless present.

        Returns True if it was inserted. The order's total is unchanged.
        """
        self._check_order(order)
        self._grow_to(order)
        table = self.tables[order - 1]
        if ngram in table:
            return False
        table[ngram] = 0
        return True

    def get(self, order: int, ngram: str) -> int:
        return self.table(order).get(ngram, 0)

    def unique(self, order: int) -> int:
        return len(self.table(order))

    def total(self, order: int) -> int:
        self._check_order(order)
        return self.totals[order - 1]

    def __contains__(self, item: Tuple[int, str]) -> bool:
        order, ngram = item
        return 1 <= order <= self.max_order and ngram in self.tables[order - 1]

    def __eq__(self, other) -> bool:
        if not isinstance(other, NGramCounts):
            return NotImplemented
        return (self.totals == other.totals and
                [dict(t) for t in self.tables] == [dict(t) for t in other.tables])

    def sorted_by_count(self, order: int) -> List[Tuple[str, int]]:
        """
        Entries of one order by count descending.

        Equal counts are ordered by n-gram text in UTF-16 code unit order so
        the result is the same on every run.
        """
        return sorted(self.table(order).items(),
                      key=lambda x: (-x[1], x[0].encode('utf-16-be')))

    def merge(self, other: "NGramCounts") -> "NGramCounts":
        """Sum another set of tables into this one, key by key."""
        self._grow_to(other.max_order)
        for i, table in enumerate(other.tables):
            # update() keeps zero-count keys, unlike Counter.__add__
            self.tables[i].update(table)
            self.totals[i] += other.totals[i]
        return self


def write_counts(counts: NGramCounts, out: TextIO) -> None:
    """Write every order's entries as ``<count>\\t<ngram>`` lines."""
    for _, ngram, count in iter_entries(counts):
        out.write(f"{count}\t{ngram}\n")


def parse_counts_line(line: str, line_number: int = 0) -> Tuple[int, int, str]:
    """
    Parse one counts line into ``(order, count, ngram)``.

    Raises:
        CountsFormatError: if the count is not a non-negative integer or no
            n-gram follows it
    """
    fields = line.split()
    try:
        count = int(fields[0])
    except ValueError:
        raise CountsFormatError(
            f"line {line_number}: count is not an integer: {fields[0]!r}") from None
    if count < 0:
        raise CountsFormatError(f"line {line_number}: negative count {count}")
    tokens = fields[1:]
    if not tokens:
        raise CountsFormatError(f"line {line_number}: count without an n-gram")
    return len(tokens), count, " ".join(tokens)


def read_counts(lines: Iterable[str]) -> NGramCounts:
    """
    Build tables from counts-file lines.

    Blank lines are skipped. An n-gram's order is its number of tokens.
    """
    counts = NGramCounts()
    skipped = 0
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            skipped += 1
            continue
        order, count, ngram = parse_counts_line(line, line_number)
        counts.add(order, ngram, count)

    if skipped:
        logger.debug("Skipped %d blank counts lines", skipped)
    return counts


def load_counts(path) -> NGramCounts:
    with open(path, encoding="utf-8") as f:
        return read_counts(f)


def iter_entries(counts: NGramCounts) -> Iterator[Tuple[int, str, int]]:
    """Yield ``(order, ngram, count)`` for all orders in output order."""
    for order in range(1, counts.max_order + 1):
        for ngram, count in counts.sorted_by_count(order):
            yield order, ngram, count
