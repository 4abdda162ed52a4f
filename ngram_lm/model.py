"""
N-gram Language Model

This module contains the LanguageModel class that ties the pipeline together
(counts, optional vocabulary closing, smoothing) and the writer and reader
for the model file format:

    \\data\\
    1-grams: unique=<U1>; total=<T1>
    ...

    \\1-grams:
    <count>\\t<probability>\\t<log2 probability>\\t<ngram>
    ...

    \\end\\
"""

import logging
import math
import os
import re
import tempfile
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, TextIO

from .config import DEFAULT_PRECISION
from .corpus import count_corpus, load_vocabulary
from .counts import NGramCounts, load_counts
from .smoothing import AddDeltaSmoothing, ScoredNGram, SmoothingMethod, get_smoother
from .vocabulary import close_vocabulary


logger = logging.getLogger(__name__)

DATA_MARKER = "\\data\\"
END_MARKER = "\\end\\"

_SUMMARY_RE = re.compile(r"^(\d+)-grams: unique=(\d+); total=(\d+)$")
_ORDER_RE = re.compile(r"^\\(\d+)-grams:$")


def format_number(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """
    Format like the ``#.#####`` pattern with half-up rounding.

    The exact binary value of the float is rounded, trailing zeros are
    trimmed and a zero integer part is omitted (``.5``, ``-.25``). Values
    rounding to zero keep their sign (``-0``). Negative infinity (the log
    of a zero probability) is written as ``-inf``.
    """
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"

    quantum = Decimal(1).scaleb(-precision)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "-0" if value < 0 else "0"
    text = format(rounded, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text.startswith("0."):
        text = text[1:]
    elif text.startswith("-0."):
        text = "-" + text[2:]
    return text


class LanguageModel:
    """
    Add-delta smoothed n-gram language model.

    Attributes:
        counts: Frequency tables, closed over ``vocabulary`` if one was given
        smoother: The smoother used to estimate probabilities
        vocabulary: Closing vocabulary, or None for an open vocabulary
        closing_stats: Entries added per order by vocabulary closing
    """

    def __init__(self, counts: NGramCounts, smoother: AddDeltaSmoothing,
                 vocabulary: Optional[Iterable[str]] = None):
        self.counts = counts
        self.smoother = smoother
        self.vocabulary: Optional[Set[str]] = set(vocabulary) if vocabulary is not None else None
        self.closing_stats: Dict[int, int] = {}

        if self.vocabulary is not None:
            self.closing_stats = close_vocabulary(self.counts, self.vocabulary)

    @classmethod
    def from_corpus(cls, lines: Iterable[str], max_order: int, delta: float = 0.0,
                    vocabulary: Optional[Iterable[str]] = None,
                    lowercase: bool = False,
                    method: SmoothingMethod = SmoothingMethod.ADD_DELTA) -> 'LanguageModel':
        """Count a corpus and build a model from it in one step."""
        smoother = get_smoother(method, delta)
        counts = count_corpus(lines, max_order, lowercase=lowercase)
        return cls(counts, smoother, vocabulary)

    @classmethod
    def from_files(cls, counts_path, delta: float = 0.0, vocab_path=None,
                   method: SmoothingMethod = SmoothingMethod.ADD_DELTA) -> 'LanguageModel':
        """Build a model from a counts file and an optional vocabulary file."""
        smoother = get_smoother(method, delta)
        counts = load_counts(counts_path)
        vocabulary = load_vocabulary(vocab_path) if vocab_path else None
        return cls(counts, smoother, vocabulary)

    @property
    def max_order(self) -> int:
        return self.counts.max_order

    @property
    def delta(self) -> float:
        return self.smoother.delta

    def stats(self) -> Dict:
        stats = {
            'max_order': self.max_order,
            'delta': self.delta,
            'vocab_size': len(self.vocabulary) if self.vocabulary is not None else None,
        }
        for order in range(1, self.max_order + 1):
            stats[f'unique_{order}_grams'] = self.counts.unique(order)
            stats[f'total_{order}_grams'] = self.counts.total(order)
        return stats

    def write(self, out: TextIO, precision: int = DEFAULT_PRECISION) -> None:
        write_model(self.counts, self.smoother, out, precision)

    def save(self, path, precision: int = DEFAULT_PRECISION) -> None:
        save_model(self, path, precision)


def write_model(counts: NGramCounts, smoother: AddDeltaSmoothing, out: TextIO,
                precision: int = DEFAULT_PRECISION) -> None:
    """Write the header and every order's scored entries."""
    out.write(DATA_MARKER + "\n")
    for order in range(1, counts.max_order + 1):
        out.write(f"{order}-grams: unique={counts.unique(order)}; "
                  f"total={counts.total(order)}\n")
    out.write("\n")

    for order in range(1, counts.max_order + 1):
        out.write(f"\\{order}-grams:\n")
        for entry in smoother.score_order(counts, order):
            out.write(f"{entry.count}\t{format_number(entry.probability, precision)}\t"
                      f"{format_number(entry.log2_probability, precision)}\t{entry.ngram}\n")
        out.write("\n")
    out.write(END_MARKER)


def save_model(model: LanguageModel, path, precision: int = DEFAULT_PRECISION) -> None:
    """
    Write a model file.

    The text goes to a temporary file beside ``path`` which replaces ``path``
    only once it is complete.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp",
                                    dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            model.write(f, precision)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise
    logger.info("Wrote %d-gram model to %s", model.max_order, path)


def read_model(lines: Iterable[str]) -> Dict:
    """
    Parse a model file.

    Returns:
        Dict with 'summary' (order -> {'unique', 'total'}) and 'entries'
        (order -> list of ScoredNGram, in file order)

    Raises:
        ValueError: on a line that fits neither the header nor an entry
    """
    summary: Dict[int, Dict[str, int]] = {}
    entries: Dict[int, List[ScoredNGram]] = {}
    order = 0
    in_header = False

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line:
            continue
        if line == DATA_MARKER:
            in_header = True
            continue
        if line == END_MARKER:
            break

        match = _ORDER_RE.match(line)
        if match:
            in_header = False
            order = int(match.group(1))
            entries[order] = []
            continue

        if in_header:
            match = _SUMMARY_RE.match(line)
            if not match:
                raise ValueError(f"line {line_number}: bad summary line {line!r}")
            summary[int(match.group(1))] = {
                'unique': int(match.group(2)),
                'total': int(match.group(3)),
            }
            continue

        fields = line.split("\t")
        if order == 0 or len(fields) != 4:
            raise ValueError(f"line {line_number}: bad entry line {line!r}")
        count, prob, logprob, ngram = fields
        entries[order].append(
            ScoredNGram(order, ngram, int(count), float(prob), float(logprob)))

    return {'summary': summary, 'entries': entries}


def load_model(path) -> Dict:
    with open(path, encoding="utf-8") as f:
        return read_model(f)
