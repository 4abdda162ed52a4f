import io

import pytest

from ngram_lm.corpus import count_corpus
from ngram_lm.counts import (
    CountsFormatError, NGramCounts, parse_counts_line, read_counts, write_counts
)


def test_increment_inserts_then_adds():
    counts = NGramCounts(2)
    counts.increment(2, "a b")
    counts.increment(2, "a b")
    counts.increment(1, "a")
    assert counts.get(2, "a b") == 2
    assert counts.total(2) == 2
    assert counts.unique(2) == 1
    assert counts.get(2, "missing") == 0
    assert (2, "missing") not in counts


def test_ensure_does_not_touch_totals_or_counts():
    counts = NGramCounts(1)
    counts.increment(1, "a")
    assert counts.ensure(1, "b") is True
    assert counts.ensure(1, "a") is False
    assert dict(counts.table(1)) == {"a": 1, "b": 0}
    assert counts.total(1) == 1
    assert (1, "b") in counts


def test_bad_orders_and_counts():
    counts = NGramCounts(2)
    with pytest.raises(ValueError):
        counts.increment(0, "x")
    with pytest.raises(ValueError):
        counts.add(1, "x", -1)
    with pytest.raises(ValueError):
        NGramCounts(-1)


def test_sorted_by_count_breaks_ties_by_text(bigram_counts):
    assert bigram_counts.sorted_by_count(1) == [
        ("</s>", 2), ("<s>", 2), ("sat", 2), ("the", 2), ("cat", 1), ("dog", 1),
    ]
    assert bigram_counts.sorted_by_count(2) == [
        ("<s> the", 2), ("sat </s>", 2),
        ("cat sat", 1), ("dog sat", 1), ("the cat", 1), ("the dog", 1),
    ]


def test_sort_is_independent_of_insertion_order():
    forward = NGramCounts(1)
    backward = NGramCounts(1)
    words = ["kiwi", "apple", "fig", "date"]
    for word in words:
        forward.increment(1, word)
    for word in reversed(words):
        backward.increment(1, word)
    assert forward.sorted_by_count(1) == backward.sorted_by_count(1)
    assert [w for w, _ in forward.sorted_by_count(1)] == sorted(words)


def test_ties_use_utf16_code_unit_order():
    counts = NGramCounts(1)
    for word in ["\uffe0", "\U0001F600", "z"]:
        counts.increment(1, word)
    # the surrogate pair of U+1F600 sorts before U+FFE0
    assert [w for w, _ in counts.sorted_by_count(1)] == ["z", "\U0001F600", "\uffe0"]


def test_merge_of_shards_equals_single_pass():
    lines = ["a b a", "b b", "c a b", "a"]
    whole = count_corpus(lines, 3)
    merged = count_corpus(lines[:2], 3).merge(count_corpus(lines[2:], 3))
    assert merged == whole


def test_merge_keeps_zero_counts():
    left = NGramCounts(1)
    right = NGramCounts(1)
    right.ensure(1, "zero")
    left.merge(right)
    assert (1, "zero") in left


def test_write_counts_layout(bigram_counts):
    out = io.StringIO()
    write_counts(bigram_counts, out)
    lines = out.getvalue().splitlines()
    assert lines[:2] == ["2\t</s>", "2\t<s>"]
    assert lines[6:8] == ["2\t<s> the", "2\tsat </s>"]
    assert len(lines) == 12


def test_read_counts_infers_order_and_totals():
    text = "2\tthe cat\n\n   \n1\tcat\n4 a  b   c\n"
    counts = read_counts(io.StringIO(text))
    assert counts.max_order == 3
    assert counts.get(2, "the cat") == 2
    assert counts.get(3, "a b c") == 4
    assert counts.unique(1) == 1
    assert counts.total(3) == 4


def test_read_counts_leaves_gaps_empty():
    counts = read_counts(["5\ta b c\n"])
    assert counts.max_order == 3
    assert counts.unique(1) == 0
    assert counts.unique(2) == 0


def test_counts_file_round_trip(bigram_counts):
    out = io.StringIO()
    write_counts(bigram_counts, out)
    assert read_counts(io.StringIO(out.getvalue())) == bigram_counts


@pytest.mark.parametrize("line", ["x\tcat", "1.5\tcat", "-1\tcat", "3"])
def test_malformed_counts_lines(line):
    with pytest.raises(CountsFormatError):
        parse_counts_line(line, 7)


def test_malformed_line_reports_line_number():
    with pytest.raises(CountsFormatError, match="line 2"):
        read_counts(["1\ta\n", "oops\tb\n"])
