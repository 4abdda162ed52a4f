import io

import pytest

from ngram_lm.counts import read_counts
from ngram_lm.model import LanguageModel, format_number, load_model, read_model, save_model
from ngram_lm.smoothing import AddDeltaSmoothing, MissingContextError


EXPECTED_UNSMOOTHED = (
    "\\data\\\n"
    "1-grams: unique=6; total=10\n"
    "2-grams: unique=6; total=8\n"
    "\n"
    "\\1-grams:\n"
    "2\t.2\t-2.32193\t</s>\n"
    "2\t.2\t-2.32193\t<s>\n"
    "2\t.2\t-2.32193\tsat\n"
    "2\t.2\t-2.32193\tthe\n"
    "1\t.1\t-3.32193\tcat\n"
    "1\t.1\t-3.32193\tdog\n"
    "\n"
    "\\2-grams:\n"
    "2\t1\t0\t<s> the\n"
    "2\t1\t0\tsat </s>\n"
    "1\t1\t0\tcat sat\n"
    "1\t1\t0\tdog sat\n"
    "1\t.5\t-1\tthe cat\n"
    "1\t.5\t-1\tthe dog\n"
    "\n"
    "\\end\\"
)


@pytest.mark.parametrize("value, expected", [
    (0.5, ".5"),
    (-0.25, "-.25"),
    (1.0, "1"),
    (0.0, "0"),
    (-1.0, "-1"),
    (0.123454, ".12345"),
    # the double nearest 0.123455 lies just below it
    (0.123455, ".12345"),
    (0.5 ** 17, ".00001"),
    (0.000004, "0"),
    (-0.000004, "-0"),
    (12.5, "12.5"),
    (-2.321928094887362, "-2.32193"),
    (float('-inf'), "-inf"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_number_precision():
    assert format_number(0.125, precision=2) == ".13"
    assert format_number(2 / 3, precision=0) == "1"


def test_unsmoothed_model_text(corpus):
    model = LanguageModel.from_corpus(corpus, 2)
    out = io.StringIO()
    model.write(out)
    assert out.getvalue() == EXPECTED_UNSMOOTHED


def test_model_output_is_reproducible(corpus):
    first, second = io.StringIO(), io.StringIO()
    LanguageModel.from_corpus(corpus, 3, delta=0.5, vocabulary={"fox"}).write(first)
    LanguageModel.from_corpus(corpus, 3, delta=0.5, vocabulary={"fox"}).write(second)
    assert first.getvalue() == second.getvalue()


def test_closed_model_header(corpus):
    model = LanguageModel.from_corpus(corpus, 2, delta=1.0, vocabulary={"cat", "dog", "fox"})
    text = io.StringIO()
    model.write(text)
    lines = text.getvalue().splitlines()
    assert lines[1] == "1-grams: unique=7; total=10"
    assert lines[2] == "2-grams: unique=25; total=8"
    assert "0\t.05882\t-4.08746\tfox" in lines
    assert model.closing_stats == {1: 1, 2: 19}
    assert model.stats()['vocab_size'] == 3


def test_zero_probability_written_as_negative_infinity(corpus):
    model = LanguageModel.from_corpus(corpus, 2, delta=0.0, vocabulary={"fox"})
    out = io.StringIO()
    model.write(out)
    assert "0\t0\t-inf\tthe fox" in out.getvalue().splitlines()


def test_missing_context_aborts_write():
    counts = read_counts(["1\tb c\n"])
    model = LanguageModel(counts, AddDeltaSmoothing(1.0))
    with pytest.raises(MissingContextError):
        model.write(io.StringIO())


def test_save_model_leaves_no_partial_file(tmp_path):
    counts = read_counts(["1\tb c\n"])
    model = LanguageModel(counts, AddDeltaSmoothing(1.0))
    path = tmp_path / "model.lm"
    with pytest.raises(MissingContextError):
        save_model(model, path)
    assert list(tmp_path.iterdir()) == []


def test_save_model_replaces_existing(tmp_path, corpus):
    path = tmp_path / "model.lm"
    path.write_text("old", encoding="utf-8")
    LanguageModel.from_corpus(corpus, 2).save(path)
    assert path.read_text(encoding="utf-8") == EXPECTED_UNSMOOTHED
    assert [p.name for p in tmp_path.iterdir()] == ["model.lm"]


def test_from_files(tmp_path):
    counts_path = tmp_path / "counts.txt"
    counts_path.write_text("2\ta\n1\tb\n1\ta b\n", encoding="utf-8")
    vocab_path = tmp_path / "vocab.txt"
    vocab_path.write_text("a\nc 5\n", encoding="utf-8")

    model = LanguageModel.from_files(counts_path, delta=1.0, vocab_path=vocab_path)

    assert model.vocabulary == {"a", "c"}
    assert model.counts.get(1, "c") == 0
    assert (2, "c c") in model.counts
    assert model.delta == 1.0


def test_read_model_round_trip(corpus):
    out = io.StringIO()
    LanguageModel.from_corpus(corpus, 2, delta=0.0, vocabulary={"fox"}).write(out)
    parsed = read_model(io.StringIO(out.getvalue()))

    assert parsed['summary'] == {1: {'unique': 7, 'total': 10}, 2: {'unique': 13, 'total': 8}}
    bigrams = {e.ngram: e for e in parsed['entries'][2]}
    assert bigrams["the cat"].probability == 0.5
    assert bigrams["the fox"].log2_probability == float('-inf')
    assert len(parsed['entries'][2]) == 13


def test_read_model_rejects_garbage():
    with pytest.raises(ValueError):
        read_model(["\\data\\\n", "not a summary\n"])
    with pytest.raises(ValueError):
        read_model(["1\t0.5\t-1\tstray entry\n"])


def test_load_model(tmp_path, corpus):
    path = tmp_path / "model.lm"
    LanguageModel.from_corpus(corpus, 1).save(path)
    assert load_model(path)['summary'] == {1: {'unique': 6, 'total': 10}}
