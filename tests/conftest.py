import pytest

from ngram_lm.corpus import count_corpus


@pytest.fixture
def corpus():
    return ["the cat sat", "the dog sat"]


@pytest.fixture
def bigram_counts(corpus):
    return count_corpus(corpus, 2)


@pytest.fixture
def corpus_file(tmp_path, corpus):
    path = tmp_path / "corpus.txt"
    path.write_text("\n".join(corpus) + "\n", encoding="utf-8")
    return path
