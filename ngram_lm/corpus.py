"""
Corpus Reading and Sentence Windows

This module turns raw sentence lines into marked token sequences, slides a
bounded window over them to produce n-grams of every order, and handles the
surrounding corpus chores: vocabulary files and exporting the Brown corpus
as a line corpus.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Deque, Iterable, Iterator, List, Optional, Set, TextIO, Tuple

import nltk
from nltk.corpus import brown

from .counts import NGramCounts


logger = logging.getLogger(__name__)

# Special tokens
START_TOKEN = "<s>"
END_TOKEN = "</s>"


def ensure_nltk_data():
    """Download the Brown corpus if it is not installed yet."""
    try:
        nltk.data.find('corpora/brown')
    except LookupError:
        logger.info("Downloading Brown corpus...")
        nltk.download('brown', quiet=True)


def preprocess_text(text: str, lowercase: bool = False) -> List[str]:
    """
    Split a line of text into tokens on runs of whitespace.

    Args:
        text: Raw input line
        lowercase: Whether to lowercase the text first

    Returns:
        List of tokens
    """
    if lowercase:
        text = text.lower()
    return text.split()


def tokenize_sentence(line: str, lowercase: bool = False) -> List[str]:
    """Return the tokens of a line bounded by start and end markers."""
    return [START_TOKEN] + preprocess_text(line, lowercase) + [END_TOKEN]


class SentenceWindow:
    """
    The most recent tokens of a sentence, most recent first.

    Holds at most ``max_order`` tokens; pushing past that evicts the oldest.
    """

    def __init__(self, max_order: int):
        if max_order < 1:
            raise ValueError("max_order must be at least 1")
        self.max_order = max_order
        self._tokens: Deque[str] = deque(maxlen=max_order)

    def __len__(self) -> int:
        return len(self._tokens)

    def push(self, token: str) -> None:
        self._tokens.appendleft(token)

    def ngrams(self) -> Iterator[Tuple[int, str]]:
        """
        Yield ``(order, ngram)`` for every order the window currently reaches.

        Order k is the k most recent tokens read oldest to newest.
        """
        ngram = None
        for order, token in enumerate(self._tokens, start=1):
            ngram = token if ngram is None else token + " " + ngram
            yield order, ngram


def count_sentence(line: str, counts: NGramCounts, lowercase: bool = False) -> None:
    """
    Count all n-grams of one sentence into ``counts``.

    Args:
        line: One sentence with whitespace-separated tokens
        counts: Tables to increment, one per order up to ``counts.max_order``
        lowercase: Whether to lowercase the sentence before counting
    """
    window = SentenceWindow(counts.max_order)
    for token in tokenize_sentence(line, lowercase):
        window.push(token)
        for order, ngram in window.ngrams():
            counts.increment(order, ngram)


def count_corpus(lines: Iterable[str], max_order: int,
                 lowercase: bool = False,
                 progress_callback=None) -> NGramCounts:
    """
    Count n-grams of order 1..max_order over a corpus of sentence lines.

    Args:
        lines: Iterable of sentences, one per item
        max_order: Largest n-gram order to count
        lowercase: Whether to lowercase sentences before counting
        progress_callback: Optional callback(sentences_done) every 1000 lines

    Returns:
        Populated NGramCounts
    """
    counts = NGramCounts(max_order)
    num_sentences = 0
    for line in lines:
        count_sentence(line.rstrip("\r\n"), counts, lowercase)
        num_sentences += 1
        if progress_callback and num_sentences % 1000 == 0:
            progress_callback(num_sentences)

    if progress_callback:
        progress_callback(num_sentences)
    logger.debug("Counted %d sentences up to order %d", num_sentences, max_order)
    return counts


def read_vocabulary(lines: Iterable[str]) -> Set[str]:
    """Read the first whitespace-separated token of every non-blank line."""
    vocab = set()
    for line in lines:
        fields = line.split()
        if fields:
            vocab.add(fields[0])
    return vocab


def load_vocabulary(path) -> Set[str]:
    with open(path, encoding="utf-8") as f:
        return read_vocabulary(f)


def generate_vocabulary(directory) -> Set[str]:
    """
    Collect the unique tokens of every file in a directory.

    Subdirectories are not descended into.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    vocab = set()
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            continue
        with open(path, encoding="utf-8") as f:
            for line in f:
                vocab.update(line.split())
        logger.debug("Read vocabulary from %s (%d tokens so far)", path, len(vocab))
    return vocab


def write_vocabulary(vocab: Iterable[str], out: TextIO) -> None:
    """Write tokens sorted, one per line."""
    for token in sorted(vocab):
        out.write(token + "\n")


def export_brown_corpus(path, categories: Optional[List[str]] = None,
                        lowercase: bool = False) -> dict:
    """
    Write the Brown corpus as a line corpus, one sentence per line.

    Args:
        path: Output file path
        categories: Optional list of Brown categories (e.g. ['news', 'fiction']);
                    all categories if None
        lowercase: Whether to lowercase the text

    Returns:
        Corpus statistics dict
    """
    ensure_nltk_data()

    if categories:
        sents = brown.sents(categories=categories)
    else:
        sents = brown.sents()

    num_sentences = 0
    total_tokens = 0
    with open(path, "w", encoding="utf-8", newline="\n") as out:
        for sent in sents:
            tokens = [w.lower() if lowercase else w for w in sent]
            if not tokens:
                continue
            out.write(" ".join(tokens) + "\n")
            num_sentences += 1
            total_tokens += len(tokens)

    return {
        'num_sentences': num_sentences,
        'total_tokens': total_tokens,
        'categories': categories or brown.categories()
    }


def get_brown_categories() -> List[str]:
    """Return list of available Brown corpus categories."""
    ensure_nltk_data()
    return brown.categories()
