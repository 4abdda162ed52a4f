"""
N-gram Language Model Package

Counts n-grams of every order up to N over a sentence corpus and turns the
counts into add-delta smoothed conditional probabilities.
"""

from .counts import NGramCounts, CountsFormatError, read_counts, write_counts
from .corpus import SentenceWindow, count_corpus, tokenize_sentence
from .model import LanguageModel, format_number, read_model
from .smoothing import AddDeltaSmoothing, MissingContextError, SmoothingMethod, get_smoother
from .vocabulary import close_vocabulary

__version__ = "0.1.0"
__all__ = [
    "NGramCounts", "CountsFormatError", "read_counts", "write_counts",
    "SentenceWindow", "count_corpus", "tokenize_sentence",
    "LanguageModel", "format_number", "read_model",
    "AddDeltaSmoothing", "MissingContextError", "SmoothingMethod", "get_smoother",
    "close_vocabulary",
]
