"""
Run Configuration

Settings for the counting and model-building stages, validated up front so a
bad argument fails before any work is done.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .smoothing import SmoothingMethod


DEFAULT_ORDER = 3
DEFAULT_PRECISION = 5
DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 5000


@dataclass
class CountConfig:
    """Settings for counting n-grams in a corpus."""
    corpus_path: Path
    output_path: Path
    max_order: int = DEFAULT_ORDER
    lowercase: bool = False

    def __post_init__(self):
        self.corpus_path = Path(self.corpus_path)
        self.output_path = Path(self.output_path)
        if self.max_order < 1:
            raise ValueError(f"n-gram order must be at least 1, got {self.max_order}")


@dataclass
class BuildConfig:
    """
    Settings for building a model from a counts file.

    Without a vocabulary the model is open-vocabulary and ``delta`` defaults
    to 0 (maximum likelihood); with one it defaults to 1 (Laplace).
    """
    counts_path: Path
    output_path: Path
    vocab_path: Optional[Path] = None
    delta: Optional[float] = None
    precision: int = DEFAULT_PRECISION

    def __post_init__(self):
        self.counts_path = Path(self.counts_path)
        self.output_path = Path(self.output_path)
        if self.vocab_path is not None:
            self.vocab_path = Path(self.vocab_path)
        if self.delta is None:
            self.delta = 1.0 if self.vocab_path is not None else 0.0
        if self.delta < 0:
            raise ValueError(f"delta must not be negative, got {self.delta}")
        if self.precision < 0:
            raise ValueError(f"precision must not be negative, got {self.precision}")


def _string_list(value, name: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise TypeError(f"{name} must be a list of strings")
    return value


@dataclass
class WebBuildConfig:
    """Settings for a model built from sentences posted to the dashboard."""
    sentences: List[str] = field(default_factory=list)
    max_order: int = DEFAULT_ORDER
    delta: float = 0.0
    vocabulary: Optional[List[str]] = None
    lowercase: bool = False
    smoothing: SmoothingMethod = SmoothingMethod.ADD_DELTA

    def __post_init__(self):
        if self.max_order < 1:
            raise ValueError(f"n-gram order must be at least 1, got {self.max_order}")
        if self.delta < 0:
            raise ValueError(f"delta must not be negative, got {self.delta}")

    @classmethod
    def from_json(cls, data: dict) -> 'WebBuildConfig':
        if not isinstance(data, dict):
            raise TypeError("request body must be a JSON object")
        sentences = _string_list(data.get('sentences', []), 'sentences')
        vocabulary = data.get('vocabulary')
        if vocabulary is not None:
            vocabulary = _string_list(vocabulary, 'vocabulary')
        return cls(
            sentences=[s for s in sentences if s.strip()],
            max_order=int(data.get('n', DEFAULT_ORDER)),
            delta=float(data.get('delta', 0.0)),
            vocabulary=vocabulary,
            lowercase=bool(data.get('lowercase', False)),
            smoothing=SmoothingMethod(data.get('smoothing', 'add_delta')),
        )
