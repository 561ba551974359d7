"""Run configuration for the classification pipeline."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

REPRESENTATIONS: tuple[str, ...] = ("bow", "tfidf", "bigram")

_INT_FIELDS = (
    "bow_min_term_freq", "bow_min_doc_freq", "bigram_min_term_freq",
    "bigram_min_doc_freq", "folds", "seed", "top_n_terms", "max_workers",
)
_FLOAT_FIELDS = ("train_fraction", "alpha")


@dataclass(frozen=True)
class PipelineConfig:
    """Validated settings for one pipeline run.

    Attributes:
        bow_min_term_freq: Minimum corpus frequency for unigram terms
            (shared by the bag-of-words and TF-IDF representations).
        bow_min_doc_freq: Minimum document frequency for unigram terms.
        bigram_min_term_freq: Minimum corpus frequency for bigram terms.
        bigram_min_doc_freq: Minimum document frequency for bigram terms.
        train_fraction: Share of each class used for training in the
            holdout split.
        folds: Number of cross-validation folds.
        alpha: Additive smoothing constant for Naive Bayes.
        positive_class: Label treated as positive; the first sorted label
            when None.
        seed: Seed for all partitioning.
        representations: Which feature representations to evaluate.
        top_n_terms: Number of top terms reported per class.
        max_workers: Threads used for cross-validation folds.
    """

    bow_min_term_freq: int = 5
    bow_min_doc_freq: int = 1
    bigram_min_term_freq: int = 2
    bigram_min_doc_freq: int = 1
    train_fraction: float = 0.5
    folds: int = 10
    alpha: float = 1.0
    positive_class: Optional[str] = None
    seed: int = 42
    representations: tuple[str, ...] = field(default=REPRESENTATIONS)
    top_n_terms: int = 10
    max_workers: int = 1

    def __post_init__(self) -> None:
        self._check_types()
        object.__setattr__(self, "representations", tuple(self.representations))
        for name in ("bow_min_term_freq", "bow_min_doc_freq",
                     "bigram_min_term_freq", "bigram_min_doc_freq",
                     "top_n_terms", "max_workers"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if not 0.0 < self.train_fraction < 1.0:
            raise ValueError("train_fraction must be between 0.0 and 1.0 (exclusive)")
        if self.folds < 2:
            raise ValueError("folds must be at least 2")
        if self.alpha <= 0:
            raise ValueError("alpha must be positive")
        if not self.representations:
            raise ValueError("at least one representation is required")
        unknown = [r for r in self.representations if r not in REPRESENTATIONS]
        if unknown:
            raise ValueError(
                f"Unknown representations {unknown}. Known: {list(REPRESENTATIONS)}"
            )

    def _check_types(self) -> None:
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
        if self.positive_class is not None and not isinstance(self.positive_class, str):
            raise ValueError(
                f"positive_class must be a string or null, got {self.positive_class!r}"
            )
        if not isinstance(self.representations, (list, tuple)) or not all(
            isinstance(r, str) for r in self.representations
        ):
            raise ValueError(
                f"representations must be a list of names, got {self.representations!r}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PipelineConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: str | Path) -> "PipelineConfig":
        """Load configuration from a JSON object file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        return cls.from_dict(data)

    def replace(self, **overrides: Any) -> "PipelineConfig":
        """Copy with the given fields changed; ``None`` values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data["representations"] = list(self.representations)
        return data
