"""Vocabulary, document-term matrices, n-grams and TF-IDF weighting.

All feature representations (bag-of-words counts, TF-IDF weights, bigram
counts) go through the same builder:

- A *term function* turns a token sequence into the terms to count
  (identity for unigrams, :func:`bigrams` for pairs).
- :func:`build_dtm` counts terms, trims the vocabulary by global term
  frequency and document frequency, and emits one sparse row per document.
- :func:`tfidf` reweights a count matrix without changing its shape.

Matrices and vocabularies are immutable values. A matrix built for
prediction must share the vocabulary used at fit time; use
:meth:`DocumentTermMatrix.align_to` or :func:`transform` to get one.
"""

from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import EmptyVocabularyError

logger = logging.getLogger(__name__)

TermFunction = Callable[[Sequence[str]], list[str]]


# ---------------------------------------------------------------------------
# N-grams
# ---------------------------------------------------------------------------


def ngrams(tokens: Sequence[str], n: int = 2, separator: str = "_") -> list[str]:
    """Generate contiguous n-grams joined into single compound terms.

    Returns ``max(0, len(tokens) - n + 1)`` terms in sequence order.
    """
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")
    if n == 1:
        return list(tokens)
    return [separator.join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def bigrams(tokens: Sequence[str]) -> list[str]:
    """Contiguous token pairs, e.g. ``["a", "b", "c"] -> ["a_b", "b_c"]``."""
    return ngrams(tokens, 2)


def unigrams(tokens: Sequence[str]) -> list[str]:
    return list(tokens)


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Vocabulary:
    """Ordered, immutable set of terms, each mapped to a column index."""

    terms: tuple[str, ...]
    _index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = {term: i for i, term in enumerate(self.terms)}
        if len(index) != len(self.terms):
            raise ValueError("Vocabulary terms must be unique")
        object.__setattr__(self, "_index", MappingProxyType(index))

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: object) -> bool:
        return term in self._index

    def __iter__(self):
        return iter(self.terms)

    def index(self, term: str) -> int:
        """Column index of ``term``; raises ``KeyError`` if absent."""
        return self._index[term]

    def get(self, term: str) -> int | None:
        return self._index.get(term)


# ---------------------------------------------------------------------------
# Document-term matrix
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DocumentTermMatrix:
    """Sparse documents x terms matrix of non-negative values.

    Attributes:
        vocabulary: Column labels.
        rows: One read-only ``{column_index: value}`` mapping per document.
            Zero cells are absent; a document with no retained terms is empty.
        doc_ids: Optional document identifiers aligned with ``rows``.
        weighting: ``"count"`` or ``"tfidf"``.
    """

    vocabulary: Vocabulary
    rows: tuple[Mapping[int, float], ...]
    doc_ids: tuple[str, ...] = ()
    weighting: str = "count"

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", tuple(
            row if isinstance(row, MappingProxyType) else MappingProxyType(dict(row))
            for row in self.rows
        ))
        if self.doc_ids and len(self.doc_ids) != len(self.rows):
            raise ValueError(
                f"doc_ids ({len(self.doc_ids)}) and rows ({len(self.rows)}) "
                "must have same length"
            )

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.vocabulary)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.n_rows, self.n_cols)

    def __len__(self) -> int:
        return len(self.rows)

    def row(self, i: int) -> Mapping[int, float]:
        return self.rows[i]

    def row_terms(self, i: int) -> dict[str, float]:
        """Row ``i`` keyed by term instead of column index."""
        terms = self.vocabulary.terms
        return {terms[col]: value for col, value in self.rows[i].items()}

    def column_sums(self) -> list[float]:
        sums = [0.0] * self.n_cols
        for row in self.rows:
            for col, value in row.items():
                sums[col] += value
        return sums

    def document_frequencies(self) -> list[int]:
        """Number of rows with a nonzero value in each column."""
        df = [0] * self.n_cols
        for row in self.rows:
            for col, value in row.items():
                if value > 0:
                    df[col] += 1
        return df

    def to_dense(self) -> list[list[float]]:
        dense = []
        for row in self.rows:
            values = [0.0] * self.n_cols
            for col, value in row.items():
                values[col] = value
            dense.append(values)
        return dense

    def select(self, indices: Iterable[int]) -> "DocumentTermMatrix":
        """Row subset in the given order, sharing this matrix's vocabulary."""
        indices = list(indices)
        return DocumentTermMatrix(
            vocabulary=self.vocabulary,
            rows=tuple(self.rows[i] for i in indices),
            doc_ids=tuple(self.doc_ids[i] for i in indices) if self.doc_ids else (),
            weighting=self.weighting,
        )

    def align_to(self, vocabulary: Vocabulary) -> "DocumentTermMatrix":
        """Re-map columns onto ``vocabulary``.

        Terms missing from this matrix are zero-filled; terms unknown to
        ``vocabulary`` are dropped.
        """
        if vocabulary == self.vocabulary:
            return self
        mapping: dict[int, int] = {}
        for col, term in enumerate(self.vocabulary.terms):
            target = vocabulary.get(term)
            if target is not None:
                mapping[col] = target
        rows = tuple(
            {mapping[col]: value for col, value in row.items() if col in mapping}
            for row in self.rows
        )
        return DocumentTermMatrix(
            vocabulary=vocabulary,
            rows=rows,
            doc_ids=self.doc_ids,
            weighting=self.weighting,
        )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build_dtm(
    token_sequences: Sequence[Sequence[str]],
    min_term_freq: int = 1,
    min_doc_freq: int = 1,
    max_doc_ratio: float = 1.0,
    doc_ids: Sequence[str] | None = None,
    term_fn: TermFunction | None = None,
) -> DocumentTermMatrix:
    """Build a trimmed vocabulary and raw-count matrix from token sequences.

    Columns are ordered by first occurrence across the corpus (documents in
    input order, terms in sequence order), so the same input always yields
    the same column layout.

    Args:
        token_sequences: One token sequence per document.
        min_term_freq: Minimum total occurrences of a term in the corpus.
        min_doc_freq: Minimum number of documents containing the term.
        max_doc_ratio: Maximum fraction of documents containing the term.
        doc_ids: Optional identifiers, one per document.
        term_fn: Maps a token sequence to the terms counted (unigrams when
            omitted, :func:`bigrams` for pair features).

    Returns:
        DocumentTermMatrix with exactly one row per input document.

    Raises:
        EmptyVocabularyError: If no term meets the thresholds.
    """
    if min_term_freq < 1 or min_doc_freq < 1:
        raise ValueError("min_term_freq and min_doc_freq must be at least 1")
    if not 0.0 < max_doc_ratio <= 1.0:
        raise ValueError(f"max_doc_ratio must be in (0, 1], got {max_doc_ratio}")
    if doc_ids is not None and len(doc_ids) != len(token_sequences):
        raise ValueError(
            f"doc_ids ({len(doc_ids)}) and token_sequences "
            f"({len(token_sequences)}) must have same length"
        )

    term_fn = term_fn or unigrams
    n_docs = len(token_sequences)

    doc_counts: list[Counter[str]] = []
    term_freq: Counter[str] = Counter()
    doc_freq: Counter[str] = Counter()
    first_seen: dict[str, int] = {}

    for tokens in token_sequences:
        terms = term_fn(tokens)
        counts = Counter(terms)
        doc_counts.append(counts)
        term_freq.update(counts)
        doc_freq.update(counts.keys())
        for term in terms:
            if term not in first_seen:
                first_seen[term] = len(first_seen)

    max_df = max_doc_ratio * n_docs
    retained = [
        term
        for term in sorted(first_seen, key=first_seen.__getitem__)
        if term_freq[term] >= min_term_freq
        and doc_freq[term] >= min_doc_freq
        and doc_freq[term] <= max_df
    ]
    if not retained:
        raise EmptyVocabularyError(min_term_freq, min_doc_freq, n_docs)

    vocabulary = Vocabulary(tuple(retained))
    rows = tuple(_count_row(counts, vocabulary) for counts in doc_counts)

    empty_rows = sum(1 for row in rows if not row)
    logger.debug(
        "Built %d x %d matrix (%d candidate terms, %d empty rows)",
        len(rows), len(vocabulary), len(first_seen), empty_rows,
    )

    return DocumentTermMatrix(
        vocabulary=vocabulary,
        rows=rows,
        doc_ids=tuple(doc_ids) if doc_ids is not None else (),
    )


def transform(
    token_sequences: Sequence[Sequence[str]],
    vocabulary: Vocabulary,
    doc_ids: Sequence[str] | None = None,
    term_fn: TermFunction | None = None,
) -> DocumentTermMatrix:
    """Count terms over a frozen vocabulary; unseen terms are ignored."""
    term_fn = term_fn or unigrams
    rows = tuple(
        _count_row(Counter(term_fn(tokens)), vocabulary) for tokens in token_sequences
    )
    return DocumentTermMatrix(
        vocabulary=vocabulary,
        rows=rows,
        doc_ids=tuple(doc_ids) if doc_ids is not None else (),
    )


def _count_row(counts: Counter[str], vocabulary: Vocabulary) -> dict[int, float]:
    row: dict[int, float] = {}
    for term, count in counts.items():
        col = vocabulary.get(term)
        if col is not None:
            row[col] = float(count)
    return row


# ---------------------------------------------------------------------------
# TF-IDF
# ---------------------------------------------------------------------------


def inverse_document_frequency(
    dtm: DocumentTermMatrix,
    base: float = math.e,
) -> list[float]:
    """Per-column ``log(N / df)``.

    Columns present in every document get exactly 0. A column with no
    occurrences (possible after :meth:`DocumentTermMatrix.align_to`) also
    gets 0 since it never contributes a weight.
    """
    if base <= 1:
        raise ValueError(f"log base must be greater than 1, got {base}")
    n_docs = dtm.n_rows
    idf = []
    for df in dtm.document_frequencies():
        if df == 0 or df >= n_docs:
            idf.append(0.0)
        else:
            idf.append(math.log(n_docs / df, base))
    return idf


def tfidf(dtm: DocumentTermMatrix, base: float = math.e) -> DocumentTermMatrix:
    """Reweight a raw-count matrix as ``count * log(N / df)``.

    The result has the same shape and vocabulary. Cells that become zero
    (terms found in every document) are dropped from the sparse rows.
    """
    if dtm.weighting != "count":
        raise ValueError(f"tfidf expects a count matrix, got {dtm.weighting!r}")
    idf = inverse_document_frequency(dtm, base)
    rows = tuple(
        {col: value * idf[col] for col, value in row.items() if idf[col] > 0}
        for row in dtm.rows
    )
    return DocumentTermMatrix(
        vocabulary=dtm.vocabulary,
        rows=rows,
        doc_ids=dtm.doc_ids,
        weighting="tfidf",
    )


# ---------------------------------------------------------------------------
# Top terms
# ---------------------------------------------------------------------------


def top_terms(
    dtm: DocumentTermMatrix,
    labels: Sequence[str],
    top_n: int = 10,
) -> dict[str, list[tuple[str, float]]]:
    """Highest-weight terms per class, summed over that class's rows.

    Ties are ordered by column index so results are deterministic.
    """
    if len(labels) != dtm.n_rows:
        raise ValueError(
            f"labels ({len(labels)}) and matrix rows ({dtm.n_rows}) must have same length"
        )
    sums: dict[str, dict[int, float]] = defaultdict(lambda: defaultdict(float))
    for row, label in zip(dtm.rows, labels):
        class_sums = sums[label]
        for col, value in row.items():
            class_sums[col] += value

    terms = dtm.vocabulary.terms
    result: dict[str, list[tuple[str, float]]] = {}
    for label in sorted(set(labels)):
        ranked = sorted(sums[label].items(), key=lambda item: (-item[1], item[0]))
        result[label] = [(terms[col], value) for col, value in ranked[:top_n] if value > 0]
    return result
