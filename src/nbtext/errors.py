"""Exceptions raised by the classification pipeline."""

from __future__ import annotations


class NbtextError(Exception):
    """Base class for pipeline errors."""


class EmptyVocabularyError(NbtextError, ValueError):
    """Raised when trimming removes every term from a vocabulary."""

    def __init__(self, min_term_freq: int, min_doc_freq: int, n_docs: int) -> None:
        self.min_term_freq = min_term_freq
        self.min_doc_freq = min_doc_freq
        self.n_docs = n_docs
        super().__init__(
            f"No terms survived trimming (min_term_freq={min_term_freq}, "
            f"min_doc_freq={min_doc_freq}) over {n_docs} documents"
        )


class VocabularyMismatchError(NbtextError, ValueError):
    """Raised when a matrix's columns do not match the fit-time vocabulary.

    Re-align the matrix with ``DocumentTermMatrix.align_to()`` before
    predicting.
    """

    def __init__(self, expected_size: int, actual_size: int) -> None:
        self.expected_size = expected_size
        self.actual_size = actual_size
        super().__init__(
            "Matrix vocabulary does not match the fit-time vocabulary "
            f"(expected {expected_size} columns, got {actual_size}). "
            "Call align_to() first."
        )
