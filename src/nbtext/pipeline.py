"""End-to-end pipeline over the three feature representations.

Documents are tokenized once. Each representation builds its own matrix:

- ``bow``: unigram counts trimmed by the bag-of-words thresholds
- ``tfidf``: the ``bow`` matrix reweighted by TF-IDF
- ``bigram``: bigram counts trimmed by the bigram thresholds

The holdout partition and the k folds are computed once from the labels and
reused for every representation, so all of them are trained and tested on
the same documents.

Example::

    from nbtext import PipelineConfig, run_pipeline
    result = run_pipeline(documents, PipelineConfig(folds=5))
    for rep in result.representations.values():
        print(rep.name, rep.holdout.metrics.accuracy, rep.cross_validation.mean_accuracy)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .config import PipelineConfig
from .evaluation import CrossValidationResult, HoldoutResult, cross_validate, holdout_evaluate
from .features import DocumentTermMatrix, bigrams, build_dtm, tfidf, top_terms
from .models import Document, TokenizedDocument
from .splitting import Fold, Partition, stratified_holdout, stratified_k_fold
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepresentationResult:
    """Holdout and cross-validation outcome for one representation."""

    name: str
    dtm: DocumentTermMatrix
    holdout: HoldoutResult
    cross_validation: CrossValidationResult
    top_terms: dict[str, list[tuple[str, float]]]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "vocabulary_size": self.dtm.n_cols,
            "holdout": self.holdout.to_dict(),
            "cross_validation": self.cross_validation.to_dict(),
            "top_terms": {
                label: [[term, round(value, 4)] for term, value in terms]
                for label, terms in self.top_terms.items()
            },
        }


@dataclass(frozen=True)
class PipelineResult:
    """Everything a run produced, keyed by representation name."""

    config: PipelineConfig
    classes: tuple[str, str]
    positive_class: str
    partition: Partition
    folds: tuple[Fold, ...]
    representations: dict[str, RepresentationResult]

    def to_dict(self) -> dict:
        return {
            "config": self.config.to_dict(),
            "classes": list(self.classes),
            "positive_class": self.positive_class,
            "n_documents": len(self.partition.train) + len(self.partition.test),
            "representations": {
                name: rep.to_dict() for name, rep in self.representations.items()
            },
        }


def tokenize_documents(
    documents: Sequence[Document],
    tokenizer: Tokenizer | None = None,
) -> list[TokenizedDocument]:
    tokenizer = tokenizer or Tokenizer()
    return [
        TokenizedDocument(doc_id=d.doc_id, tokens=tuple(tokenizer.tokenize(d.text)), label=d.label)
        for d in documents
    ]


def build_representations(
    documents: Sequence[TokenizedDocument],
    config: PipelineConfig,
) -> dict[str, DocumentTermMatrix]:
    """Build the matrix for every representation named in ``config``.

    Raises:
        EmptyVocabularyError: If a representation's thresholds remove all terms.
    """
    token_sequences = [d.tokens for d in documents]
    doc_ids = [d.doc_id for d in documents]
    matrices: dict[str, DocumentTermMatrix] = {}

    wanted = set(config.representations)
    if wanted & {"bow", "tfidf"}:
        bow = build_dtm(
            token_sequences,
            min_term_freq=config.bow_min_term_freq,
            min_doc_freq=config.bow_min_doc_freq,
            doc_ids=doc_ids,
        )
        if "bow" in wanted:
            matrices["bow"] = bow
        if "tfidf" in wanted:
            matrices["tfidf"] = tfidf(bow)
    if "bigram" in wanted:
        matrices["bigram"] = build_dtm(
            token_sequences,
            min_term_freq=config.bigram_min_term_freq,
            min_doc_freq=config.bigram_min_doc_freq,
            doc_ids=doc_ids,
            term_fn=bigrams,
        )

    for name, dtm in matrices.items():
        logger.info("Representation %s: %d documents x %d terms", name, *dtm.shape)
    return {name: matrices[name] for name in config.representations}


def run_pipeline(
    documents: Sequence[Document] | Sequence[TokenizedDocument],
    config: PipelineConfig | None = None,
    tokenizer: Tokenizer | None = None,
) -> PipelineResult:
    """Tokenize, build features, then run holdout and cross-validation.

    Args:
        documents: Raw :class:`Document` values, or already tokenized
            :class:`TokenizedDocument` values.
        config: Run settings; defaults to ``PipelineConfig()``.
        tokenizer: Tokenizer for raw documents.

    Returns:
        PipelineResult with one RepresentationResult per representation.

    Raises:
        ValueError: If the corpus does not have exactly two classes or the
            positive class is unknown.
        EmptyVocabularyError: If trimming removes every term.
    """
    config = config or PipelineConfig()
    if documents and isinstance(documents[0], Document):
        tokenized = tokenize_documents(documents, tokenizer)  # type: ignore[arg-type]
    else:
        tokenized = list(documents)  # type: ignore[arg-type]

    labels = [d.label for d in tokenized]
    classes = tuple(sorted(set(labels)))
    if len(classes) != 2:
        raise ValueError(f"Corpus must contain exactly two classes, got {list(classes)}")
    positive = config.positive_class or classes[0]
    if positive not in classes:
        raise ValueError(f"Positive class {positive!r} is not one of {list(classes)}")

    empty = sum(1 for d in tokenized if d.is_empty)
    logger.info(
        "Running pipeline on %d documents (%d with no tokens), classes %s",
        len(tokenized), empty, list(classes),
    )

    partition = stratified_holdout(labels, config.train_fraction, config.seed)
    folds = stratified_k_fold(labels, config.folds, config.seed)

    results: dict[str, RepresentationResult] = {}
    for name, dtm in build_representations(tokenized, config).items():
        logger.info("Evaluating representation %s", name)
        holdout = holdout_evaluate(
            dtm, labels, partition,
            alpha=config.alpha, positive=positive, classes=classes,
        )
        cv = cross_validate(
            dtm, labels, folds=folds,
            alpha=config.alpha, positive=positive, classes=classes,
            max_workers=config.max_workers,
        )
        results[name] = RepresentationResult(
            name=name,
            dtm=dtm,
            holdout=holdout,
            cross_validation=cv,
            top_terms=top_terms(dtm, labels, config.top_n_terms),
        )

    return PipelineResult(
        config=config,
        classes=classes,  # type: ignore[arg-type]
        positive_class=positive,
        partition=partition,
        folds=folds,
        representations=results,
    )
