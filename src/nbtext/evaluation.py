"""Holdout evaluation and the cross-validation harness.

Each fold consumes a precomputed :class:`~nbtext.splitting.Fold`, so folds
are independent and may run on a thread pool without changing any result.
A fold whose train or test rows lack one of the classes is *degraded*: it is
still evaluated, its undefined metrics are NaN, and a warning is logged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .features import DocumentTermMatrix
from .metrics import ClassificationMetrics, evaluate, mean, round_or_none, std
from .naive_bayes import TrainedNaiveBayes, fit
from .splitting import Fold, Partition, stratified_k_fold

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HoldoutResult:
    """Outcome of one fit/predict/evaluate cycle on a train/test split."""

    metrics: ClassificationMetrics
    predictions: tuple[str, ...]
    train_size: int
    test_size: int
    degraded: bool
    model: TrainedNaiveBayes

    def to_dict(self) -> dict:
        return {
            "train_size": self.train_size,
            "test_size": self.test_size,
            "degraded": self.degraded,
            "metrics": self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class FoldResult:
    """Evaluation of a single cross-validation fold."""

    index: int
    train_size: int
    test_size: int
    metrics: ClassificationMetrics
    degraded: bool

    @property
    def accuracy(self) -> float:
        return self.metrics.accuracy

    def to_dict(self) -> dict:
        return {
            "fold": self.index,
            "train_size": self.train_size,
            "test_size": self.test_size,
            "degraded": self.degraded,
            "metrics": self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class CrossValidationResult:
    """Per-fold results and their aggregates.

    Means propagate NaN: if any fold has an undefined precision, the mean
    precision is NaN too. ``undefined_folds`` counts folds with any NaN.
    """

    folds: tuple[FoldResult, ...]

    @property
    def k(self) -> int:
        return len(self.folds)

    @property
    def accuracies(self) -> list[float]:
        return [f.metrics.accuracy for f in self.folds]

    @property
    def mean_accuracy(self) -> float:
        return mean(self.accuracies)

    @property
    def std_accuracy(self) -> float:
        return std(self.accuracies)

    @property
    def mean_precision(self) -> float:
        return mean([f.metrics.precision for f in self.folds])

    @property
    def mean_recall(self) -> float:
        return mean([f.metrics.recall for f in self.folds])

    @property
    def mean_f1(self) -> float:
        return mean([f.metrics.f1 for f in self.folds])

    @property
    def undefined_folds(self) -> int:
        return sum(1 for f in self.folds if f.metrics.is_degraded)

    @property
    def degraded_folds(self) -> int:
        return sum(1 for f in self.folds if f.degraded)

    def to_dict(self) -> dict:
        return {
            "k": self.k,
            "mean_accuracy": round_or_none(self.mean_accuracy),
            "std_accuracy": round_or_none(self.std_accuracy),
            "mean_precision": round_or_none(self.mean_precision),
            "mean_recall": round_or_none(self.mean_recall),
            "mean_f1": round_or_none(self.mean_f1),
            "undefined_folds": self.undefined_folds,
            "degraded_folds": self.degraded_folds,
            "folds": [f.to_dict() for f in self.folds],
        }


# ---------------------------------------------------------------------------
# Harness
# ---------------------------------------------------------------------------


def _resolve_classes(
    labels: Sequence[str],
    classes: Sequence[str] | None,
    positive: str | None,
) -> tuple[tuple[str, str], str]:
    if classes is None:
        classes = sorted(set(labels))
    pair = tuple(classes)
    if len(pair) != 2:
        raise ValueError(f"Exactly two classes are required, got {list(pair)}")
    if positive is None:
        positive = pair[0]
    elif positive not in pair:
        raise ValueError(f"Positive class {positive!r} is not one of {list(pair)}")
    return pair, positive  # type: ignore[return-value]


def _missing_classes(labels: Sequence[str], classes: Sequence[str]) -> list[str]:
    present = set(labels)
    return [c for c in classes if c not in present]


def _run_split(
    dtm: DocumentTermMatrix,
    labels: Sequence[str],
    train_idx: Sequence[int],
    test_idx: Sequence[int],
    classes: tuple[str, str],
    positive: str,
    alpha: float,
    name: str,
) -> HoldoutResult:
    train_labels = [labels[i] for i in train_idx]
    test_labels = [labels[i] for i in test_idx]

    missing_train = _missing_classes(train_labels, classes)
    missing_test = _missing_classes(test_labels, classes)
    degraded = bool(missing_train or missing_test)
    if degraded:
        logger.warning(
            "%s is missing classes (train: %s, test: %s); metrics may be undefined",
            name, missing_train or "none", missing_test or "none",
        )

    model = fit(dtm.select(train_idx), train_labels, classes=classes, alpha=alpha)
    predictions = model.predict(dtm.select(test_idx))
    negative = classes[1] if positive == classes[0] else classes[0]
    metrics = evaluate(test_labels, predictions, positive=positive, negative=negative)

    return HoldoutResult(
        metrics=metrics,
        predictions=tuple(predictions),
        train_size=len(train_idx),
        test_size=len(test_idx),
        degraded=degraded,
        model=model,
    )


def holdout_evaluate(
    dtm: DocumentTermMatrix,
    labels: Sequence[str],
    partition: Partition,
    alpha: float = 1.0,
    positive: str | None = None,
    classes: Sequence[str] | None = None,
) -> HoldoutResult:
    """Fit on ``partition.train`` rows and evaluate on ``partition.test`` rows."""
    if dtm.n_rows != len(labels):
        raise ValueError(
            f"matrix rows ({dtm.n_rows}) and labels ({len(labels)}) must have same length"
        )
    pair, positive = _resolve_classes(labels, classes, positive)
    result = _run_split(
        dtm, labels, partition.train, partition.test, pair, positive, alpha, "Holdout split"
    )
    logger.info(
        "Holdout: accuracy=%s on %d test documents",
        _fmt(result.metrics.accuracy), result.test_size,
    )
    return result


def cross_validate(
    dtm: DocumentTermMatrix,
    labels: Sequence[str],
    folds: Sequence[Fold] | None = None,
    k: int = 10,
    seed: int = 42,
    alpha: float = 1.0,
    positive: str | None = None,
    classes: Sequence[str] | None = None,
    max_workers: int = 1,
) -> CrossValidationResult:
    """Run stratified k-fold cross-validation with Naive Bayes.

    Args:
        dtm: Feature matrix for all documents.
        labels: Label per row.
        folds: Precomputed folds. Generated from ``k`` and ``seed`` when
            omitted.
        k: Number of folds (ignored when ``folds`` is given).
        seed: Splitter seed (ignored when ``folds`` is given).
        alpha: Smoothing constant.
        positive: Positive class for precision/recall/F1.
        classes: The two class labels; defaults to the sorted labels.
        max_workers: Run folds on a thread pool when greater than 1.

    Returns:
        CrossValidationResult with folds in index order.
    """
    if dtm.n_rows != len(labels):
        raise ValueError(
            f"matrix rows ({dtm.n_rows}) and labels ({len(labels)}) must have same length"
        )
    pair, positive = _resolve_classes(labels, classes, positive)
    if folds is None:
        folds = stratified_k_fold(labels, k=k, seed=seed)

    def run_fold(fold: Fold) -> FoldResult:
        result = _run_split(
            dtm, labels, fold.train, fold.test, pair, positive, alpha,
            f"Fold {fold.index}",
        )
        logger.debug(
            "Fold %d: accuracy=%s (train=%d, test=%d)",
            fold.index, _fmt(result.metrics.accuracy), result.train_size, result.test_size,
        )
        return FoldResult(
            index=fold.index,
            train_size=result.train_size,
            test_size=result.test_size,
            metrics=result.metrics,
            degraded=result.degraded,
        )

    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            fold_results = list(executor.map(run_fold, folds))
    else:
        fold_results = [run_fold(fold) for fold in folds]

    result = CrossValidationResult(folds=tuple(fold_results))
    logger.info(
        "Cross-validation: %d folds, mean accuracy=%s (std %s), %d degraded",
        result.k, _fmt(result.mean_accuracy), _fmt(result.std_accuracy),
        result.degraded_folds,
    )
    return result


def _fmt(value: float) -> str:
    return "undefined" if math.isnan(value) else f"{value:.4f}"
