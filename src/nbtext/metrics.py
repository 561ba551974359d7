"""Binary confusion matrix and derived metrics.

Undefined values are reported as ``float("nan")``, never coerced to 0:

- precision when nothing was predicted positive (tp + fp == 0)
- recall when there are no actual positives (tp + fn == 0)
- F1 when precision or recall is undefined, or both are 0
- accuracy on an empty test set
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

NAN = float("nan")


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator > 0 else NAN


def round_or_none(value: float, digits: int = 4) -> float | None:
    """Round for serialization; undefined values become ``None``."""
    return None if math.isnan(value) else round(value, digits)


@dataclass(frozen=True)
class ConfusionMatrix:
    """2x2 table of (predicted, actual) counts for a binary task."""

    positive: str
    negative: str | None
    tp: int = 0
    fp: int = 0
    fn: int = 0
    tn: int = 0

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.fn + self.tn

    def as_table(self) -> dict[str, dict[str, int]]:
        """Nested ``{predicted: {actual: count}}`` mapping."""
        neg = self.negative if self.negative is not None else f"not {self.positive}"
        return {
            self.positive: {self.positive: self.tp, neg: self.fp},
            neg: {self.positive: self.fn, neg: self.tn},
        }

    def to_dict(self) -> dict:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "tp": self.tp,
            "fp": self.fp,
            "fn": self.fn,
            "tn": self.tn,
        }


@dataclass(frozen=True)
class ClassificationMetrics:
    """Accuracy, precision, recall and F1 for the positive class."""

    confusion: ConfusionMatrix
    accuracy: float
    precision: float
    recall: float
    f1: float

    @property
    def is_degraded(self) -> bool:
        """True if any metric is undefined."""
        return any(
            math.isnan(v) for v in (self.accuracy, self.precision, self.recall, self.f1)
        )

    def to_dict(self) -> dict:
        return {
            "accuracy": round_or_none(self.accuracy),
            "precision": round_or_none(self.precision),
            "recall": round_or_none(self.recall),
            "f1": round_or_none(self.f1),
            "confusion_matrix": self.confusion.to_dict(),
        }

    def summary(self) -> str:
        """Human-readable summary of metrics."""

        def fmt(value: float) -> str:
            return "undefined" if math.isnan(value) else f"{value:.4f}"

        c = self.confusion
        return "\n".join([
            f"Accuracy:  {fmt(self.accuracy)}",
            f"Precision: {fmt(self.precision)}",
            f"Recall:    {fmt(self.recall)}",
            f"F1:        {fmt(self.f1)}",
            f"Confusion (positive={c.positive!r}): "
            f"TP={c.tp} FP={c.fp} FN={c.fn} TN={c.tn}",
        ])


def confusion_matrix(
    y_true: Sequence[str],
    y_pred: Sequence[str],
    positive: str,
    negative: str | None = None,
) -> ConfusionMatrix:
    """Count true/false positives and negatives for ``positive``.

    Raises:
        ValueError: On length mismatch, or when the labels involve more than
            two classes (or a label other than ``positive``/``negative``).
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    labels = set(y_true) | set(y_pred)
    others = labels - {positive}
    if negative is None:
        if len(others) > 1:
            raise ValueError(f"Binary metrics need at most two classes, got {sorted(labels)}")
        negative = next(iter(others)) if others else None
    elif others - {negative}:
        raise ValueError(
            f"Unexpected labels {sorted(others - {negative})}; "
            f"expected {positive!r} or {negative!r}"
        )

    tp = fp = fn = tn = 0
    for true, pred in zip(y_true, y_pred):
        if pred == positive:
            if true == positive:
                tp += 1
            else:
                fp += 1
        elif true == positive:
            fn += 1
        else:
            tn += 1

    return ConfusionMatrix(positive=positive, negative=negative, tp=tp, fp=fp, fn=fn, tn=tn)


def evaluate(
    y_true: Sequence[str],
    y_pred: Sequence[str],
    positive: str,
    negative: str | None = None,
) -> ClassificationMetrics:
    """Compute the confusion matrix and metrics for a binary prediction run.

    Args:
        y_true: Ground truth labels.
        y_pred: Predicted labels.
        positive: Label treated as the positive class.
        negative: The other label. Inferred from the data when omitted.

    Returns:
        ClassificationMetrics; undefined values are NaN.
    """
    cm = confusion_matrix(y_true, y_pred, positive, negative)

    accuracy = _ratio(cm.tp + cm.tn, cm.total)
    precision = _ratio(cm.tp, cm.tp + cm.fp)
    recall = _ratio(cm.tp, cm.tp + cm.fn)
    if math.isnan(precision) or math.isnan(recall) or precision + recall == 0:
        f1 = NAN
    else:
        f1 = 2 * precision * recall / (precision + recall)

    return ClassificationMetrics(
        confusion=cm,
        accuracy=accuracy,
        precision=precision,
        recall=recall,
        f1=f1,
    )


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; NaN if empty or if any value is NaN."""
    if not values:
        return NAN
    return sum(values) / len(values)


def std(values: Sequence[float]) -> float:
    """Population standard deviation; NaN if empty or any value is NaN."""
    if not values:
        return NAN
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))
