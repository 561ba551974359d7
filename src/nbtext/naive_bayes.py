"""Binary multinomial Naive Bayes with additive (Laplace) smoothing.

:func:`fit` turns a document-term matrix and its labels into an immutable
:class:`TrainedNaiveBayes`. Prediction is a pure function of that value and
a matrix over the same vocabulary.

Everything is computed in log space:

    log P(c)       = log(n_docs(c) / n_docs)
    log P(t | c)   = log((count(t, c) + alpha) / (total(c) + alpha * |V|))
    score(d, c)    = log P(c) + sum_t count(t, d) * log P(t | c)

With ``alpha > 0`` no likelihood is ever zero, so a single term that never
appeared in a class cannot collapse that class's score to ``-inf``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from .errors import VocabularyMismatchError
from .features import DocumentTermMatrix, Vocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainedNaiveBayes:
    """Fitted classifier state.

    The per-class mappings are read-only views.

    Attributes:
        classes: The two class labels. Score ties go to ``classes[0]``.
        class_log_prior: Log prior per class. A class with no training
            documents has ``-inf``.
        feature_log_prob: Per class, the log likelihood of every column.
        vocabulary: Vocabulary snapshot the model was fitted on.
        alpha: Smoothing constant used at fit time.
        class_counts: Training documents per class.
    """

    classes: tuple[str, str]
    class_log_prior: Mapping[str, float]
    feature_log_prob: Mapping[str, tuple[float, ...]]
    vocabulary: Vocabulary
    alpha: float
    class_counts: Mapping[str, int]

    def _check_vocabulary(self, dtm: DocumentTermMatrix) -> None:
        if dtm.vocabulary != self.vocabulary:
            raise VocabularyMismatchError(len(self.vocabulary), dtm.n_cols)

    def log_scores(self, dtm: DocumentTermMatrix) -> list[dict[str, float]]:
        """Unnormalized log posterior per class, one dict per row."""
        self._check_vocabulary(dtm)
        return [self._row_scores(row) for row in dtm.rows]

    def _row_scores(self, row: Mapping[int, float]) -> dict[str, float]:
        scores: dict[str, float] = {}
        for cls in self.classes:
            score = self.class_log_prior[cls]
            log_probs = self.feature_log_prob[cls]
            for col, value in row.items():
                score += value * log_probs[col]
            scores[cls] = score
        return scores

    def predict(self, dtm: DocumentTermMatrix) -> list[str]:
        """Predict a label for every row of ``dtm``.

        Raises:
            VocabularyMismatchError: If ``dtm`` was not built over the
                fit-time vocabulary.
        """
        first, second = self.classes
        predictions = []
        for scores in self.log_scores(dtm):
            predictions.append(second if scores[second] > scores[first] else first)
        return predictions

    def predict_proba(self, dtm: DocumentTermMatrix) -> list[dict[str, float]]:
        """Class probabilities per row, normalized with log-sum-exp."""
        results = []
        for scores in self.log_scores(dtm):
            max_score = max(scores.values())
            exp_scores = {cls: math.exp(s - max_score) for cls, s in scores.items()}
            total = sum(exp_scores.values())
            results.append({cls: value / total for cls, value in exp_scores.items()})
        return results

    def most_informative_features(
        self,
        class_name: str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Terms most indicative of ``class_name`` versus the other class.

        Ranked by ``log P(t | class) - log P(t | other)``, descending.

        Raises:
            ValueError: If class_name is not one of the fitted classes.
        """
        if class_name not in self.classes:
            raise ValueError(f"Unknown class: {class_name}. Known: {list(self.classes)}")
        other = self.classes[1] if class_name == self.classes[0] else self.classes[0]
        target = self.feature_log_prob[class_name]
        rest = self.feature_log_prob[other]
        ratios = [
            (term, round(target[col] - rest[col], 4))
            for col, term in enumerate(self.vocabulary.terms)
        ]
        ratios.sort(key=lambda x: x[1], reverse=True)
        return ratios[:top_n]

    def to_dict(self) -> dict:
        return {
            "classes": list(self.classes),
            "alpha": self.alpha,
            "class_counts": dict(self.class_counts),
            "class_log_prior": dict(self.class_log_prior),
            "vocabulary_size": len(self.vocabulary),
        }


def fit(
    dtm: DocumentTermMatrix,
    labels: Sequence[str],
    classes: Sequence[str] | None = None,
    alpha: float = 1.0,
) -> TrainedNaiveBayes:
    """Train a binary multinomial Naive Bayes model.

    Args:
        dtm: Training matrix (counts or TF-IDF weights).
        labels: One label per row.
        classes: The two class labels, in tie-break order. Defaults to the
            sorted distinct training labels. Pass it explicitly when a
            training subset may be missing a class.
        alpha: Additive smoothing constant, must be positive.

    Returns:
        An immutable TrainedNaiveBayes.

    Raises:
        ValueError: On length mismatch, non-positive alpha, a class list
            that is not exactly two labels, or labels outside ``classes``.
    """
    if dtm.n_rows != len(labels):
        raise ValueError(
            f"matrix rows ({dtm.n_rows}) and labels ({len(labels)}) must have same length"
        )
    if alpha <= 0:
        raise ValueError(f"alpha must be positive, got {alpha}")
    if not labels:
        raise ValueError("Cannot fit on an empty training set")

    if classes is None:
        classes = sorted(set(labels))
    class_pair = tuple(classes)
    if len(class_pair) != 2 or class_pair[0] == class_pair[1]:
        raise ValueError(
            f"Exactly two distinct classes are required, got {list(class_pair)}"
        )
    unknown = set(labels) - set(class_pair)
    if unknown:
        raise ValueError(f"Labels {sorted(unknown)} are not in classes {list(class_pair)}")

    n_cols = dtm.n_cols
    n_total = len(labels)
    feature_sums = {cls: [0.0] * n_cols for cls in class_pair}
    class_counts = {cls: 0 for cls in class_pair}

    for row, label in zip(dtm.rows, labels):
        class_counts[label] += 1
        sums = feature_sums[label]
        for col, value in row.items():
            sums[col] += value

    class_log_prior: dict[str, float] = {}
    feature_log_prob: dict[str, tuple[float, ...]] = {}
    for cls in class_pair:
        count = class_counts[cls]
        class_log_prior[cls] = math.log(count / n_total) if count else -math.inf
        if not count:
            logger.warning("Class %r has no training documents; its prior is zero", cls)

        sums = feature_sums[cls]
        log_denominator = math.log(sum(sums) + alpha * n_cols)
        feature_log_prob[cls] = tuple(
            math.log(value + alpha) - log_denominator for value in sums
        )

    logger.debug(
        "Fitted Naive Bayes on %d documents, %d terms, class counts %s",
        n_total, n_cols, class_counts,
    )

    return TrainedNaiveBayes(
        classes=class_pair,  # type: ignore[arg-type]
        class_log_prior=MappingProxyType(class_log_prior),
        feature_log_prob=MappingProxyType(feature_log_prob),
        vocabulary=dtm.vocabulary,
        alpha=alpha,
        class_counts=MappingProxyType(class_counts),
    )


def predict(model: TrainedNaiveBayes, dtm: DocumentTermMatrix) -> list[str]:
    """Functional alias for :meth:`TrainedNaiveBayes.predict`."""
    return model.predict(dtm)
