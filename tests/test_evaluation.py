"""Tests for holdout evaluation and the cross-validation harness."""

from __future__ import annotations

import logging
import math

import pytest

from nbtext.evaluation import cross_validate, holdout_evaluate
from nbtext.features import build_dtm
from nbtext.splitting import Fold, Partition, stratified_holdout, stratified_k_fold
from nbtext.tokenizer import Tokenizer


@pytest.fixture
def corpus_dtm(documents):
    tokens = Tokenizer().tokenize_many(d.text for d in documents)
    return build_dtm(tokens, min_term_freq=5)


class TestHoldout:
    """Tests for single-split evaluation."""

    def test_end_to_end_half_split(self, corpus_dtm, labels) -> None:
        partition = stratified_holdout(labels, 0.5, seed=42)
        result = holdout_evaluate(corpus_dtm, labels, partition, alpha=1.0, positive="finance")
        assert result.train_size == 12
        assert result.test_size == 12
        assert result.metrics.confusion.total == 12
        assert result.metrics.accuracy > 0.5
        assert not result.degraded
        assert len(result.predictions) == 12

    def test_default_positive_is_first_sorted_class(self, corpus_dtm, labels) -> None:
        partition = stratified_holdout(labels, 0.5)
        result = holdout_evaluate(corpus_dtm, labels, partition)
        assert result.metrics.confusion.positive == "finance"
        assert result.metrics.confusion.negative == "health"

    def test_unknown_positive_rejected(self, corpus_dtm, labels) -> None:
        partition = stratified_holdout(labels, 0.5)
        with pytest.raises(ValueError, match="Positive class"):
            holdout_evaluate(corpus_dtm, labels, partition, positive="sports")

    def test_label_length_mismatch(self, corpus_dtm, labels) -> None:
        partition = stratified_holdout(labels, 0.5)
        with pytest.raises(ValueError, match="same length"):
            holdout_evaluate(corpus_dtm, labels[:-1], partition)

    def test_single_class_test_side_is_degraded(self, corpus_dtm, labels, caplog) -> None:
        # Test rows are all "finance"; train rows hold both classes
        test = tuple(range(3))
        train = tuple(range(3, 24))
        with caplog.at_level(logging.WARNING, logger="nbtext.evaluation"):
            result = holdout_evaluate(
                corpus_dtm, labels, Partition(train=train, test=test), positive="health"
            )
        assert result.degraded
        assert math.isnan(result.metrics.recall)
        assert "missing classes" in caplog.text


class TestCrossValidation:
    """Tests for the k-fold harness."""

    def test_ten_folds_on_24_documents(self, corpus_dtm, labels) -> None:
        result = cross_validate(corpus_dtm, labels, k=10, seed=42)
        assert result.k == 10
        assert len(result.accuracies) == 10
        assert all(0.0 <= a <= 1.0 for a in result.accuracies)
        assert sum(f.test_size for f in result.folds) == 24
        assert result.mean_accuracy == pytest.approx(sum(result.accuracies) / 10)
        assert result.mean_accuracy > 0.5

    def test_precomputed_folds_are_used(self, corpus_dtm, labels) -> None:
        folds = stratified_k_fold(labels, k=4, seed=7)
        result = cross_validate(corpus_dtm, labels, folds=folds)
        assert result.k == 4
        assert [f.test_size for f in result.folds] == [len(f.test) for f in folds]

    def test_reproducible(self, corpus_dtm, labels) -> None:
        first = cross_validate(corpus_dtm, labels, k=5, seed=3)
        second = cross_validate(corpus_dtm, labels, k=5, seed=3)
        assert first.to_dict() == second.to_dict()
        assert first.accuracies == second.accuracies

    def test_parallel_matches_sequential(self, corpus_dtm, labels) -> None:
        sequential = cross_validate(corpus_dtm, labels, k=6, seed=11)
        parallel = cross_validate(corpus_dtm, labels, k=6, seed=11, max_workers=4)
        assert [f.index for f in parallel.folds] == list(range(6))
        assert [f.metrics for f in parallel.folds] == [f.metrics for f in sequential.folds]

    def test_degraded_fold_does_not_abort(self, corpus_dtm, labels) -> None:
        # Fold 0 tests only "finance" documents
        folds = (
            Fold(index=0, train=tuple(range(4, 24)), test=(0, 1, 2, 3)),
            Fold(index=1, train=tuple(range(0, 20)), test=(20, 21, 22, 23)),
        )
        result = cross_validate(corpus_dtm, labels, folds=folds, positive="finance")
        assert result.k == 2
        assert result.degraded_folds == 2
        # Fold 1 has no actual "finance" documents, so recall is undefined
        assert math.isnan(result.folds[1].metrics.recall)
        assert math.isnan(result.mean_recall)
        assert result.undefined_folds >= 1
        assert not math.isnan(result.mean_accuracy)

    def test_train_group_missing_class(self, corpus_dtm, labels) -> None:
        folds = (Fold(index=0, train=tuple(range(12)), test=tuple(range(12, 24))),)
        result = cross_validate(corpus_dtm, labels, folds=folds)
        fold = result.folds[0]
        assert fold.degraded
        # Only "finance" was seen in training, so every prediction is "finance"
        assert fold.accuracy == 0.0

    def test_to_dict_structure(self, corpus_dtm, labels) -> None:
        data = cross_validate(corpus_dtm, labels, k=3).to_dict()
        assert data["k"] == 3
        assert len(data["folds"]) == 3
        assert {"mean_accuracy", "std_accuracy", "mean_f1", "undefined_folds"} <= set(data)

    def test_three_classes_rejected(self, corpus_dtm, labels) -> None:
        bad = list(labels)
        bad[0] = "sports"
        with pytest.raises(ValueError, match="two classes"):
            cross_validate(corpus_dtm, bad, k=3)
