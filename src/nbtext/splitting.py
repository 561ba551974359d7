"""Stratified holdout and k-fold partitioning.

The seed is the only source of randomness in the pipeline. Each call builds
its own ``random.Random(seed)`` so partitions are reproducible and never
depend on global random state.
"""

from __future__ import annotations

import math
import random
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Partition:
    """A single train/test split of document indices."""

    train: tuple[int, ...]
    test: tuple[int, ...]

    def to_dict(self) -> dict:
        return {"train": list(self.train), "test": list(self.test)}


@dataclass(frozen=True)
class Fold:
    """One cross-validation fold: ``test`` is held out, ``train`` is the rest."""

    index: int
    train: tuple[int, ...]
    test: tuple[int, ...]

    def to_dict(self) -> dict:
        return {"index": self.index, "train": list(self.train), "test": list(self.test)}


def _shuffled_class_indices(
    labels: Sequence[str],
    rng: random.Random,
) -> list[list[int]]:
    """Indices grouped by class (classes in sorted order), each shuffled."""
    groups: dict[str, list[int]] = defaultdict(list)
    for idx, label in enumerate(labels):
        groups[label].append(idx)
    shuffled = []
    for label in sorted(groups):
        indices = groups[label]
        rng.shuffle(indices)
        shuffled.append(indices)
    return shuffled


def stratified_holdout(
    labels: Sequence[str],
    train_fraction: float = 0.5,
    seed: int = 42,
) -> Partition:
    """Split indices into train and test, preserving class proportions.

    Each class contributes ``floor(train_fraction * n_class)`` documents to
    the training side and the rest to the test side.

    Args:
        labels: Class label per document.
        train_fraction: Share of each class used for training, in (0, 1).
        seed: Random seed for reproducibility.

    Returns:
        Partition with sorted train and test indices.

    Raises:
        ValueError: If the fraction is out of range or either side would
            be empty.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    rng = random.Random(seed)
    train: list[int] = []
    test: list[int] = []
    for indices in _shuffled_class_indices(labels, rng):
        n_train = math.floor(train_fraction * len(indices))
        train.extend(indices[:n_train])
        test.extend(indices[n_train:])

    if not train or not test:
        raise ValueError(
            f"train_fraction={train_fraction} leaves an empty side for "
            f"{len(labels)} documents (train={len(train)}, test={len(test)})"
        )
    return Partition(train=tuple(sorted(train)), test=tuple(sorted(test)))


def stratified_k_fold(
    labels: Sequence[str],
    k: int = 10,
    seed: int = 42,
) -> tuple[Fold, ...]:
    """Generate stratified k-fold splits.

    Within each class the shuffled indices are dealt round-robin onto the
    folds. The dealing position carries over from one class to the next, so
    fold sizes differ by at most one overall and by at most one per class.
    Every document appears in exactly one test group.

    Args:
        labels: Class label per document.
        k: Number of folds, between 2 and ``len(labels)``.
        seed: Random seed for reproducibility.

    Returns:
        Tuple of k Fold values with sorted index tuples.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")
    if k > len(labels):
        raise ValueError(f"k ({k}) cannot exceed the number of documents ({len(labels)})")

    rng = random.Random(seed)
    assignments = [0] * len(labels)
    position = 0
    for indices in _shuffled_class_indices(labels, rng):
        for idx in indices:
            assignments[idx] = position % k
            position += 1

    folds = []
    for fold_idx in range(k):
        test = tuple(i for i, f in enumerate(assignments) if f == fold_idx)
        train = tuple(i for i, f in enumerate(assignments) if f != fold_idx)
        folds.append(Fold(index=fold_idx, train=train, test=test))
    return tuple(folds)
