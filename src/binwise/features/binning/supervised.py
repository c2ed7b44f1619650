"""
Supervised binning: nearest-neighbour bucket merging and decision-tree splits.
"""

import logging
from math import ceil
from typing import Any, List, Optional, Union

import numpy as np
from sklearn.tree import DecisionTreeClassifier

from binwise.config import BINNING
from binwise.exceptions import InvalidParameter
from binwise.utils.validation import check_choice, check_fraction

from .base import BaseBinner, BinningResult, Bucket, build_buckets, population_of
from .scorers import Scorer
from .unsupervised import TAIL_MODES, iter_cut_points

logger = logging.getLogger(__name__)

CRITERIA = frozenset(["gini", "entropy"])


class KNNMergeBinner(BaseBinner):
    """
    Merges equal-frequency buckets into ``n_groups`` bins of similar effect.

    The variable is first cut into small buckets holding at least
    ``min_bucket_fraction`` of the rows. Each bucket gets a score (log-odds
    of the outcome by default), then the adjacent pair whose scores are
    closest is merged and the merged bucket is rescored from its pooled
    counts. This repeats until ``n_groups`` buckets remain. Ties go to the
    pair with the smaller combined population, then to the leftmost pair.

    Merging never shrinks a bucket, so every bin keeps the minimum
    population, except an under-populated tail bucket when ``tail`` is
    ``"relaxed"``.
    """

    def __init__(
        self,
        n_groups: int = BINNING.DEFAULT_N_GROUPS,
        min_bucket_fraction: float = BINNING.DEFAULT_MIN_BUCKET_FRACTION,
        scorer: Union[str, Scorer] = "log_odds",
        tail: str = BINNING.DEFAULT_TAIL,
        event: Any = None,
    ):
        super().__init__(scorer=scorer, event=event)
        if isinstance(n_groups, bool) or not isinstance(n_groups, (int, np.integer)):
            raise InvalidParameter(f"n_groups must be an integer, got {n_groups!r}.")
        if n_groups < 1:
            raise InvalidParameter(f"n_groups must be at least 1, got {n_groups}.")
        self.n_groups = int(n_groups)
        self.min_bucket_fraction = check_fraction(
            min_bucket_fraction, "min_bucket_fraction"
        )
        self.tail = check_choice(tail, "tail mode", TAIL_MODES)
        self.initial_splits_: List[float] = []

    def _fit_splits(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> List[float]:
        self.initial_splits_ = list(
            iter_cut_points(x, self.min_bucket_fraction, self.tail)
        )
        buckets = build_buckets(x, y, self.initial_splits_)
        merged = self._merge(buckets)
        return [b.upper for b in merged[:-1]]

    def _merge(self, buckets: List[Bucket]) -> List[Bucket]:
        population = population_of(buckets)
        buckets = [b.with_score(self._score(b, population)) for b in buckets]
        n_initial = len(buckets)

        while len(buckets) > self.n_groups:
            best = min(
                range(len(buckets) - 1),
                key=lambda i: (
                    abs(buckets[i].score - buckets[i + 1].score),
                    buckets[i].count + buckets[i + 1].count,
                    i,
                ),
            )
            merged = buckets[best].merge(buckets[best + 1])
            buckets[best : best + 2] = [
                merged.with_score(self._score(merged, population))
            ]

        logger.debug(
            "Merged %d buckets into %d (target %d)",
            n_initial,
            len(buckets),
            self.n_groups,
        )
        return buckets


class DecisionTreeBinner(BaseBinner):
    """
    Bins continuous data using a Decision Tree to find optimal splits.

    A split is kept only when its impurity decrease, weighted by the node's
    share of rows, reaches ``complexity`` times the root impurity, and both
    children hold at least ``min_leaf_fraction`` of the rows. No pruning is
    done after the greedy build.
    """

    def __init__(
        self,
        complexity: float = BINNING.DEFAULT_COMPLEXITY,
        min_leaf_fraction: float = BINNING.DEFAULT_MIN_LEAF_FRACTION,
        criterion: str = BINNING.DEFAULT_CRITERION,
        max_depth: Optional[int] = None,
        seed: int = BINNING.DEFAULT_SEED,
        scorer: Union[str, Scorer] = "log_odds",
        event: Any = None,
    ):
        super().__init__(scorer=scorer, event=event)
        if not complexity >= 0:
            raise InvalidParameter(f"complexity must be >= 0, got {complexity}.")
        if max_depth is not None and max_depth < 1:
            raise InvalidParameter(f"max_depth must be at least 1, got {max_depth}.")
        self.complexity = float(complexity)
        self.min_leaf_fraction = check_fraction(min_leaf_fraction, "min_leaf_fraction")
        self.criterion = check_choice(criterion, "criterion", CRITERIA)
        self.max_depth = max_depth
        self.seed = seed

    def _root_impurity(self, y: np.ndarray) -> float:
        p = float(y.mean())
        if p in (0.0, 1.0):
            return 0.0
        if self.criterion == "gini":
            return 2.0 * p * (1.0 - p)
        # sklearn's entropy uses log base 2
        return float(-(p * np.log2(p) + (1.0 - p) * np.log2(1.0 - p)))

    def _fit_splits(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> List[float]:
        root = self._root_impurity(y)
        if root == 0.0:
            logger.debug("Outcome is constant; no split possible")
            return []

        min_leaf = max(1, ceil(self.min_leaf_fraction * x.size - 1e-9))
        clf = DecisionTreeClassifier(
            criterion=self.criterion,
            max_depth=self.max_depth,
            min_samples_leaf=min_leaf,
            min_impurity_decrease=self.complexity * root,
            random_state=self.seed,
        )
        clf.fit(x.reshape(-1, 1), y)

        # Leaf nodes have a negative feature index
        tree = clf.tree_
        return sorted(float(t) for t in tree.threshold[tree.feature >= 0])


def merge_bins(
    values: Any,
    outcome: Any,
    n_groups: int = BINNING.DEFAULT_N_GROUPS,
    min_bucket_fraction: float = BINNING.DEFAULT_MIN_BUCKET_FRACTION,
    scorer: Union[str, Scorer] = "log_odds",
    tail: str = BINNING.DEFAULT_TAIL,
    event: Any = None,
) -> BinningResult:
    """
    Bin a numeric variable by merging equal-frequency buckets.

    See :class:`KNNMergeBinner` for the algorithm.

    Returns
    -------
    BinningResult
        Bin code per row and ascending boundaries.
    """
    binner = KNNMergeBinner(
        n_groups=n_groups,
        min_bucket_fraction=min_bucket_fraction,
        scorer=scorer,
        tail=tail,
        event=event,
    )
    return binner.fit_transform(values, outcome)


def tree_bins(
    values: Any,
    outcome: Any,
    complexity: float = BINNING.DEFAULT_COMPLEXITY,
    min_leaf_fraction: float = BINNING.DEFAULT_MIN_LEAF_FRACTION,
    criterion: str = BINNING.DEFAULT_CRITERION,
    max_depth: Optional[int] = None,
    seed: int = BINNING.DEFAULT_SEED,
    event: Any = None,
) -> BinningResult:
    """
    Bin a numeric variable with the split points of a shallow decision tree.

    See :class:`DecisionTreeBinner` for the stopping rule.
    """
    binner = DecisionTreeBinner(
        complexity=complexity,
        min_leaf_fraction=min_leaf_fraction,
        criterion=criterion,
        max_depth=max_depth,
        seed=seed,
        event=event,
    )
    return binner.fit_transform(values, outcome)
