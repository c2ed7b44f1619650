from math import ceil

import numpy as np
import pandas as pd
import pytest

from binwise.exceptions import InsufficientData, InvalidParameter
from binwise.features.binning import (
    BaseBinner,
    DecisionTreeBinner,
    KNNMergeBinner,
    tree_bins,
)


def test_step_function_single_split():
    x = np.arange(200, dtype=float)
    y = (x >= 100).astype(int)

    result = tree_bins(x, y, complexity=0.01, min_leaf_fraction=0.05)

    assert result.boundaries == [99.5]
    assert result.table["count"].tolist() == [100, 100]
    assert result.table["event_rate"].tolist() == [0.0, 1.0]


def test_complexity_limits_splits(smooth_signal):
    x, y = smooth_signal
    loose = tree_bins(x, y, complexity=0.001, min_leaf_fraction=0.05)
    tight = tree_bins(x, y, complexity=0.05, min_leaf_fraction=0.05)
    blocked = tree_bins(x, y, complexity=0.9, min_leaf_fraction=0.05)

    assert loose.n_bins >= tight.n_bins >= blocked.n_bins
    assert loose.n_bins > 2
    assert blocked.n_bins == 1


@pytest.mark.parametrize("fraction", [0.05, 0.1, 0.25])
def test_leaves_respect_min_population(smooth_signal, fraction):
    x, y = smooth_signal
    result = tree_bins(x, y, complexity=0.0, min_leaf_fraction=fraction)
    assert (result.table["count"] >= ceil(fraction * len(x))).all()


def test_max_depth(smooth_signal):
    x, y = smooth_signal
    result = tree_bins(x, y, complexity=0.0, min_leaf_fraction=0.01, max_depth=2)
    assert result.n_bins <= 4


def test_boundaries_ascending_and_partition(smooth_signal):
    x, y = smooth_signal
    result = tree_bins(x, y, complexity=0.002, min_leaf_fraction=0.05)

    assert result.boundaries == sorted(result.boundaries)
    assert result.table["count"].sum() == len(x)
    assert set(result.bin_of_row) == set(range(result.n_bins))


def test_constant_outcome_gives_one_bin(smooth_signal):
    x, _ = smooth_signal
    result = tree_bins(x, np.zeros(len(x), dtype=int))

    assert result.n_bins == 1
    assert not result.degenerate


def test_entropy_criterion(smooth_signal):
    x, y = smooth_signal
    result = tree_bins(x, y, criterion="entropy", complexity=0.01)
    assert result.n_bins >= 2


def test_reproducible_with_seed(smooth_signal):
    x, y = smooth_signal
    first = tree_bins(x, y, complexity=0.001, seed=3)
    second = tree_bins(x, y, complexity=0.001, seed=3)
    assert first.boundaries == second.boundaries
    assert (first.bin_of_row == second.bin_of_row).all()


def test_missing_values(smooth_signal):
    x, y = smooth_signal
    x = x.copy()
    x.iloc[[0, 5, 9]] = np.nan

    result = tree_bins(x, y)
    assert (result.bin_of_row[[0, 5, 9]] == -1).all()
    assert result.n_missing == 3


def test_interchangeable_with_merger(smooth_signal):
    x, y = smooth_signal
    for binner in (DecisionTreeBinner(), KNNMergeBinner(n_groups=3)):
        assert isinstance(binner, BaseBinner)
        result = binner.fit_transform(x, y)
        assert len(result.bin_of_row) == len(x)
        assert list(result.table.columns) == [
            "bin",
            "label",
            "lower",
            "upper",
            "count",
            "event_count",
            "event_rate",
            "score",
        ]
        labels = binner.labels(x)
        assert labels.iloc[0] in result.labels


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"complexity": -0.1}, "complexity"),
        ({"min_leaf_fraction": 0}, "min_leaf_fraction"),
        ({"min_leaf_fraction": 1.2}, "min_leaf_fraction"),
        ({"criterion": "mse"}, "criterion"),
        ({"max_depth": 0}, "max_depth"),
    ],
)
def test_invalid_parameters(kwargs, match):
    with pytest.raises(InvalidParameter, match=match):
        DecisionTreeBinner(**kwargs)


def test_no_observations():
    with pytest.raises(InsufficientData):
        tree_bins(pd.Series([np.nan, np.nan]), [0, 1])
