import numpy as np
import pandas as pd
import pytest

from binwise.exceptions import (
    DegenerateVariableWarning,
    InsufficientData,
    InvalidParameter,
)
from binwise.features.binning import EqualFrequencyBinner, bucketize
from binwise.features.binning.base import assign_bins


def bucket_counts(x, cuts):
    x = np.asarray(x, dtype=float)
    codes = assign_bins(x[~np.isnan(x)], cuts)
    return np.bincount(codes, minlength=len(cuts) + 1)


def test_twenty_rows_quarter_fraction(uniform_20):
    x, _ = uniform_20
    cuts = bucketize(x, 0.25)

    assert len(cuts) == 3
    assert bucket_counts(x, cuts).tolist() == [5, 5, 5, 5]


def test_cut_points_are_data_values():
    assert bucketize(range(1, 21), 0.25) == [5.0, 10.0, 15.0]


@pytest.mark.parametrize("fraction", [0.05, 0.1, 0.2, 0.3, 0.5, 1.0])
def test_min_population_except_tail(smooth_signal, fraction):
    x, _ = smooth_signal
    cuts = bucketize(x, fraction)
    counts = bucket_counts(x, cuts)

    assert (counts[:-1] >= fraction * len(x)).all()
    assert counts.sum() == len(x)


@pytest.mark.parametrize("fraction", [0.05, 0.15, 0.3])
def test_strict_tail_meets_minimum_everywhere(smooth_signal, fraction):
    x, _ = smooth_signal
    counts = bucket_counts(x, bucketize(x, fraction, tail="strict"))
    assert (counts >= fraction * len(x)).all()


def test_buckets_partition_the_range(smooth_signal):
    x, _ = smooth_signal
    cuts = bucketize(x, 0.1)

    assert cuts == sorted(set(cuts))
    codes = assign_bins(x.to_numpy(), cuts)
    assert set(codes) == set(range(len(cuts) + 1))


def test_relaxed_and_strict_tail(tail_data):
    x, _ = tail_data

    relaxed = bucketize(x, 0.25)
    strict = bucketize(x, 0.25, tail="strict")

    assert relaxed == [5.0, 10.0, 11.0]
    assert bucket_counts(x, relaxed).tolist() == [5, 5, 8, 2]
    assert strict == [5.0, 10.0]
    assert bucket_counts(x, strict).tolist() == [5, 5, 10]


def test_few_distinct_values_one_bucket_each():
    x = [1, 1, 2, 2, 3, 3] * 5
    assert bucketize(x, 0.1) == [1.0, 2.0]


@pytest.mark.parametrize("tail", ["relaxed", "strict"])
def test_few_distinct_values_short_leading_bucket(tail):
    # the single 1 cannot form a bucket of 5 rows on its own
    x = [1] + [2] * 19
    assert bucketize(x, 0.25, tail=tail) == []


@pytest.mark.parametrize("tail", ["relaxed", "strict"])
def test_few_distinct_values_short_interior_bucket(tail):
    x = [1] * 10 + [2] + [3] * 9
    cuts = bucketize(x, 0.25, tail=tail)

    assert cuts == [1.0]
    assert bucket_counts(x, cuts).tolist() == [10, 10]


def test_few_distinct_values_short_tail():
    x = [1] * 10 + [2] * 9 + [3]

    relaxed = bucketize(x, 0.25)
    assert relaxed == [1.0, 2.0]
    assert bucket_counts(x, relaxed).tolist() == [10, 9, 1]

    strict = bucketize(x, 0.25, tail="strict")
    assert strict == [1.0]
    assert bucket_counts(x, strict).tolist() == [10, 10]


def test_single_value_is_degenerate():
    with pytest.warns(DegenerateVariableWarning):
        assert bucketize([4.0] * 10, 0.2) == []


def test_missing_values_are_ignored(smooth_signal):
    x, _ = smooth_signal
    with_nan = pd.concat([x, pd.Series([np.nan] * 7)], ignore_index=True)
    assert bucketize(with_nan, 0.1) == bucketize(x, 0.1)


def test_deterministic(smooth_signal):
    x, _ = smooth_signal
    assert bucketize(x, 0.07) == bucketize(x, 0.07)


@pytest.mark.parametrize("fraction", [0, -0.1, 1.5, float("nan"), "a"])
def test_invalid_fraction(fraction):
    with pytest.raises(InvalidParameter, match="min_bucket_fraction"):
        bucketize([1, 2, 3], fraction)


def test_invalid_tail():
    with pytest.raises(InvalidParameter, match="tail"):
        bucketize([1, 2, 3], 0.5, tail="loose")


def test_no_values():
    with pytest.raises(InsufficientData):
        bucketize([np.nan, np.nan], 0.5)


def test_equal_frequency_binner_without_outcome(uniform_20):
    x, _ = uniform_20
    binner = EqualFrequencyBinner(min_bucket_fraction=0.25).fit(x)

    assert binner.is_fitted_
    assert binner.splits_ == bucketize(x, 0.25)
    assert binner.table_["count"].tolist() == [5, 5, 5, 5]
    assert "event_count" not in binner.table_.columns


def test_equal_frequency_binner_with_outcome(uniform_20):
    x, y = uniform_20
    result = EqualFrequencyBinner(min_bucket_fraction=0.25).fit_transform(x, y)

    assert result.table["event_count"].sum() == 10
    assert result.n_bins == 4
