import numpy as np
import pandas as pd
import pytest

from binwise.exceptions import InvalidParameter
from binwise.utils.validation import (
    as_float_array,
    check_choice,
    check_fraction,
    check_same_length,
    encode_outcome,
)


@pytest.mark.parametrize("value", [0.05, 0.5, 1, 1.0])
def test_check_fraction_accepts(value):
    assert check_fraction(value, "min_bucket_fraction") == float(value)


@pytest.mark.parametrize("value", [0, -0.1, 1.5, float("nan"), "half", None])
def test_check_fraction_rejects(value):
    with pytest.raises(InvalidParameter, match="min_bucket_fraction for 'age'"):
        check_fraction(value, "min_bucket_fraction", variable="age")


def test_check_choice():
    assert check_choice("gini", "criterion", {"gini", "entropy"}) == "gini"
    with pytest.raises(InvalidParameter, match="Unknown criterion: 'mse'"):
        check_choice("mse", "criterion", {"gini", "entropy"})


def test_as_float_array_copies():
    values = pd.Series([1, 2, None], name="age")
    out = as_float_array(values)
    out[0] = 99.0

    assert values.iloc[0] == 1
    assert np.isnan(out[2])


def test_as_float_array_rejects_text():
    with pytest.raises(InvalidParameter, match="'school' is not numeric"):
        as_float_array(pd.Series(["GP", "MS"], name="school"))


def test_encode_outcome_codes():
    assert encode_outcome([0, 1, 1]).tolist() == [0, 1, 1]
    assert encode_outcome([True, False]).tolist() == [1, 0]
    assert encode_outcome(np.array([1.0, 0.0])).tolist() == [1, 0]


def test_encode_outcome_with_event():
    y = pd.Series(["yes", "no", "yes"])
    assert encode_outcome(y, event="yes").tolist() == [1, 0, 1]
    assert encode_outcome(y, event="no").tolist() == [0, 1, 0]


@pytest.mark.parametrize("y", [["yes", "no"], [0, 1, 2]])
def test_encode_outcome_needs_event(y):
    with pytest.raises(InvalidParameter, match="pass event="):
        encode_outcome(y, name="pass")


def test_encode_outcome_missing():
    with pytest.raises(InvalidParameter, match="1 missing"):
        encode_outcome([1, np.nan, 0], name="pass")


def test_check_same_length():
    check_same_length(np.zeros(3), np.zeros(3), "age")
    with pytest.raises(InvalidParameter, match="'age' has 3 rows but the outcome has 2"):
        check_same_length(np.zeros(3), np.zeros(2), "age")
