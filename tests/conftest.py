import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def uniform_20():
    """20 rows, predictor evenly spread over [0, 100], outcome split 10/10."""
    x = np.linspace(0, 100, 20)
    y = np.tile([0, 1], 10)
    return pd.Series(x, name="x"), pd.Series(y, name="y")


@pytest.fixture
def tail_data():
    """
    Predictor whose equal-frequency cuts leave a 2-row tail bucket at 25%.

    Buckets at min_bucket_fraction=0.25 (relaxed): 5, 5, 8 and 2 rows.
    """
    x = np.array(list(range(1, 11)) + [11] * 8 + [12, 13], dtype=float)
    y = np.tile([0, 1], 10)
    return pd.Series(x, name="x"), pd.Series(y, name="y")


@pytest.fixture
def student_data():
    """Synthetic student records with a pass/fail outcome."""
    rng = np.random.default_rng(42)
    n = 400

    age = rng.integers(15, 23, n)
    studytime = rng.integers(1, 5, n)
    absences = rng.poisson(6, n).astype(float)
    absences[rng.choice(n, 20, replace=False)] = np.nan
    failures = rng.choice([0, 0, 0, 1, 2, 3], n)
    school = rng.choice(["GP", "MS"], n, p=[0.8, 0.2])
    higher = rng.choice(["yes", "no"], n, p=[0.9, 0.1])

    logit = (
        1.0
        + 0.6 * (studytime - 2)
        - 1.2 * failures
        - 0.08 * np.nan_to_num(absences, nan=6.0)
        + 1.0 * (higher == "yes")
    )
    prob = 1 / (1 + np.exp(-logit))
    passed = (rng.random(n) < prob).astype(int)

    return pd.DataFrame(
        {
            "school": school,
            "age": age,
            "studytime": studytime,
            "failures": failures,
            "absences": absences,
            "higher": higher,
            "pass": passed,
        }
    )


@pytest.fixture
def smooth_signal():
    """Continuous predictor with a logistic relationship to the outcome."""
    rng = np.random.default_rng(7)
    n = 500
    x = rng.random(n)
    prob = 1 / (1 + np.exp(-(x - 0.5) * 8))
    y = (rng.random(n) < prob).astype(int)
    return pd.Series(x, name="score"), pd.Series(y, name="target")
