"""
Input validation shared by the binners and the statistics engine.
"""

from typing import Any, Optional

import numpy as np
import pandas as pd

from binwise.exceptions import InvalidParameter


def check_fraction(value: float, name: str, variable: Optional[str] = None) -> float:
    """Ensure ``value`` lies in (0, 1]."""
    where = f" for '{variable}'" if variable else ""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name}{where} must be a number, got {value!r}.")
    if not 0.0 < value <= 1.0:
        raise InvalidParameter(f"{name}{where} must be in (0, 1], got {value}.")
    return value


def check_choice(value: Any, name: str, choices) -> Any:
    """Ensure ``value`` is one of ``choices``."""
    if value not in choices:
        raise InvalidParameter(
            f"Unknown {name}: {value!r}. Expected one of {sorted(choices)}."
        )
    return value


def as_float_array(values: Any, variable: Optional[str] = None) -> np.ndarray:
    """
    Convert a 1-D array-like to a float array (missing values become NaN).

    The input is never modified; a new array is always returned.
    """
    series = pd.Series(values)
    try:
        return series.astype(float).to_numpy(copy=True)
    except (TypeError, ValueError):
        name = variable or series.name or "values"
        raise InvalidParameter(f"Variable '{name}' is not numeric.")


def encode_outcome(
    outcome: Any,
    event: Any = None,
    name: Optional[str] = None,
) -> np.ndarray:
    """
    Encode a binary outcome as an int array of 0/1.

    Parameters
    ----------
    outcome : array-like
        Outcome values. Either 0/1 (or bool) or two arbitrary labels.
    event : optional
        Label that marks an event. Required when the outcome is not 0/1.
    name : str, optional
        Outcome name used in error messages.

    Returns
    -------
    np.ndarray
        1 for events, 0 for non-events.
    """
    y = pd.Series(outcome).reset_index(drop=True)
    name = name or y.name or "outcome"

    n_missing = int(y.isna().sum())
    if n_missing:
        raise InvalidParameter(
            f"Outcome '{name}' contains {n_missing} missing values."
        )

    if event is not None:
        return (y == event).to_numpy(dtype=np.int64)

    if pd.api.types.is_bool_dtype(y):
        return y.to_numpy(dtype=np.int64)

    if not pd.api.types.is_numeric_dtype(y) or not y.isin([0, 1]).all():
        raise InvalidParameter(
            f"Outcome '{name}' must be coded 0/1; "
            "pass event=<label> to name the event level."
        )
    return y.to_numpy(dtype=np.int64)


def check_same_length(values: np.ndarray, outcome: np.ndarray, variable: str):
    """Raise if predictor and outcome lengths differ."""
    if len(values) != len(outcome):
        raise InvalidParameter(
            f"Variable '{variable}' has {len(values)} rows "
            f"but the outcome has {len(outcome)}."
        )
