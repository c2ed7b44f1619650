"""
Load delimited student-records files and derive the pass/fail outcome.

The secondary-school student files (``student-mat.csv``, ``student-por.csv``)
are ``;``-separated with the final grade in ``G3`` (0-20).
"""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from binwise.config import DATA
from binwise.exceptions import InvalidParameter

logger = logging.getLogger(__name__)


def load_dataset(
    path: Union[str, Path],
    sep: str = DATA.DEFAULT_SEPARATOR,
    **kwargs,
) -> pd.DataFrame:
    """
    Read a delimited file into a DataFrame.

    Parameters
    ----------
    path : str or Path
        File to read.
    sep : str
        Field separator. Default ";".
    **kwargs
        Passed to ``pandas.read_csv``.

    Returns
    -------
    pd.DataFrame
        One row per record.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    df = pd.read_csv(path, sep=sep, **kwargs)
    logger.info("Loaded %d rows x %d columns from %s", len(df), df.shape[1], path)
    return df


def derive_outcome(
    data: pd.DataFrame,
    source: str = DATA.DEFAULT_GRADE_COLUMN,
    threshold: float = DATA.DEFAULT_PASS_MARK,
    name: str = DATA.DEFAULT_OUTCOME_NAME,
    drop_source: bool = True,
) -> pd.DataFrame:
    """
    Add a 0/1 outcome column: 1 where ``source >= threshold``.

    The source column is dropped by default since it determines the outcome
    exactly. The input frame is not modified.
    """
    if source not in data.columns:
        raise InvalidParameter(f"Column '{source}' not found in data.")

    grades = pd.to_numeric(data[source], errors="coerce")
    if grades.isna().any():
        raise InvalidParameter(
            f"Column '{source}' has {int(grades.isna().sum())} missing "
            "or non-numeric values."
        )

    out = data.copy()
    out[name] = (grades >= threshold).astype(int)
    if drop_source and source != name:
        out = out.drop(columns=[source])

    logger.info(
        "Outcome '%s' from %s >= %s: %d events / %d rows",
        name,
        source,
        threshold,
        int(out[name].sum()),
        len(out),
    )
    return out
