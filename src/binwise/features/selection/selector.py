"""
Rank variables by Information Value and filter them by an IV threshold.

IV strength classes (Siddiqi):
  <= 0.02  Poor
  0.02-0.1 Weak
  0.1-0.3  Medium
  0.3-0.5  Strong
  > 0.5    Very Strong (suspect)
"""

import logging
from typing import List, Optional, Union

import pandas as pd

from binwise.config import FILTERING
from binwise.exceptions import InvalidParameter
from binwise.features.analysis.level_stats import LevelStatistics

logger = logging.getLogger(__name__)

IV_STRENGTHS = ["Poor", "Weak", "Medium", "Strong", "Very Strong"]


def iv_strength(iv: float) -> str:
    """Classify IV into strength categories."""
    if iv <= 0.02:
        return "Poor"
    elif iv <= 0.1:
        return "Weak"
    elif iv <= 0.3:
        return "Medium"
    elif iv <= 0.5:
        return "Strong"
    else:
        return "Very Strong"


def rank_variables(level_table: Union[pd.DataFrame, LevelStatistics]) -> pd.DataFrame:
    """
    Rank variables by IV.

    Parameters
    ----------
    level_table : pd.DataFrame or LevelStatistics
        Output of ``level_statistics`` or a fitted ``LevelStatistics``.

    Returns
    -------
    pd.DataFrame
        Columns: variable, iv, iv_strength, n_levels, n_undefined; sorted by
        IV descending (ties by variable name), 1-based rank index.
    """
    if isinstance(level_table, LevelStatistics):
        level_table = level_table.table_

    required = {"variable", "iv_contribution", "woe_defined"}
    absent = required - set(level_table.columns)
    if absent:
        raise InvalidParameter(f"Level table lacks columns: {sorted(absent)}.")

    grouped = level_table.groupby("variable", sort=False)
    df = pd.DataFrame(
        {
            "iv": grouped["iv_contribution"].sum(),
            "n_levels": grouped.size(),
            "n_undefined": grouped["woe_defined"].apply(
                lambda s: int((~s.astype(bool)).sum())
            ),
        }
    ).reset_index()
    df["iv_strength"] = df["iv"].map(iv_strength)
    df = df[["variable", "iv", "iv_strength", "n_levels", "n_undefined"]]

    df = df.sort_values(
        ["iv", "variable"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)
    df.index = df.index + 1  # 1-based ranking
    df.index.name = "rank"

    counts = df["iv_strength"].value_counts()
    logger.info(
        "%d variables ranked: %s",
        len(df),
        ", ".join(f"{counts.get(s, 0)} {s}" for s in IV_STRENGTHS),
    )
    return df


def select_by_iv(
    ranking: pd.DataFrame,
    threshold: Optional[float] = None,
) -> List[str]:
    """Return variable names with IV >= threshold, in ranking order."""
    threshold = FILTERING.DEFAULT_IV_THRESHOLD if threshold is None else threshold
    if threshold < 0:
        raise InvalidParameter(f"IV threshold must be >= 0, got {threshold}.")
    passing = ranking[ranking["iv"] >= threshold]
    logger.info(
        "Variables passing IV >= %.3f: %d / %d",
        threshold,
        len(passing),
        len(ranking),
    )
    return passing["variable"].tolist()
