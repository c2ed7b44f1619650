"""
Level statistics engine.

For every variable of a dataset (binning numeric variables first when asked
to) computes per-level counts, event rate, WoE and IV contribution, plus the
aggregate IV per variable.
"""

import logging
import warnings
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from binwise.config import STATISTICS
from binwise.exceptions import (
    DegenerateVariableWarning,
    InsufficientData,
    InvalidParameter,
)
from binwise.features.binning import BinningResult, make_binner
from binwise.features.binning.base import assign_bins
from binwise.features.binning.binner import BinningChoice
from binwise.utils.decorators import requires_fit
from binwise.utils.validation import as_float_array, encode_outcome

from .woe_calculator import LEVEL_COLUMNS, WOEEncoder, level_labels

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["variable"] + LEVEL_COLUMNS


def _is_numeric(column: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(column) and not pd.api.types.is_bool_dtype(
        column
    )


class LevelStatistics:
    """
    Per-level statistics and Information Value for every variable.

    Level order within a variable:

    - binned numeric variables: bins in ascending order;
    - other numeric variables: distinct values in ascending order;
    - categorical variables: order of first appearance;
    - the missing level (``"Missing"``) always comes last.

    Parameters
    ----------
    bin_spec : Mapping[str, BinningChoice], optional
        Variables to bin and how: a method name ("knn", "tree", "quantile"),
        a dict with a "method" key and parameters, or a binner instance.
        Categorical variables listed here are used as-is.
    event : optional
        Outcome label that marks an event, when the outcome is not 0/1.

    Examples
    --------
    >>> stats = LevelStatistics(bin_spec={"age": "knn", "absences": "tree"})
    >>> stats.fit(df, outcome="pass")
    >>> stats.table_            # one row per (variable, level)
    >>> stats.summary()         # one row per variable
    """

    def __init__(
        self,
        bin_spec: Optional[Mapping[str, BinningChoice]] = None,
        event: Any = None,
        missing_label: str = STATISTICS.MISSING_LABEL,
    ):
        self.bin_spec = dict(bin_spec or {})
        self.event = event
        self.missing_label = missing_label
        self.table_ = pd.DataFrame(columns=TABLE_COLUMNS)
        self.iv_: Dict[str, float] = {}
        self.degenerate_: Dict[str, bool] = {}
        self.encoders_: Dict[str, WOEEncoder] = {}
        self.binnings_: Dict[str, BinningResult] = {}
        self.variables_: List[str] = []
        self.is_fitted_ = False

    def fit(
        self,
        data: pd.DataFrame,
        outcome: str,
        variables: Optional[List[str]] = None,
    ) -> "LevelStatistics":
        """
        Compute level statistics.

        Parameters
        ----------
        data : pd.DataFrame
            Dataset including the outcome column.
        outcome : str
            Name of the binary outcome column.
        variables : List[str], optional
            Variables to analyse, in output order. Defaults to every column
            except the outcome.

        Returns
        -------
        LevelStatistics
            Fitted instance.
        """
        if outcome not in data.columns:
            raise InvalidParameter(f"Outcome '{outcome}' not found in data.")
        if len(data) == 0:
            raise InsufficientData("Dataset has no rows.")

        if variables is None:
            variables = [c for c in data.columns if c != outcome]
        variables = list(variables)
        if outcome in variables:
            raise InvalidParameter(
                f"Outcome '{outcome}' cannot also be analysed as a variable."
            )
        unknown = [v for v in variables if v not in data.columns]
        unknown += [v for v in self.bin_spec if v not in data.columns]
        if unknown:
            raise InvalidParameter(f"Variables not found in data: {unknown}.")

        y = encode_outcome(data[outcome], self.event, name=outcome)

        frames = []
        iv: Dict[str, float] = {}
        degenerate: Dict[str, bool] = {}
        encoders: Dict[str, WOEEncoder] = {}
        binnings: Dict[str, BinningResult] = {}

        for var in variables:
            levels, order, is_degenerate, binning = self._levels(data[var], y, var)
            encoder = WOEEncoder(missing_label=self.missing_label)
            encoder.fit(levels, y, order=order, variable=str(var))

            frame = encoder.summary_.copy()
            frame.insert(0, "variable", str(var))
            frames.append(frame)

            iv[var] = encoder.iv_
            degenerate[var] = is_degenerate
            encoders[var] = encoder
            if binning is not None:
                binnings[var] = binning

        self.table_ = (
            pd.concat(frames, ignore_index=True)
            if frames
            else pd.DataFrame(columns=TABLE_COLUMNS)
        )
        self.iv_ = iv
        self.degenerate_ = degenerate
        self.encoders_ = encoders
        self.binnings_ = binnings
        self.variables_ = variables
        self.is_fitted_ = True

        logger.info(
            "Level statistics: %d variables, %d levels, %d binned",
            len(variables),
            len(self.table_),
            len(binnings),
        )
        return self

    def _levels(
        self, column: pd.Series, y: np.ndarray, key: Any
    ) -> Tuple[pd.Series, List[str], bool, Optional[BinningResult]]:
        """Level label per row, level order, degenerate flag, binning."""
        variable = str(key)
        numeric = _is_numeric(column)

        if key in self.bin_spec and numeric:
            binner = make_binner(self.bin_spec[key])
            # the outcome is already encoded as 0/1
            binner.event = None
            result = binner.fit_transform(column, y, variable=variable)
            names = result.labels
            codes = result.bin_of_row
            levels = pd.Series(
                [names[c] if c >= 0 else self.missing_label for c in codes],
                dtype=object,
            )
            order = [names[c] for c in np.unique(codes[codes >= 0])]
            order += [self.missing_label] if (codes < 0).any() else []
            logger.debug(
                "Variable '%s' binned into %d bins", variable, result.n_bins
            )
            return levels, order, result.degenerate, result

        if key in self.bin_spec:
            logger.debug("Variable '%s' is categorical; used as-is", variable)

        levels = level_labels(column, self.missing_label)
        observed = column.dropna()
        is_degenerate = observed.nunique() <= 1
        if is_degenerate:
            warnings.warn(
                f"Variable '{variable}' has a single distinct value.",
                DegenerateVariableWarning,
                stacklevel=3,
            )

        if numeric:
            # order the row labels themselves: 0.0 and -0.0 are equal values
            # but distinct labels
            values = column.reset_index(drop=True)
            present = values.notna()
            by_label = pd.DataFrame({"label": levels[present], "value": values[present]})
            by_label = by_label.drop_duplicates("label").sort_values(
                "value", kind="mergesort"
            )
            order = by_label["label"].tolist()
            if column.isna().any():
                order.append(self.missing_label)
        else:
            order = None
        return levels, order, is_degenerate, None

    @requires_fit()
    def summary(self) -> pd.DataFrame:
        """One row per variable: iv, n_levels, n_undefined, degenerate."""
        return pd.DataFrame(
            {
                "variable": [str(v) for v in self.variables_],
                "iv": [self.iv_[v] for v in self.variables_],
                "n_levels": [len(self.encoders_[v].summary_) for v in self.variables_],
                "n_undefined": [
                    self.encoders_[v].n_undefined_ for v in self.variables_
                ],
                "degenerate": [self.degenerate_[v] for v in self.variables_],
            }
        )

    @requires_fit()
    def woe_transform(self, data: pd.DataFrame) -> pd.DataFrame:
        """
        Replace every analysed variable by its WoE.

        Binned variables are re-binned with the fitted boundaries first.
        """
        out = data.copy()
        for var in self.variables_:
            if var not in out.columns:
                continue
            if var in self.binnings_:
                levels = self._relevel(data[var], self.binnings_[var])
            else:
                levels = data[var]
            woe = self.encoders_[var].transform(levels)
            woe.index = out.index
            out[var] = woe
        return out

    def _relevel(self, column: pd.Series, binning: BinningResult) -> pd.Series:
        codes = assign_bins(as_float_array(column, binning.variable), binning.boundaries)
        names = binning.labels
        return pd.Series(
            [names[c] if c >= 0 else self.missing_label for c in codes],
            dtype=object,
        )


def level_statistics(
    data: pd.DataFrame,
    outcome: str,
    bin_spec: Optional[Mapping[str, BinningChoice]] = None,
    event: Any = None,
    variables: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Level statistics table for a dataset.

    Args:
        data: Dataset including the outcome column.
        outcome: Name of the binary outcome column.
        bin_spec: Variables to bin and how (see :class:`LevelStatistics`).
        event: Outcome label marking an event when the outcome is not 0/1.
        variables: Variables to analyse; defaults to all but the outcome.

    Returns:
        DataFrame with one row per (variable, level): variable, level, count,
        event_count, non_event_count, event_rate, distribution_event,
        distribution_non_event, woe, iv_contribution, woe_defined.
    """
    stats = LevelStatistics(bin_spec=bin_spec, event=event)
    return stats.fit(data, outcome, variables=variables).table_
