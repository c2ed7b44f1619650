"""
Unified binning interface.

Provides a single entry point for binning several DataFrame columns with one
of the binning strategies, plus helpers to build a binner from a short
specification (a method name, a parameter dict or a binner instance).
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Type, Union

import pandas as pd

from binwise.exceptions import InvalidParameter
from binwise.utils.decorators import requires_fit

from .base import BaseBinner, interval_labels
from .supervised import DecisionTreeBinner, KNNMergeBinner
from .unsupervised import EqualFrequencyBinner

logger = logging.getLogger(__name__)

METHODS: Dict[str, Type[BaseBinner]] = {
    "knn": KNNMergeBinner,
    "tree": DecisionTreeBinner,
    "quantile": EqualFrequencyBinner,
}

BinningChoice = Union[str, Mapping[str, Any], BaseBinner]


def make_binner(choice: BinningChoice, **params) -> BaseBinner:
    """
    Build an unfitted binner from a binning choice.

    Parameters
    ----------
    choice : str, dict or BaseBinner
        - ``"knn"``, ``"tree"`` or ``"quantile"``: that method with defaults
          (overridden by ``params``).
        - ``{"method": "knn", "n_groups": 4, ...}``: method plus parameters.
        - a ``BaseBinner`` instance: used as a prototype and deep-copied, so
          the caller's object is never fitted in place.

    Returns
    -------
    BaseBinner
        A fresh binner.
    """
    if isinstance(choice, BaseBinner):
        if params:
            raise InvalidParameter(
                "Extra parameters cannot be combined with a binner instance."
            )
        return copy.deepcopy(choice)

    if isinstance(choice, Mapping):
        settings = dict(choice)
        method = settings.pop("method", None)
        if method is None:
            raise InvalidParameter(f"Binning choice {dict(choice)} has no 'method'.")
        settings.update(params)
    else:
        method, settings = choice, dict(params)

    binner_cls = METHODS.get(method)
    if binner_cls is None:
        raise InvalidParameter(
            f"Unknown method: {method!r}. Available methods: {sorted(METHODS)}."
        )
    try:
        return binner_cls(**settings)
    except TypeError as e:
        raise InvalidParameter(f"Invalid parameters for method {method!r}: {e}")


class Binner:
    """
    A unified interface for binning multiple features using one method.

    Supported methods: 'knn', 'tree', 'quantile'.

    Missing values are placed in a separate code (-1) or label ("Missing").

    Examples
    --------
    >>> binner = Binner()
    >>> binner.fit(df, y="pass", method="knn", n_groups=4, cols=["age", "absences"])
    >>> binner["age"].table_       # boundary table
    >>> binner.transform(df, labels=True)
    """

    def __init__(self):
        self.rules_: Dict[str, List[float]] = {}
        self.binners_: Dict[str, BaseBinner] = {}
        self.is_fitted_ = False

    def fit(
        self,
        X: pd.DataFrame,
        y: Optional[Union[pd.Series, str]] = None,
        method: str = "knn",
        cols: Optional[List[str]] = None,
        **params,
    ) -> "Binner":
        """
        Fit the binning model.

        Parameters
        ----------
        X : pd.DataFrame
            Data to be binned.
        y : str or pd.Series, optional
            Target data or the name of the target column in ``X``.
            Required for the supervised methods ('knn', 'tree').
        method : str
            Binning method.
        cols : List[str]
            Columns to bin. If None, all numeric non-bool columns.
        **params
            Parameters passed to the binner of ``method``.

        Returns
        -------
        Binner
            Fitted binner instance.
        """
        if isinstance(y, str):
            target = y
            y = X[target]
            X = X.drop(columns=[target])

        if cols is None:
            cols = [
                c
                for c in X.columns
                if pd.api.types.is_numeric_dtype(X[c])
                and not pd.api.types.is_bool_dtype(X[c])
            ]
        missing = [c for c in cols if c not in X.columns]
        if missing:
            raise InvalidParameter(f"Columns not found in data: {missing}.")

        self.rules_ = {}
        self.binners_ = {}
        for col in cols:
            binner = make_binner(method, **params)
            binner.fit(X[col], y, variable=str(col))
            self.binners_[col] = binner
            self.rules_[col] = list(binner.splits_)

        self.is_fitted_ = True
        logger.info("Binned %d columns with method '%s'", len(cols), method)
        return self

    @requires_fit()
    def transform(self, X: pd.DataFrame, labels: bool = False) -> pd.DataFrame:
        """
        Apply binning rules to the data.

        Parameters
        ----------
        X : pd.DataFrame
            Data to transform.
        labels : bool
            If True, return interval strings (e.g. '(0.0, 10.0]') and
            "Missing"; otherwise integer codes with -1 for missing.

        Returns
        -------
        pd.DataFrame
            Copy of ``X`` with binned columns replaced.
        """
        X_new = X.copy()
        for col, binner in self.binners_.items():
            if col not in X_new.columns:
                continue
            X_new[col] = binner.labels(X[col]) if labels else binner.transform(X[col])
        return X_new

    def export(self) -> Dict[str, List[float]]:
        """Export binning rules."""
        return {col: list(splits) for col, splits in self.rules_.items()}

    def load(self, rules: Mapping[str, List[float]]) -> "Binner":
        """
        Load binning rules manually.

        The loaded binners can transform data but carry no boundary table.
        """
        self.rules_ = {}
        self.binners_ = {}
        for col, splits in rules.items():
            binner = EqualFrequencyBinner().set_splits(splits)
            binner.variable_ = str(col)
            self.binners_[col] = binner
            self.rules_[col] = list(binner.splits_)
        self.is_fitted_ = True
        return self

    @requires_fit()
    def labels_of(self, feature: str) -> List[str]:
        """Interval labels of a feature's bins, in ascending order."""
        return interval_labels(self.rules_[feature])

    def __getitem__(self, feature: str) -> BaseBinner:
        if feature not in self.binners_:
            raise KeyError(f"Feature '{feature}' not found in binner.")
        return self.binners_[feature]

    def __contains__(self, feature: str) -> bool:
        return feature in self.binners_

    def __iter__(self):
        return iter(self.binners_)

    def __len__(self) -> int:
        return len(self.binners_)

    def features(self) -> List[str]:
        """Get list of binned feature names."""
        return list(self.binners_.keys())
