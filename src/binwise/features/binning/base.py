"""
Binner base class and the value types shared by all binning strategies.

Bins are right-closed intervals ``(lower, upper]`` built from a sorted list of
internal split points; the outermost bounds are -inf and +inf, so the bins of
a variable always partition the real line. Missing values never enter a bin
and get the code -1.
"""

import logging
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Union

import numpy as np
import pandas as pd

from binwise.config import STATISTICS
from binwise.exceptions import (
    DegenerateVariableWarning,
    InsufficientData,
    InvalidParameter,
)
from binwise.utils.decorators import requires_fit
from binwise.utils.validation import (
    as_float_array,
    check_same_length,
    encode_outcome,
)

from .scorers import Scorer, resolve_scorer

logger = logging.getLogger(__name__)

MISSING_CODE = -1


@dataclass(frozen=True)
class Bucket:
    """
    A contiguous slice ``(lower, upper]`` of a numeric variable.

    ``score`` is the per-bucket effect used when merging; it is NaN until a
    scorer has been applied.
    """

    lower: float
    upper: float
    count: int
    event_count: int
    score: float = float("nan")

    @property
    def non_event_count(self) -> int:
        return self.count - self.event_count

    @property
    def event_rate(self) -> float:
        if self.count == 0:
            return float("nan")
        return self.event_count / self.count

    def merge(self, other: "Bucket") -> "Bucket":
        """Return the union of two adjacent buckets, unscored."""
        return Bucket(
            lower=min(self.lower, other.lower),
            upper=max(self.upper, other.upper),
            count=self.count + other.count,
            event_count=self.event_count + other.event_count,
        )

    def with_score(self, score: float) -> "Bucket":
        return replace(self, score=float(score))


@dataclass(frozen=True, eq=False)
class BinningResult:
    """
    Output shared by every binner.

    Attributes
    ----------
    variable : str
        Name of the binned variable.
    bin_of_row : np.ndarray
        Bin code per input row, -1 for missing values.
    boundaries : List[float]
        Internal split points in ascending order.
    table : pd.DataFrame
        One row per bin: bin, label, lower, upper, count, event_count,
        event_rate, score.
    degenerate : bool
        True when the variable has a single distinct value.
    n_missing : int
        Number of rows with a missing value.
    """

    variable: str
    bin_of_row: np.ndarray
    boundaries: List[float]
    table: pd.DataFrame
    degenerate: bool = False
    n_missing: int = 0

    @property
    def n_bins(self) -> int:
        return len(self.boundaries) + 1

    @property
    def labels(self) -> List[str]:
        return interval_labels(self.boundaries)


def get_bin_boundaries(splits: List[float]) -> List[float]:
    """Full boundaries including -inf and +inf."""
    return [-np.inf] + sorted(splits) + [np.inf]


def interval_labels(splits: List[float]) -> List[str]:
    """Interval labels such as ``"(-inf, 25.0]"`` for each bin."""
    index = pd.IntervalIndex.from_breaks(get_bin_boundaries(splits), closed="right")
    return index.astype(str).tolist()


def assign_bins(x: np.ndarray, splits: List[float]) -> np.ndarray:
    """Map values to bin codes; ``x == split`` falls in the lower bin."""
    codes = np.searchsorted(np.asarray(splits, dtype=float), x, side="left")
    codes = codes.astype(np.int64)
    codes[np.isnan(x)] = MISSING_CODE
    return codes


def build_buckets(x: np.ndarray, y: np.ndarray, splits: List[float]) -> List[Bucket]:
    """Count rows and events per bin for non-missing ``x``."""
    mask = ~np.isnan(x)
    codes = assign_bins(x[mask], splits)
    n_bins = len(splits) + 1
    counts = np.bincount(codes, minlength=n_bins)
    events = np.bincount(codes, weights=y[mask], minlength=n_bins)
    bounds = get_bin_boundaries(splits)
    return [
        Bucket(
            lower=float(bounds[i]),
            upper=float(bounds[i + 1]),
            count=int(counts[i]),
            event_count=int(round(events[i])),
        )
        for i in range(n_bins)
    ]


def population_of(buckets: List[Bucket]) -> Bucket:
    """The single bucket spanning all of ``buckets``."""
    return Bucket(
        lower=-np.inf,
        upper=np.inf,
        count=sum(b.count for b in buckets),
        event_count=sum(b.event_count for b in buckets),
    )


class BaseBinner(ABC):
    """
    Base class for numeric variable binning.

    Subclasses implement :meth:`_fit_splits` on the non-missing values; the
    base class handles validation, missing values, zero-variance columns and
    the boundary table. Every binner returns the same
    :class:`BinningResult` shape so strategies are interchangeable.
    """

    #: Whether :meth:`fit` needs the outcome.
    requires_target: bool = True

    def __init__(
        self,
        scorer: Union[str, Scorer] = "log_odds",
        event: Any = None,
    ):
        self.scorer = scorer
        self.event = event
        self._scorer: Callable = resolve_scorer(scorer)
        self.splits_: List[float] = []
        self.table_: pd.DataFrame = pd.DataFrame()
        self.degenerate_: bool = False
        self.variable_: Optional[str] = None
        self.is_fitted_ = False

    @abstractmethod
    def _fit_splits(self, x: np.ndarray, y: Optional[np.ndarray]) -> List[float]:
        """Calculate split points from non-missing values."""

    def fit(self, X: Any, y: Any = None, variable: Optional[str] = None) -> "BaseBinner":
        """
        Fit the binner to one variable.

        Parameters
        ----------
        X : array-like
            Numeric predictor; NaN marks a missing value.
        y : array-like, optional
            Binary outcome (0/1, bool, or labels with ``event`` set).
        variable : str, optional
            Name used in messages. Defaults to ``X.name`` when available.

        Returns
        -------
        BaseBinner
            Fitted binner.
        """
        variable = variable or getattr(X, "name", None) or "values"
        x = as_float_array(X, variable)

        y_arr = None
        if y is not None:
            y_arr = encode_outcome(y, self.event)
            check_same_length(x, y_arr, variable)
        elif self.requires_target:
            raise InvalidParameter(
                f"{self.__class__.__name__} requires an outcome to bin '{variable}'."
            )

        mask = ~np.isnan(x)
        if not mask.any():
            raise InsufficientData(
                f"Variable '{variable}' has no non-missing values to bin."
            )

        x_valid = x[mask]
        y_valid = y_arr[mask] if y_arr is not None else None

        self.degenerate_ = np.unique(x_valid).size == 1
        if self.degenerate_:
            warnings.warn(
                f"Variable '{variable}' has a single distinct value; "
                "returning one bin.",
                DegenerateVariableWarning,
                stacklevel=2,
            )
            splits: List[float] = []
        else:
            splits = self._fit_splits(x_valid, y_valid)

        self.splits_ = sorted(set(float(s) for s in splits))
        self.variable_ = variable
        self.table_ = self._build_table(x, y_arr)
        self.is_fitted_ = True

        logger.debug(
            "Variable '%s': %d bins, boundaries=%s",
            variable,
            len(self.splits_) + 1,
            self.splits_,
        )
        return self

    @requires_fit()
    def transform(self, X: Any) -> pd.Series:
        """Bin codes (0..n_bins-1) per row, -1 for missing values."""
        x = as_float_array(X, self.variable_)
        index = X.index if isinstance(X, pd.Series) else None
        return pd.Series(assign_bins(x, self.splits_), index=index, name=self.variable_)

    @requires_fit()
    def labels(self, X: Any) -> pd.Series:
        """Interval labels per row, ``"Missing"`` for missing values."""
        codes = self.transform(X)
        names = interval_labels(self.splits_)
        return codes.map(
            lambda c: STATISTICS.MISSING_LABEL if c == MISSING_CODE else names[c]
        )

    def fit_transform(
        self, X: Any, y: Any = None, variable: Optional[str] = None
    ) -> BinningResult:
        """Fit and return the full :class:`BinningResult`."""
        self.fit(X, y, variable=variable)
        codes = self.transform(X).to_numpy()
        return BinningResult(
            variable=self.variable_,
            bin_of_row=codes,
            boundaries=list(self.splits_),
            table=self.table_.copy(),
            degenerate=self.degenerate_,
            n_missing=int((codes == MISSING_CODE).sum()),
        )

    def set_splits(self, splits: List[float]) -> "BaseBinner":
        """Manually set split points (no boundary table is computed)."""
        self.splits_ = sorted(set(float(s) for s in splits))
        self.table_ = pd.DataFrame()
        self.is_fitted_ = True
        return self

    def _score(self, bucket: Bucket, population: Bucket) -> float:
        score = float(self._scorer(bucket, population))
        if not np.isfinite(score):
            raise InvalidParameter(
                f"Scorer returned a non-finite score ({score}) for bucket "
                f"({bucket.lower}, {bucket.upper}] of '{self.variable_}'."
            )
        return score

    def _build_table(self, x: np.ndarray, y: Optional[np.ndarray]) -> pd.DataFrame:
        labels = interval_labels(self.splits_)
        bounds = get_bin_boundaries(self.splits_)
        table = pd.DataFrame(
            {
                "bin": np.arange(len(labels)),
                "label": labels,
                "lower": bounds[:-1],
                "upper": bounds[1:],
            }
        )
        if y is None:
            codes = assign_bins(x[~np.isnan(x)], self.splits_)
            table["count"] = np.bincount(codes, minlength=len(labels))
            return table

        buckets = build_buckets(x, y, self.splits_)
        population = population_of(buckets)
        table["count"] = [b.count for b in buckets]
        table["event_count"] = [b.event_count for b in buckets]
        table["event_rate"] = [b.event_rate for b in buckets]
        table["score"] = [
            self._score(b, population) if b.count else np.nan for b in buckets
        ]
        return table
