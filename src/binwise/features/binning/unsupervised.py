"""
Equal-frequency bucketing.

The bucketizer cuts a numeric variable into as many contiguous buckets as the
minimum population fraction allows; the supervised merger starts from these
buckets.
"""

import logging
import warnings
from typing import Any, Iterator, List, Optional

import numpy as np

from binwise.config import BINNING
from binwise.exceptions import DegenerateVariableWarning, InsufficientData
from binwise.utils.validation import as_float_array, check_choice, check_fraction

from .base import BaseBinner

logger = logging.getLogger(__name__)

TAIL_MODES = frozenset(["relaxed", "strict"])

# Absorbs float error in ``i * n / q`` and ``fraction * n``
_TOL = 1e-9


def max_buckets(min_bucket_fraction: float) -> int:
    """Largest bucket count compatible with ``min_bucket_fraction``."""
    return max(1, int(np.floor(1.0 / min_bucket_fraction + _TOL)))


def iter_cut_points(
    x: np.ndarray,
    min_bucket_fraction: float,
    tail: str = BINNING.DEFAULT_TAIL,
) -> Iterator[float]:
    """
    Yield equal-frequency cut points of the non-missing values ``x``.

    Each cut closes a bucket ``(previous_cut, cut]``. The i-th cut is the
    smallest distinct value whose cumulative count reaches ``i * n / q``;
    cuts that would close a bucket below the minimum population are skipped.
    When there are no more distinct values than buckets, every distinct value
    is a candidate cut under the same rule.
    With ``tail="strict"`` an under-populated final bucket is folded into its
    neighbour by withholding the last cut; ``"relaxed"`` keeps it.
    """
    distinct, counts = np.unique(x, return_counts=True)
    n = int(counts.sum())
    n_buckets = max_buckets(min_bucket_fraction)
    min_count = min_bucket_fraction * n
    cumulative = np.cumsum(counts)

    if distinct.size <= n_buckets:
        # Too few distinct values: every value is a candidate cut
        candidates: Iterator[int] = iter(range(distinct.size - 1))
    else:
        candidates = (
            int(np.searchsorted(cumulative, i * n / n_buckets - _TOL, side="left"))
            for i in range(1, n_buckets)
        )

    pending: Optional[float] = None
    closed = 0

    for j in candidates:
        if j >= distinct.size - 1:
            break
        if cumulative[j] - closed < min_count - _TOL:
            continue
        if pending is not None:
            yield pending
        pending = float(distinct[j])
        closed = int(cumulative[j])

    if pending is None:
        return
    if tail == "strict" and n - closed < min_count - _TOL:
        logger.debug(
            "Folding tail bucket of %d rows (minimum %.1f) into its neighbour",
            n - closed,
            min_count,
        )
        return
    yield pending


def bucketize(
    values: Any,
    min_bucket_fraction: float = BINNING.DEFAULT_MIN_BUCKET_FRACTION,
    tail: str = BINNING.DEFAULT_TAIL,
) -> List[float]:
    """
    Split a numeric column into equal-frequency buckets.

    Parameters
    ----------
    values : array-like
        Numeric values; NaN entries are ignored.
    min_bucket_fraction : float
        Minimum share of the non-missing rows per bucket, in (0, 1].
    tail : str
        ``"relaxed"`` (default) keeps an under-populated final bucket,
        ``"strict"`` merges it into the previous one.

    Returns
    -------
    List[float]
        Ascending cut points; bucket i is ``(cut[i-1], cut[i]]``.

    Examples
    --------
    >>> bucketize(range(1, 21), 0.25)
    [5.0, 10.0, 15.0]
    """
    fraction = check_fraction(min_bucket_fraction, "min_bucket_fraction")
    check_choice(tail, "tail mode", TAIL_MODES)

    x = as_float_array(values)
    x = x[~np.isnan(x)]
    if x.size == 0:
        raise InsufficientData("No non-missing values to bucketize.")
    if np.unique(x).size == 1:
        warnings.warn(
            "Values have a single distinct value; returning one bucket.",
            DegenerateVariableWarning,
            stacklevel=2,
        )
    return list(iter_cut_points(x, fraction, tail))


class EqualFrequencyBinner(BaseBinner):
    """
    Bins continuous data into equal-frequency buckets.

    No outcome is needed; when one is given the boundary table also carries
    event counts and scores.
    """

    requires_target = False

    def __init__(
        self,
        min_bucket_fraction: float = BINNING.DEFAULT_MIN_BUCKET_FRACTION,
        tail: str = BINNING.DEFAULT_TAIL,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.min_bucket_fraction = check_fraction(
            min_bucket_fraction, "min_bucket_fraction"
        )
        self.tail = check_choice(tail, "tail mode", TAIL_MODES)

    def _fit_splits(self, x: np.ndarray, y: Optional[np.ndarray] = None) -> List[float]:
        return list(iter_cut_points(x, self.min_bucket_fraction, self.tail))
