"""
Bucket scorers for the supervised bin merger.

A scorer maps a bucket to one scalar "effect"; adjacent buckets with similar
effects are merged first. Scorers receive the bucket and the population
bucket spanning every row, so effects relative to the rest of the data can be
computed without touching the raw records.
"""

from typing import TYPE_CHECKING, Callable, Dict, Optional, Union

import numpy as np

from binwise.config import BINNING
from binwise.exceptions import InvalidParameter

if TYPE_CHECKING:
    from .base import Bucket

Scorer = Callable[["Bucket", "Bucket"], float]


def _smoothed_log_odds(events: float, non_events: float, smoothing: float) -> float:
    return float(np.log((events + smoothing) / (non_events + smoothing)))


def log_odds(
    bucket: "Bucket",
    population: Optional["Bucket"] = None,
    smoothing: float = BINNING.SCORE_SMOOTHING,
) -> float:
    """
    Log-odds of the outcome inside the bucket.

    ``smoothing`` is added to both the event and non-event counts so that
    buckets without events (or without non-events) still score finitely.
    """
    return _smoothed_log_odds(bucket.event_count, bucket.non_event_count, smoothing)


def event_rate(bucket: "Bucket", population: Optional["Bucket"] = None) -> float:
    """Share of events inside the bucket."""
    return bucket.event_rate


def coefficient(
    bucket: "Bucket",
    population: "Bucket",
    smoothing: float = BINNING.SCORE_SMOOTHING,
) -> float:
    """
    Logistic regression coefficient of the outcome on bucket membership.

    For a single 0/1 indicator the maximum-likelihood slope is the difference
    between the log-odds inside and outside the bucket; both sides use the
    same smoothing as :func:`log_odds`.
    """
    inside = _smoothed_log_odds(bucket.event_count, bucket.non_event_count, smoothing)
    outside = _smoothed_log_odds(
        population.event_count - bucket.event_count,
        population.non_event_count - bucket.non_event_count,
        smoothing,
    )
    return inside - outside


SCORERS: Dict[str, Scorer] = {
    "log_odds": log_odds,
    "event_rate": event_rate,
    "coefficient": coefficient,
}


def resolve_scorer(scorer: Union[str, Scorer]) -> Scorer:
    """Return a scorer callable from a name or a callable."""
    if callable(scorer):
        return scorer
    if scorer not in SCORERS:
        raise InvalidParameter(
            f"Unknown scorer: {scorer!r}. Available scorers: {sorted(SCORERS)}."
        )
    return SCORERS[scorer]
