from .base import (  # noqa: F401
    BaseBinner,
    BinningResult,
    Bucket,
    get_bin_boundaries,
    interval_labels,
)
from .binner import METHODS, Binner, make_binner  # noqa: F401
from .scorers import SCORERS, coefficient, event_rate, log_odds  # noqa: F401
from .supervised import (  # noqa: F401
    DecisionTreeBinner,
    KNNMergeBinner,
    merge_bins,
    tree_bins,
)
from .unsupervised import EqualFrequencyBinner, bucketize  # noqa: F401

__all__ = [
    "BaseBinner",
    "Binner",
    "BinningResult",
    "Bucket",
    "METHODS",
    "SCORERS",
    "make_binner",
    "get_bin_boundaries",
    "interval_labels",
    "bucketize",
    "merge_bins",
    "tree_bins",
    "log_odds",
    "event_rate",
    "coefficient",
    "DecisionTreeBinner",
    "KNNMergeBinner",
    "EqualFrequencyBinner",
]
