"""
binwise - supervised variable binning and level statistics

Extracted from a secondary-school student performance report. Provides:
- Equal-frequency bucketing
- Supervised bin merging (nearest-neighbour merge of bucket effects)
- Decision-tree binning
- Per-level WOE / IV statistics and variable ranking
"""

import logging

__version__ = "0.1.0"

# Binning
from binwise.features.binning import (
    BaseBinner,
    Binner,
    BinningResult,
    Bucket,
    DecisionTreeBinner,
    EqualFrequencyBinner,
    KNNMergeBinner,
    bucketize,
    make_binner,
    merge_bins,
    tree_bins,
)

# Level statistics
from binwise.features.analysis import LevelStatistics, WOEEncoder, level_statistics

# Selection
from binwise.features.selection import iv_strength, rank_variables, select_by_iv

# Data
from binwise.data import derive_outcome, load_dataset

# Errors
from binwise.exceptions import (
    BinwiseError,
    DegenerateVariableWarning,
    InsufficientData,
    InvalidParameter,
    NotFittedError,
    UndefinedStatisticWarning,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Binning
    "BaseBinner",
    "Binner",
    "BinningResult",
    "Bucket",
    "DecisionTreeBinner",
    "EqualFrequencyBinner",
    "KNNMergeBinner",
    "bucketize",
    "make_binner",
    "merge_bins",
    "tree_bins",
    # Level statistics
    "LevelStatistics",
    "WOEEncoder",
    "level_statistics",
    # Selection
    "iv_strength",
    "rank_variables",
    "select_by_iv",
    # Data
    "derive_outcome",
    "load_dataset",
    # Errors
    "BinwiseError",
    "DegenerateVariableWarning",
    "InsufficientData",
    "InvalidParameter",
    "NotFittedError",
    "UndefinedStatisticWarning",
]
