"""
Configuration constants for the binwise package.

Provides centralized default values for binning, level statistics,
variable filtering and dataset loading.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class BinningConfig:
    """Binning defaults."""

    DEFAULT_MIN_BUCKET_FRACTION: Final[float] = 0.05
    DEFAULT_N_GROUPS: Final[int] = 5
    DEFAULT_COMPLEXITY: Final[float] = 0.01
    DEFAULT_MIN_LEAF_FRACTION: Final[float] = 0.05
    DEFAULT_CRITERION: Final[str] = "gini"
    DEFAULT_SEED: Final[int] = 0
    DEFAULT_TAIL: Final[str] = "relaxed"
    SCORE_SMOOTHING: Final[float] = 0.5


@dataclass(frozen=True)
class StatisticsConfig:
    """Level statistics defaults."""

    MISSING_LABEL: Final[str] = "Missing"
    # WOE reported for levels with zero events or zero non-events
    WOE_UNDEFINED: Final[float] = 0.0


@dataclass(frozen=True)
class FilteringConfig:
    """Variable filtering defaults."""

    DEFAULT_IV_THRESHOLD: Final[float] = 0.02


@dataclass(frozen=True)
class DataConfig:
    """Dataset loading defaults for the student records files."""

    DEFAULT_SEPARATOR: Final[str] = ";"
    DEFAULT_GRADE_COLUMN: Final[str] = "G3"
    DEFAULT_PASS_MARK: Final[float] = 10
    DEFAULT_OUTCOME_NAME: Final[str] = "pass"


# Singleton instances for easy access
BINNING = BinningConfig()
STATISTICS = StatisticsConfig()
FILTERING = FilteringConfig()
DATA = DataConfig()
