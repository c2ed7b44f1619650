from .level_stats import LevelStatistics, level_statistics  # noqa: F401
from .woe_calculator import WOEEncoder  # noqa: F401

__all__ = ["LevelStatistics", "WOEEncoder", "level_statistics"]
