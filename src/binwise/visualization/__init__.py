"""Visualization module for binwise."""

from binwise.visualization.level_plots import plot_iv_ranking, plot_level_stats

__all__ = ["plot_iv_ranking", "plot_level_stats"]
