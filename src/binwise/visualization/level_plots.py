import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from binwise.exceptions import InvalidParameter


def plot_level_stats(
    level_table: pd.DataFrame,
    variable: str,
    show_iv: bool = True,
    bar_mode: str = "count",  # 'count', 'event_count', 'distribution'
) -> go.Figure:
    """
    Visualize the level statistics of one variable.

    Parameters
    ----------
    level_table : pd.DataFrame
        Output of ``level_statistics``.
    variable : str
        Variable to plot.
    show_iv : bool
        Whether to show the variable's IV in the title.
    bar_mode : str
        Metric for the bars: 'count', 'event_count' or 'distribution'
        (share of all rows).

    Returns
    -------
    go.Figure
        Plotly figure with bars per level and an event-rate line.
    """
    stats = level_table[level_table["variable"] == variable]
    if stats.empty:
        raise InvalidParameter(f"Variable '{variable}' not found in level table.")

    if bar_mode == "distribution":
        bar_y = stats["count"] / stats["count"].sum()
        bar_name = "Total %"
        bar_text = [f"{v:.1%}" for v in bar_y]
    elif bar_mode in ("count", "event_count"):
        bar_y = stats[bar_mode]
        bar_name = "Count" if bar_mode == "count" else "Event Count"
        bar_text = bar_y.tolist()
    else:
        raise InvalidParameter(f"Unknown bar_mode: {bar_mode!r}.")

    fig = make_subplots(specs=[[{"secondary_y": True}]])

    fig.add_trace(
        go.Bar(
            x=stats["level"],
            y=bar_y,
            name=bar_name,
            marker_color="#636EFA",
            opacity=0.6,
            text=bar_text,
            textposition="auto",
        ),
        secondary_y=False,
    )

    fig.add_trace(
        go.Scatter(
            x=stats["level"],
            y=stats["event_rate"],
            name="Event Rate",
            mode="lines+markers+text",
            line=dict(color="#EF553B", width=3),
            text=[f"{v:.1%}" for v in stats["event_rate"]],
            textposition="top center",
        ),
        secondary_y=True,
    )

    title_text = f"Level Statistics: {variable}"
    if show_iv:
        title_text += f" (IV: {stats['iv_contribution'].sum():.4f})"

    fig.update_layout(
        title=title_text,
        xaxis_title="Levels",
        legend=dict(x=0.5, y=1.1, orientation="h", xanchor="center"),
        template="plotly_white",
        hovermode="x unified",
    )
    fig.update_yaxes(title_text=bar_name, secondary_y=False)
    fig.update_yaxes(title_text="Event Rate", secondary_y=True, tickformat=".1%")

    return fig


def plot_iv_ranking(ranking: pd.DataFrame, top_n: int = 20) -> go.Figure:
    """Horizontal bar chart of IV per variable, strongest on top."""
    top = ranking.head(top_n).iloc[::-1]
    colors = np.where(top["iv"] > 0.02, "#636EFA", "#B6B6B6")

    fig = go.Figure(
        go.Bar(
            x=top["iv"],
            y=top["variable"],
            orientation="h",
            marker_color=colors,
            text=[f"{v:.3f}" for v in top["iv"]],
            textposition="auto",
        )
    )
    fig.update_layout(
        title="Information Value Ranking",
        xaxis_title="IV",
        template="plotly_white",
        height=max(300, 25 * len(top) + 100),
    )
    return fig
