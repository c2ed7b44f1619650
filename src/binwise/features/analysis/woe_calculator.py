"""
Weight of Evidence for one leveled variable.

Builds the per-level table (counts, event rate, event and non-event
distributions, WoE, IV contribution) that the level statistics engine
concatenates across variables, and maps levels to their WoE.
"""

import logging
import warnings
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from binwise.config import STATISTICS
from binwise.exceptions import InvalidParameter, UndefinedStatisticWarning
from binwise.utils.decorators import requires_fit
from binwise.utils.validation import check_same_length, encode_outcome

logger = logging.getLogger(__name__)

LEVEL_COLUMNS = [
    "level",
    "count",
    "event_count",
    "non_event_count",
    "event_rate",
    "distribution_event",
    "distribution_non_event",
    "woe",
    "iv_contribution",
    "woe_defined",
]


def level_labels(levels: pd.Series, missing_label: str) -> pd.Series:
    """String label per row; missing values become ``missing_label``."""
    levels = pd.Series(levels).reset_index(drop=True).astype(object)
    mask = levels.isna()
    labels = levels.map(str)
    labels[mask] = missing_label
    return labels


class WOEEncoder:
    """
    Weight of Evidence (WoE) Encoder.

    Computes per-level counts, event rate, WoE and IV contribution for one
    already-leveled variable (categorical, or a binned numeric variable) and
    maps levels to their WoE.

    WoE is ``ln(distribution_event / distribution_non_event)``. When either
    distribution of a level is zero the WoE is undefined: the level gets the
    sentinel ``STATISTICS.WOE_UNDEFINED`` (0.0), ``woe_defined`` is False and
    its IV contribution is therefore 0.0. No infinity or NaN is produced.
    """

    def __init__(
        self,
        missing_label: str = STATISTICS.MISSING_LABEL,
        sentinel: float = STATISTICS.WOE_UNDEFINED,
        event: Any = None,
    ):
        self.missing_label = missing_label
        self.sentinel = sentinel
        self.event = event
        self.woe_map_: Dict[str, float] = {}
        self.iv_ = 0.0
        self.n_undefined_ = 0
        self.summary_ = pd.DataFrame(columns=LEVEL_COLUMNS)
        self.is_fitted_ = False

    def fit(
        self,
        X: Any,
        y: Any,
        order: Optional[Sequence[str]] = None,
        variable: Optional[str] = None,
    ) -> "WOEEncoder":
        """
        Fit the WoE encoder to the data.

        Args:
            X: Level of each row (missing values form their own level).
            y: Binary target (0/1, bool, or labels with ``event`` set).
            order: Level order for the summary. Defaults to first appearance,
                with the missing level last. Must list every observed level;
                listed levels that never occur are skipped.
            variable: Name used in messages.
        """
        variable = variable or getattr(X, "name", None) or "feature"
        labels = level_labels(X, self.missing_label)
        target = encode_outcome(y, self.event)
        check_same_length(labels.to_numpy(), target, variable)

        if order is None:
            order = self._first_seen(labels)
        order = list(order)

        df = pd.DataFrame({"level": labels, "event": target})
        grouped = df.groupby("level", sort=False)["event"].agg(["count", "sum"])
        unlisted = sorted(set(grouped.index) - set(order))
        if unlisted:
            raise InvalidParameter(
                f"Levels of '{variable}' missing from the level order: {unlisted}."
            )
        grouped = grouped.reindex([lvl for lvl in order if lvl in grouped.index])

        count = grouped["count"].to_numpy(dtype=np.int64)
        events = grouped["sum"].to_numpy(dtype=np.int64)
        non_events = count - events

        total_events = int(target.sum())
        total_non_events = int(target.size - total_events)
        dist_event = events / total_events if total_events else np.zeros(len(count))
        dist_non_event = (
            non_events / total_non_events if total_non_events else np.zeros(len(count))
        )

        defined = (dist_event > 0) & (dist_non_event > 0)
        woe = np.full(len(count), float(self.sentinel))
        woe[defined] = np.log(dist_event[defined] / dist_non_event[defined])
        iv_contrib = np.where(defined, (dist_event - dist_non_event) * woe, 0.0)

        self.summary_ = pd.DataFrame(
            {
                "level": grouped.index.astype(str),
                "count": count,
                "event_count": events,
                "non_event_count": non_events,
                "event_rate": events / count,
                "distribution_event": dist_event,
                "distribution_non_event": dist_non_event,
                "woe": woe,
                "iv_contribution": iv_contrib,
                "woe_defined": defined,
            },
            columns=LEVEL_COLUMNS,
        )
        self.woe_map_ = dict(zip(self.summary_["level"], woe.tolist()))
        self.iv_ = float(iv_contrib.sum())
        self.n_undefined_ = int((~defined).sum())
        self.is_fitted_ = True

        if self.n_undefined_:
            undefined = self.summary_.loc[~defined, "level"].tolist()
            warnings.warn(
                f"WOE undefined for {self.n_undefined_} level(s) of '{variable}' "
                f"with zero events or zero non-events: {undefined}. "
                f"Reported as {self.sentinel}.",
                UndefinedStatisticWarning,
                stacklevel=2,
            )

        logger.debug(
            "Variable '%s': %d levels, IV=%.4f", variable, len(count), self.iv_
        )
        return self

    @requires_fit()
    def transform(self, X: Any) -> pd.Series:
        """
        Transform levels to their learned WoE.

        Levels unseen during fit get the neutral WoE 0.0.
        """
        index = X.index if isinstance(X, pd.Series) else None
        labels = level_labels(X, self.missing_label)
        mapped = labels.map(self.woe_map_).astype(float).fillna(0.0)
        if index is not None:
            mapped.index = index
        return mapped

    def fit_transform(self, X: Any, y: Any, **kwargs) -> pd.Series:
        """Fit and transform in one step."""
        self.fit(X, y, **kwargs)
        return self.transform(X)

    def _first_seen(self, labels: pd.Series) -> List[str]:
        seen = [v for v in pd.unique(labels) if v != self.missing_label]
        if (labels == self.missing_label).any():
            seen.append(self.missing_label)
        return seen
