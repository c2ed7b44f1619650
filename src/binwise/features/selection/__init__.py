"""Variable ranking and selection by Information Value."""

from binwise.features.selection.selector import (
    IV_STRENGTHS,
    iv_strength,
    rank_variables,
    select_by_iv,
)

__all__ = ["IV_STRENGTHS", "iv_strength", "rank_variables", "select_by_iv"]
