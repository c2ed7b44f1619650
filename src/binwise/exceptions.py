"""
Exception and warning types raised by binwise.

Failures are raised synchronously and never retried; every operation is a
pure function of its inputs. Conditions that still produce a complete result
(a zero-variance column, an undefined WOE) are reported as warnings and as
flags on the result instead.
"""


class BinwiseError(Exception):
    """Base class for binwise errors."""


class InvalidParameter(BinwiseError, ValueError):
    """An argument is outside its valid range."""


class InsufficientData(BinwiseError, ValueError):
    """Too few observations to satisfy the requested constraints."""


class NotFittedError(BinwiseError, ValueError):
    """A fitted attribute was accessed before ``fit`` was called."""


class DegenerateVariableWarning(UserWarning):
    """The variable has a single distinct value; one bin is returned."""


class UndefinedStatisticWarning(UserWarning):
    """WOE is undefined for a level with zero events or zero non-events."""
