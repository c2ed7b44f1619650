"""
Decorators shared by the fitted estimators of binwise.
"""

from functools import wraps
from typing import Callable, TypeVar

from binwise.exceptions import NotFittedError

F = TypeVar("F", bound=Callable)


def requires_fit(attr_name: str = "is_fitted_") -> Callable[[F], F]:
    """
    Guard a method of a binner or encoder until it has been fitted.

    Parameters
    ----------
    attr_name : str
        Boolean attribute set by ``fit``. Default "is_fitted_".

    Raises
    ------
    NotFittedError
        When the attribute is missing or falsy at call time.

    Examples
    --------
    >>> class Encoder:
    ...     is_fitted_ = False
    ...
    ...     @requires_fit()
    ...     def transform(self, levels):
    ...         return levels
    >>> Encoder().transform(["a"])
    Traceback (most recent call last):
    ...
    binwise.exceptions.NotFittedError: Encoder is not fitted. Call fit() first.
    """

    def decorator(method: F) -> F:
        @wraps(method)
        def guarded(self, *args, **kwargs):
            if getattr(self, attr_name, False):
                return method(self, *args, **kwargs)
            raise NotFittedError(
                f"{type(self).__name__} is not fitted. Call fit() first."
            )

        return guarded  # type: ignore

    return decorator
