# tagged_ad/taylor.py
# Taylor expansion on top of the operator algebra (exp of a scaled D)

from functools import reduce
from typing import Callable, Optional

from .calculus.operator import exp_series
from .calculus.operators import D
from .calculus.series import Series
from .config import ADConfig
from .ops.arithmetic import add


def taylor_series(f: Callable, x, dx) -> Series:
    """
    Lazy Taylor expansion of f about x in the direction dx.

    Term n is (dx^n / n!) · D^n f(x), obtained from the power-series
    exponential of the scaled operator dx·D applied to f and evaluated at x:

        taylor_series(exp, 0, 1).take(4) -> [1, 1, 1/2, 1/6]

    `x` and `dx` may be scalars, or up structures for functions of several
    variables (dx is contracted against each derivative).

    Returns
    -------
    Series
        Restartable: iterating twice recomputes the same terms; only the
        terms actually requested are computed.
    """
    return exp_series(dx * D)(f)(x)


def taylor_polynomial(f: Callable, x, dx, n: Optional[int] = None):
    """
    Sum of the first `n` terms of `taylor_series(f, x, dx)` (default
    `ADConfig.DEFAULT_TAYLOR_TERMS`), i.e. the degree n-1 approximation of
    f(x + dx).
    """
    if n is None:
        n = ADConfig.DEFAULT_TAYLOR_TERMS
    if n < 1:
        raise ValueError(f"taylor_polynomial needs at least one term, but got n={n}")
    return reduce(add, taylor_series(f, x, dx).take(n))
