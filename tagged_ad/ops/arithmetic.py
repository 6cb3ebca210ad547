# tagged_ad/ops/arithmetic.py
import numbers
import warnings

import numpy as np

from ..config import ADConfig
from ..core.differential import Differential, add_terms, mul_terms, primal_part


def coercible(x) -> bool:
    """Operands Differential arithmetic accepts: perturbed values and registered scalars."""
    return isinstance(x, Differential) or ADConfig.is_differentiable_scalar(x)


def _perturbed(*xs) -> bool:
    return any(isinstance(x, Differential) for x in xs)


def lift_unary(x: Differential, f, df):
    """
    Generic unary primitive on a perturbed value:
      - splits x = p + t·ε_T along its outermost tag T
      - returns f(p) + df(p)·t·ε_T

    `f` and `df` are themselves generic, so `p` and `t` may still carry the
    remaining (inner) tags and higher-order terms come out right.
    """
    tag = x.max_tag()
    p = x.finite_part(tag)
    t = x.infinitesimal_part(tag)
    return add(f(p), mul(mul(df(p), t), Differential.epsilon(tag)))


def add(x, y):
    if not _perturbed(x, y):
        return x + y
    return add_terms(x, y)


def sub(x, y):
    if not _perturbed(x, y):
        return x - y
    return add_terms(x, neg(y))


def mul(x, y):
    if not _perturbed(x, y):
        return x * y
    return mul_terms(x, y)


def neg(x):
    """
    Unary negation:
      out = -x, every coefficient negated
    """
    if not isinstance(x, Differential):
        return -x
    return Differential.from_terms({k: -c for k, c in x.terms.items()})


def reciprocal(x):
    """1/x; d(1/x) = -1/x^2."""
    if not isinstance(x, Differential):
        return 1 / x
    return lift_unary(x, reciprocal, lambda p: neg(reciprocal(mul(p, p))))


def div(x, y):
    if not _perturbed(x, y):
        return x / y
    if not isinstance(y, Differential):
        # plain divisor: scale every coefficient
        return Differential.from_terms({k: c / y for k, c in x.terms.items()})
    return mul(x, reciprocal(y))


def _is_integer(p) -> bool:
    if isinstance(p, numbers.Integral):
        return True
    try:
        return float(p).is_integer()
    except (TypeError, ValueError):
        return False


def pow(x, y):
    """
    Power:
      out = x ** y

    Derivative rules:
      plain exponent p : d(x^p) = p * x^(p-1) * dx
      perturbed y      : x^y = exp(y * log(x))

    A non-integer power of a perturbed base whose primal is <= 0 has no real
    derivative; a RuntimeWarning is emitted and the generic rule is applied
    anyway (Python then produces complex or inf values).
    """
    from .transcendental import exp, log

    if not _perturbed(x, y):
        return x ** y
    if isinstance(y, Differential):
        return exp(mul(y, log(x)))
    if y == 0:
        return 1
    if not _is_integer(y):
        base = primal_part(x)
        if isinstance(base, numbers.Real) and base <= 0:
            warnings.warn(
                f"Derivative of a non-integer power ({y}) of a non-positive base "
                f"({base}) is undefined over the reals.",
                RuntimeWarning,
                stacklevel=2,
            )
    return lift_unary(x, lambda p: pow(p, y), lambda p: mul(y, pow(p, y - 1)))


def expt(x, y):
    return pow(x, y)


def square(x):
    return mul(x, x)


def cube(x):
    return mul(x, mul(x, x))


def absolute(x):
    """|x|; the derivative uses the sign of the unperturbed primal (0 at 0)."""
    if not isinstance(x, Differential):
        return abs(x)
    return lift_unary(x, absolute, lambda p: np.sign(primal_part(p)))
