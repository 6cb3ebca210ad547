# tagged_ad/ops/transcendental.py
from fractions import Fraction

import numpy as np
from scipy.special import erf as scipy_erf

from ..core.differential import Differential
from ..core.function import Function, arity_of, is_applicable, name_of
from ..core.structure import Structure
from .arithmetic import add, lift_unary, mul, neg, reciprocal, square, sub

TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)


def _elementary(x, plain, op, df):
    """
    Dispatch an elementary function on its argument kind:
      - Differential : lifted, with `df` giving the derivative at the primal
      - callable     : composed, so exp(f) is the function x -> exp(f(x))
      - plain value  : evaluated with the numpy/scipy kernel `plain`
    """
    if isinstance(x, Differential):
        return lift_unary(x, op, df)
    if isinstance(x, Structure):
        raise TypeError(f"{op.__name__} is not defined on structures, but got {x!r}")
    if is_applicable(x):
        return Function(lambda *args: op(x(*args)), arity=arity_of(x),
                        name=f"({op.__name__} {name_of(x)})")
    if isinstance(x, Fraction):
        x = float(x)
    return plain(x)


def exp(x):
    """Exponential; d/dx e^x = e^x."""
    return _elementary(x, np.exp, exp, exp)


def log(x):
    """Natural logarithm; d/dx log x = 1/x."""
    return _elementary(x, np.log, log, reciprocal)


def sqrt(x):
    """Square root; d/dx sqrt(x) = 1 / (2 sqrt(x))."""
    return _elementary(x, np.sqrt, sqrt, lambda p: reciprocal(mul(2, sqrt(p))))


def sin(x):
    return _elementary(x, np.sin, sin, cos)


def cos(x):
    return _elementary(x, np.cos, cos, lambda p: neg(sin(p)))


def tan(x):
    """Tangent; d/dx tan x = 1 / cos^2 x."""
    return _elementary(x, np.tan, tan, lambda p: reciprocal(square(cos(p))))


def asin(x):
    return _elementary(x, np.arcsin, asin, lambda p: reciprocal(sqrt(sub(1, square(p)))))


def acos(x):
    return _elementary(x, np.arccos, acos, lambda p: neg(reciprocal(sqrt(sub(1, square(p))))))


def atan(x):
    return _elementary(x, np.arctan, atan, lambda p: reciprocal(add(1, square(p))))


def sinh(x):
    return _elementary(x, np.sinh, sinh, cosh)


def cosh(x):
    return _elementary(x, np.cosh, cosh, sinh)


def tanh(x):
    """Hyperbolic tangent; d/dx tanh x = 1 - tanh^2 x."""
    return _elementary(x, np.tanh, tanh, lambda p: sub(1, square(tanh(p))))


def erf(x):
    """
    Error function: erf(x) = (2/√π) ∫₀ˣ e^(-t²) dt

    Derivative: d/dx erf(x) = (2/√π) * e^(-x²)
    """
    return _elementary(x, scipy_erf, erf, lambda p: mul(TWO_OVER_SQRT_PI, exp(neg(square(p)))))
