# tagged_ad/calculus/operators.py
from __future__ import annotations

from ..core.function import Function, arity_of, compose, name_of
from ..core.structure import Up, opposite, trace
from .jacobian import multivariate
from .operator import Operator

# Derivative of a function of any number of (scalar or structured) arguments.
D = Operator(lambda f: multivariate(f, ()), name="D")


def partial(*selectors: int) -> Operator:
    """
    Partial derivative with respect to the argument addressed by `selectors`:
        partial(1)(f)(x, y) == ∂f/∂y
        partial(0, 2)(g)(up(a, b, c), ...) == ∂g/∂c for the first argument
    """
    label = ", ".join(map(str, selectors))
    return Operator(lambda f: multivariate(f, selectors), name=f"partial({label})")


def _grad(f):
    # D flips orientation; Grad flips it back so the gradient lives where the input does
    return compose(opposite, D(f))


def _div(f):
    return compose(trace, Grad(f))


def _component(f, i: int) -> Function:
    return Function(lambda *args: f(*args)[i], arity=arity_of(f), name=f"({name_of(f)})[{i}]")


def _curl(f):
    # Precondition (not checked): f maps R^3 -> R^3.
    Dx, Dy, Dz = partial(0), partial(1), partial(2)
    fx, fy, fz = (_component(f, i) for i in range(3))
    return Up(Dy(fz) - Dz(fy), Dz(fx) - Dx(fz), Dx(fy) - Dy(fx))


def _lap(f):
    return compose(trace, Grad(Grad(f)))


Grad = Operator(_grad, name="Grad")

# Divergence of a vector field R^n -> R^n
Div = Operator(_div, name="Div")

# Curl of a vector field R^3 -> R^3; the result is an up of component functions
Curl = Operator(_curl, name="Curl")

Lap = Operator(_lap, name="Lap")
