# tagged_ad/calculus/operator.py
from __future__ import annotations
import numbers
from fractions import Fraction
from typing import Callable

from ..config import ADConfig
from ..core.function import Arity, Function, is_applicable
from .series import Series


class Operator:
    """
    Named transform from functions to functions, with an algebra:

        (A + B)(f) == A(f) + B(f)
        (c * A)(f) == c * A(f)
        (A * B)(f) == A(B(f))          composition
        (A ** n)(f) == A(A(...A(f)))   n-fold, A ** 0 is the identity
        A.exp()                        Series of A**n / n!

    Attributes
    ----------
    fn : callable
        Function -> function transform.
    name : str
        Printed name; combinations build s-expression style names.
    arity : Arity
        Operators take exactly one function.
    """

    __slots__ = ("fn", "name", "arity")

    def __init__(self, fn: Callable, name: str = "operator"):
        self.fn = fn
        self.name = name
        self.arity = Arity.exactly(1)

    def __call__(self, f):
        return self.fn(f)

    def __repr__(self):
        return self.name

    def rewrap(self, fn: Callable) -> "Operator":
        return Operator(fn, name=self.name)

    # Operator overloading for the operator algebra
    def __add__(self, other):
        if isinstance(other, Operator):
            return Operator(lambda f: self(f) + other(f), name=f"(+ {self.name} {other.name})")
        if _is_coefficient(other):
            return self + other * identity
        return NotImplemented

    def __radd__(self, other):
        if _is_coefficient(other):
            return other * identity + self
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Operator):
            return Operator(lambda f: self(f) - other(f), name=f"(- {self.name} {other.name})")
        if _is_coefficient(other):
            return self - other * identity
        return NotImplemented

    def __rsub__(self, other):
        if _is_coefficient(other):
            return other * identity - self
        return NotImplemented

    def __neg__(self):
        return Operator(lambda f: -self(f), name=f"(- {self.name})")

    def __mul__(self, other):
        if isinstance(other, Operator):
            return Operator(lambda f: self(other(f)), name=f"(* {self.name} {other.name})")
        if _is_coefficient(other):
            return Operator(lambda f: self(f) * other, name=f"(* {self.name} {other!r})")
        if is_applicable(other):
            raise TypeError(
                f"Cannot multiply operator {self.name} by function {other!r}; "
                f"apply the operator instead"
            )
        return NotImplemented

    def __rmul__(self, other):
        if _is_coefficient(other):
            return Operator(lambda f: other * self(f), name=f"(* {other!r} {self.name})")
        return NotImplemented

    def __truediv__(self, other):
        if _is_coefficient(other):
            return Operator(lambda f: self(f) / other, name=f"(/ {self.name} {other!r})")
        return NotImplemented

    def __pow__(self, n):
        if not isinstance(n, numbers.Integral) or n < 0:
            raise ValueError(f"Operator powers must be non-negative integers, but got {n!r}")
        if n == 0:
            return identity

        def repeated(f):
            for _ in range(n):
                f = self(f)
            return f

        return Operator(repeated, name=f"(expt {self.name} {n})")

    def exp(self) -> Series:
        """Power-series exponential Σ self**n / n!, as a lazy Series of operators."""
        return exp_series(self)


def _is_coefficient(x) -> bool:
    from ..core.structure import Structure
    return ADConfig.is_differentiable_scalar(x) or (isinstance(x, Structure) and not is_applicable(x))


def _identity(f):
    return f if isinstance(f, Function) else Function(f)


identity = Operator(_identity, name="identity")


def exp_series(op: Operator) -> Series:
    """
    Terms of exp(op) = Σ op^n / n!, built with the recurrence

        t_0 = identity,   t_{n+1} = t_n · op / (n + 1)

    Divisors are exact Fractions, so integer-valued expansions stay exact.

    Each traversal restarts from t_0.
    """
    def terms():
        term = identity
        n = 0
        while True:
            yield term
            n += 1
            term = (term * op) / Fraction(n)

    return Series(terms, name=f"(exp {op.name})")
