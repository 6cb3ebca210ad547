# tagged_ad/core/function.py
from __future__ import annotations
import inspect
from typing import Any, Callable, NamedTuple, Optional

from .structure import Structure


class Arity(NamedTuple):
    """Accepted positional argument counts; `max=None` means variadic."""
    min: int
    max: Optional[int]

    @classmethod
    def exactly(cls, n: int) -> "Arity":
        return cls(n, n)

    @classmethod
    def at_least(cls, n: int) -> "Arity":
        return cls(n, None)

    def accepts(self, n: int) -> bool:
        return n >= self.min and (self.max is None or n <= self.max)


def arity_of(f) -> Arity:
    """
    Arity of any callable: an explicit `arity` attribute wins, structures
    report their first component's arity, everything else is introspected.
    Callables without a readable signature (numpy ufuncs, builtins) are
    treated as variadic.
    """
    explicit = getattr(f, "arity", None)
    if isinstance(explicit, Arity):
        return explicit
    if isinstance(f, Structure):
        return arity_of(f.values[0]) if len(f) else Arity.at_least(0)
    try:
        sig = inspect.signature(f)
    except (TypeError, ValueError):
        return Arity.at_least(0)
    lo, hi = 0, 0
    for p in sig.parameters.values():
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            hi += 1
            if p.default is p.empty:
                lo += 1
        elif p.kind == p.VAR_POSITIONAL:
            return Arity(lo, None)
    return Arity(lo, hi)


def joint_arity(*arities: Arity) -> Arity:
    """Argument counts every one of `arities` accepts."""
    lo = max(a.min for a in arities)
    highs = [a.max for a in arities if a.max is not None]
    hi = min(highs) if highs else None
    if hi is not None and hi < lo:
        raise TypeError(f"Incompatible arities: {list(arities)}")
    return Arity(lo, hi)


def name_of(f) -> str:
    return getattr(f, "name", None) or getattr(f, "__name__", None) or repr(f)


def is_applicable(x) -> bool:
    """True for values that act as functions (structures only if a component does)."""
    from .differential import Differential

    if isinstance(x, Structure):
        return any(is_applicable(v) for v in x.values)
    if isinstance(x, Differential):
        return False
    return callable(x)


class Function:
    """
    Differentiable callable: a wrapped Python callable carrying an arity and
    a name, with pointwise arithmetic against numbers, structures and other
    callables:
        (f + g)(x) == f(x) + g(x),   (2 * f)(x) == 2 * f(x)

    Attributes
    ----------
    fn : callable
        The underlying callable.
    arity : Arity
        Accepted positional argument counts (introspected from `fn` by default).
    name : str
        Debug/pretty-print name.
    """

    __slots__ = ("fn", "arity", "name")

    def __init__(self, fn: Callable, arity: Optional[Arity] = None, name: Optional[str] = None):
        if not callable(fn):
            raise TypeError(f"Function expects a callable, but got {type(fn)}")
        self.fn = fn
        self.arity = arity if arity is not None else arity_of(fn)
        self.name = name or name_of(fn)

    def __call__(self, *args):
        return self.fn(*args)

    def __repr__(self):
        return f"Function({self.name})"

    def rewrap(self, fn: Callable) -> "Function":
        """Same arity and name around a different implementation."""
        return Function(fn, arity=self.arity, name=self.name)

    # Operator overloading: pointwise arithmetic
    def __add__(self, other):
        return _pointwise(lambda a, b: a + b, self, other, "+")

    def __radd__(self, other):
        return _pointwise(lambda a, b: a + b, other, self, "+")

    def __sub__(self, other):
        return _pointwise(lambda a, b: a - b, self, other, "-")

    def __rsub__(self, other):
        return _pointwise(lambda a, b: a - b, other, self, "-")

    def __mul__(self, other):
        return _pointwise(lambda a, b: a * b, self, other, "*")

    def __rmul__(self, other):
        return _pointwise(lambda a, b: a * b, other, self, "*")

    def __truediv__(self, other):
        return _pointwise(lambda a, b: a / b, self, other, "/")

    def __rtruediv__(self, other):
        return _pointwise(lambda a, b: a / b, other, self, "/")

    def __pow__(self, other):
        return _pointwise(lambda a, b: a ** b, self, other, "**")

    def __neg__(self):
        return Function(lambda *args: -self(*args), arity=self.arity, name=f"(- {self.name})")


def _pointwise(op, f, g, symbol: str) -> Function:
    f_is_fn, g_is_fn = is_applicable(f), is_applicable(g)
    arities = [arity_of(h) for h, is_fn in ((f, f_is_fn), (g, g_is_fn)) if is_fn]

    def combined(*args):
        a = f(*args) if f_is_fn else f
        b = g(*args) if g_is_fn else g
        return op(a, b)

    return Function(combined, arity=joint_arity(*arities),
                    name=f"({symbol} {name_of(f)} {name_of(g)})")


def wrap_like(original, fn: Callable):
    """
    Wrap `fn` so it presents the same callable face as `original`: wrappers
    that know how to rebuild themselves (`rewrap`) do so, anything else becomes
    a Function with `original`'s arity and name.
    """
    rewrap = getattr(original, "rewrap", None)
    if rewrap is not None:
        return rewrap(fn)
    return Function(fn, arity=arity_of(original), name=name_of(original))


def compose(*fns: Callable) -> Function:
    """compose(f, g, h)(x) == f(g(h(x))); arity is that of the innermost function."""
    if not fns:
        return Function(lambda x: x, arity=Arity.exactly(1), name="identity")
    *outer, inner = fns

    def composed(*args):
        value = inner(*args)
        for fn in reversed(outer):
            value = fn(value)
        return value

    return Function(composed, arity=arity_of(inner),
                    name=f"(compose {' '.join(name_of(f) for f in fns)})")


def constant(value, arity: Arity = Arity.at_least(0)) -> Function:
    """Function ignoring its arguments."""
    return Function(lambda *args: value, arity=arity, name=f"(constant {value!r})")
