# tagged_ad/calculus/derivative.py

#-----------------------------------------------------------------------------
# We perturb the input along a fresh infinitesimal ε_T, run the function with
# T marked active, and read the ε_T coefficient off the result.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable

from ..core.differential import bundle, extract_tangent, replace_tag
from ..core.function import Arity, Function, name_of, wrap_like
from ..core.tags import active_tag, fresh_tag, tag_active, with_active_tag


def extract_tangent_fn(f: Callable, tag: int):
    """
    Tangent of a function-valued result: a wrapper g with g(*args) equal to
    the ε_tag coefficient of f(*args).

    Notes
    -----
    If g is called while `tag` is still active, the call is reentrant: an
    argument may carry ε_tag of its own (for instance the closure is being
    applied inside the very differentiation that produced it). That ε_tag
    and the one captured in f's closure are different directions, so the
    incoming one is renamed to a fresh tag for the duration of the call and
    renamed back afterwards.
    """
    def g(*args):
        if tag_active(tag):
            fresh = fresh_tag()
            renamed = [replace_tag(a, tag, fresh) for a in args]
            with active_tag(tag):
                result = f(*renamed)
            return replace_tag(extract_tangent(result, tag), fresh, tag)
        return extract_tangent(with_active_tag(tag, f, args), tag)

    return wrap_like(f, g)


def replace_tag_fn(f: Callable, old: int, new: int):
    """
    Rename `old` to `new` in everything f returns.

    While `old` is active, arguments may carry their own ε_old; they are moved
    to a fresh tag around the call so only f's own ε_old is renamed.
    """
    def g(*args):
        if tag_active(old):
            fresh = fresh_tag()
            renamed = [replace_tag(a, old, fresh) for a in args]
            result = replace_tag(f(*renamed), old, new)
            return replace_tag(result, fresh, old)
        return replace_tag(f(*args), old, new)

    return wrap_like(f, g)


def derivative(f: Callable[[Any], Any]) -> Function:
    """
    Forward derivative of a single-argument function.

    derivative(f)(x) mints a tag T, evaluates f(x + ε_T) with T active and
    returns the ε_T coefficient. Function-valued results come back as
    tangent functions (see `extract_tangent_fn`), so curried and
    higher-order functions differentiate without special handling.

    Example
    -------
    derivative(lambda x: x ** 3)(2) -> 12
    """
    def df(x):
        tag = fresh_tag()
        lifted = bundle(x, 1, tag)
        return extract_tangent(with_active_tag(tag, f, [lifted]), tag)

    return Function(df, arity=Arity.exactly(1), name=f"(derivative {name_of(f)})")
