# tagged_ad/calculus/jacobian.py
from __future__ import annotations
from typing import Callable, Sequence, Tuple

import numpy as np

from ..config import ADConfig
from ..core.errors import NonDifferentiableLeaf, ShapeMismatch
from ..core.function import Arity, Function, arity_of, constant, name_of
from ..core.structure import Structure, Up, assoc_in, get_in, map_with_path, matrix_to_structure, transpose
from .derivative import derivative


def deep_partial(f: Callable, structure: Structure, path: Sequence[int]):
    """
    ∂f/∂(entry at `path`), evaluated at `structure`.

    Differentiates x -> f(structure with the entry at `path` replaced by x)
    at the current entry. The entry must be a differentiable scalar.
    """
    path = tuple(path)
    leaf = get_in(structure, path)
    if not ADConfig.is_differentiable_scalar(leaf):
        raise NonDifferentiableLeaf(
            f"Entry at {path} is not a differentiable scalar, but got {type(leaf)}",
            path=path, leaf=leaf,
        )
    return derivative(lambda x: f(assoc_in(structure, path, x)))(leaf)


def jacobian(f: Callable, input: Structure, selectors: Sequence[int] = ()):
    """
    All first partials of f at a structured input.

    The result has the shape of the addressed (sub)structure, transposed:
    every orientation is flipped, so an up input gives a down of partials.
    With `selectors`, only the sub-structure at that path is varied and
    result indices are relative to it; selectors addressing a single leaf
    give that one partial.

    Raises
    ------
    ShapeMismatch
        If `selectors` do not address a location in `input`.
    """
    selectors = tuple(selectors)
    sub = get_in(input, selectors)
    if not isinstance(sub, Structure):
        return deep_partial(f, input, selectors)
    return map_with_path(
        transpose(sub),
        lambda path, _: deep_partial(f, input, selectors + path),
    )


def euclidean(f: Callable, selectors: Sequence[int] = ()) -> Function:
    """
    Derivative of a one-argument function whose argument is either a
    structure (Jacobian) or a single scalar (plain derivative). Selectors
    only make sense against a structure.
    """
    selectors = tuple(selectors)
    d = derivative(f)

    def df(x):
        if isinstance(x, Structure):
            return jacobian(f, x, selectors)
        if selectors:
            raise ShapeMismatch(
                f"Selectors {selectors} not allowed for non-structural input {x!r}",
                selectors=selectors,
            )
        return d(x)

    return Function(df, arity=Arity.exactly(1), name=f"(euclidean {name_of(f)})")


def _as_argument(x):
    # matrices enter the argument tuple as a down of up columns
    if isinstance(x, np.ndarray) and x.ndim == 2:
        return matrix_to_structure(x)
    return x


def multivariate(f: Callable, selectors: Sequence[int] = ()) -> Function:
    """
    Derivative of a function of any number of arguments.

    - g()        : the constant-zero function (degenerate case)
    - g(x)       : euclidean(f, selectors)(x); a single argument is not
                   wrapped in a tuple, so scalar in gives scalar out
    - g(x, y...) : the arguments become one up tuple and the result is the
                   Jacobian with respect to it (a down of partials)

    Example
    -------
    multivariate(lambda x, y, z: x * y * z)(1, 2, 3) -> down(6, 3, 2)
    """
    selectors: Tuple[int, ...] = tuple(selectors)
    d = euclidean(f, selectors)
    d_spread = euclidean(lambda args: f(*args), selectors)

    def g(*args):
        if not args:
            return constant(0)
        if len(args) == 1:
            return d(args[0])
        return d_spread(Up(*[_as_argument(a) for a in args]))

    label = f"(partial {' '.join(map(str, selectors))} {name_of(f)})" if selectors \
        else f"(D {name_of(f)})"
    return Function(g, arity=arity_of(f), name=label)


def partial_derivative(f: Callable, selectors: Sequence[int] = ()) -> Function:
    """Derivative of `f` with respect to the argument addressed by `selectors`."""
    return multivariate(f, selectors)
