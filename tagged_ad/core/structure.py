# tagged_ad/core/structure.py
from __future__ import annotations
import numbers
from functools import reduce
from typing import Any, Callable, Sequence, Tuple

import numpy as np

from .errors import ShapeMismatch

UP = "up"
DOWN = "down"


class Structure:
    """
    Immutable oriented tuple. Elements may themselves be structures, so a
    Structure is a tree whose leaves are addressed by integer paths.

    Attributes
    ----------
    orientation : str
        "up" (contravariant, argument tuples) or "down" (covariant, duals).
    values : tuple
        The elements, in order.
    """

    orientation: str = ""
    __slots__ = ("values",)

    def __init__(self, *values):
        self.values: Tuple[Any, ...] = tuple(values)

    def __repr__(self):
        return f"{self.orientation}({', '.join(repr(v) for v in self.values)})"

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return make(self.orientation, self.values[i])
        return self.values[i]

    def __eq__(self, other):
        if isinstance(other, Structure):
            return self.orientation == other.orientation and self.values == other.values
        return NotImplemented

    def __hash__(self):
        return hash((self.orientation, self.values))

    def fmap(self, fn: Callable[[Any], Any]) -> "Structure":
        """Same orientation, `fn` applied to each immediate element."""
        return make(self.orientation, [fn(v) for v in self.values])

    def __call__(self, *args):
        # A structure of functions applies each component to the same arguments.
        return self.fmap(lambda v: v(*args))

    # ------------------------------ arithmetic ----------------------------- #
    def __add__(self, other):
        if isinstance(other, Structure):
            _check_same_shape(self, other, "+")
            return make(self.orientation, [a + b for a, b in zip(self.values, other.values)])
        if _is_scalar(other) and other == 0:
            return self
        return NotImplemented

    def __radd__(self, other):
        # lets sum() start from 0
        if _is_scalar(other) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Structure):
            _check_same_shape(self, other, "-")
            return make(self.orientation, [a - b for a, b in zip(self.values, other.values)])
        if _is_scalar(other) and other == 0:
            return self
        return NotImplemented

    def __neg__(self):
        return self.fmap(lambda v: -v)

    def __mul__(self, other):
        if isinstance(other, Structure):
            return _structure_product(self, other)
        if _is_scalar(other):
            return self.fmap(lambda v: v * other)
        return NotImplemented

    def __rmul__(self, other):
        if _is_scalar(other):
            return self.fmap(lambda v: other * v)
        return NotImplemented

    def __truediv__(self, other):
        if _is_scalar(other):
            return self.fmap(lambda v: v / other)
        return NotImplemented


class Up(Structure):
    """Contravariant tuple."""
    orientation = UP
    __slots__ = ()


class Down(Structure):
    """Covariant tuple."""
    orientation = DOWN
    __slots__ = ()


_BY_ORIENTATION = {UP: Up, DOWN: Down}


def up(*values) -> Up:
    return Up(*values)


def down(*values) -> Down:
    return Down(*values)


def make(orientation_: str, values: Sequence[Any]) -> Structure:
    """Build a structure of the given orientation from a sequence."""
    return _BY_ORIENTATION[orientation_](*values)


def _is_scalar(x) -> bool:
    from ..config import ADConfig
    return ADConfig.is_differentiable_scalar(x)


def _check_same_shape(a: Structure, b: Structure, op: str):
    if a.orientation != b.orientation or len(a) != len(b):
        raise ShapeMismatch(
            f"Cannot apply {op} to {a.orientation}[{len(a)}] and {b.orientation}[{len(b)}]"
        )


def _compatible_for_contraction(a: Structure, b: Structure) -> bool:
    return a.orientation != b.orientation and len(a) == len(b)


def _structure_product(a: Structure, b: Structure):
    """
    Opposite orientations of equal length contract to Σ a_i·b_i; any other
    pairing scales each element of `b` by `a`.
    """
    if _compatible_for_contraction(a, b):
        products = [x * y for x, y in zip(a.values, b.values)]
        return reduce(lambda acc, v: acc + v, products) if products else 0
    return b.fmap(lambda v: a * v)


# ------------------------------ structure ops ----------------------------- #
def orientation(s) -> str:
    if not isinstance(s, Structure):
        raise TypeError(f"orientation() expects a Structure, but got {type(s)}")
    return s.orientation


def opposite_orientation(o: str) -> str:
    return DOWN if o == UP else UP


def opposite(s):
    """Flip the top-level orientation only; non-structures pass through."""
    if isinstance(s, Structure):
        return make(opposite_orientation(s.orientation), s.values)
    return s


def transpose(s):
    """Flip orientation at every level, preserving shape and values."""
    if isinstance(s, Structure):
        return make(opposite_orientation(s.orientation), [transpose(v) for v in s.values])
    return s


def _valid_index(node, i) -> bool:
    return (
        isinstance(node, Structure)
        and isinstance(i, numbers.Integral)
        and not isinstance(i, bool)
        and 0 <= i < len(node)
    )


def get_in(s, path: Sequence[int]):
    """Entry of `s` at `path`; raises ShapeMismatch if the path leaves the tree."""
    node = s
    for depth, i in enumerate(path):
        if not _valid_index(node, i):
            raise ShapeMismatch(
                f"Selectors {tuple(path)} do not address a location in {s!r} "
                f"(failed at position {depth})",
                selectors=path,
            )
        node = node.values[i]
    return node


def assoc_in(s, path: Sequence[int], value):
    """Copy of `s` with the entry at `path` replaced by `value`."""
    if not path:
        return value
    i, rest = path[0], path[1:]
    if not _valid_index(s, i):
        raise ShapeMismatch(f"Selectors {tuple(path)} do not address a location in {s!r}",
                            selectors=path)
    values = list(s.values)
    values[i] = assoc_in(values[i], rest, value)
    return make(s.orientation, values)


def map_with_path(s, fn: Callable[[Tuple[int, ...], Any], Any], prefix: Tuple[int, ...] = ()):
    """Same shape as `s`, each leaf replaced by fn(path, leaf)."""
    if isinstance(s, Structure):
        return make(s.orientation,
                    [map_with_path(v, fn, prefix + (i,)) for i, v in enumerate(s.values)])
    return fn(prefix, s)


def trace(s):
    """Σ s[i][i] of a square structure of structures; scalars are their own trace."""
    if not isinstance(s, Structure):
        return s
    diagonal = [s[i][i] for i in range(len(s))]
    return reduce(lambda acc, v: acc + v, diagonal) if diagonal else 0


def matrix_to_structure(m: np.ndarray) -> Down:
    """A 2-D array becomes a down of up columns."""
    m = np.asarray(m)
    if m.ndim != 2:
        raise ShapeMismatch(f"matrix_to_structure expects a 2-D array, but got ndim={m.ndim}")
    return Down(*[Up(*column) for column in m.T.tolist()])
