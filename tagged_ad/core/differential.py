# tagged_ad/core/differential.py
from __future__ import annotations
import numbers
from typing import Any, Dict, FrozenSet, Mapping, Optional

import numpy as np

from ..config import ADConfig

_PRIMAL: FrozenSet[int] = frozenset()


class Differential:
    """
    Perturbed value for tagged forward-mode Automatic Differentiation (AD).

    A Differential is a truncated first-order expansion in one or more
    infinitesimals ε_t, each identified by a tag t, with ε_t² = 0:

        x = c_{} + c_{t1}·ε_t1 + c_{t2}·ε_t2 + c_{t1,t2}·ε_t1·ε_t2 + ...

    Attributes
    ----------
    terms : dict[frozenset[int], scalar]
        Coefficient of each product of infinitesimals, keyed by the set of
        tags in the product. The empty set holds the primal value. Coefficients
        are plain scalars; nesting is expressed through multi-tag keys.
    """

    __slots__ = ("terms",)

    def __init__(self, terms: Mapping[FrozenSet[int], Any]):
        for key, coef in terms.items():
            if isinstance(coef, Differential) or not ADConfig.is_differentiable_scalar(coef):
                raise TypeError(
                    f"Differential coefficients must be plain numeric scalars, "
                    f"but got {type(coef)} for key {sorted(key)}"
                )
        self.terms: Dict[FrozenSet[int], Any] = {frozenset(k): c for k, c in terms.items()}

    @classmethod
    def from_terms(cls, terms: Mapping[FrozenSet[int], Any]):
        """
        Normalizing constructor: drops zero coefficients and collapses a value
        with no infinitesimal part back to its plain primal.
        """
        kept = {k: c for k, c in terms.items() if not _is_zero(c)}
        if not kept:
            return zero_like(terms.get(_PRIMAL, 0))
        if set(kept) == {_PRIMAL}:
            return kept[_PRIMAL]
        return cls(kept)

    @classmethod
    def epsilon(cls, tag: int) -> "Differential":
        """The bare infinitesimal ε_tag."""
        return cls({frozenset([tag]): 1})

    # ------------------------------ accessors ------------------------------ #
    @property
    def primal(self):
        """Fully unperturbed part (coefficient of the empty product)."""
        return self.terms.get(_PRIMAL, 0)

    @property
    def tags(self) -> FrozenSet[int]:
        out = frozenset()
        for key in self.terms:
            out = out | key
        return out

    def max_tag(self) -> int:
        """Outermost tag; elementary functions expand along it first."""
        return max(self.tags)

    def finite_part(self, tag: int):
        """Every term free of ε_tag."""
        return Differential.from_terms({k: c for k, c in self.terms.items() if tag not in k})

    def infinitesimal_part(self, tag: int):
        """Coefficient of ε_tag, itself possibly perturbed by other tags."""
        return Differential.from_terms(
            {k - {tag}: c for k, c in self.terms.items() if tag in k}
        )

    def rename_tag(self, old: int, new: int):
        """Substitute ε_old := ε_new. Products that would contain ε_new twice vanish."""
        out: Dict[FrozenSet[int], Any] = {}
        for key, coef in self.terms.items():
            if old in key:
                if new in key:
                    continue
                key = (key - {old}) | {new}
            out[key] = out[key] + coef if key in out else coef
        return Differential.from_terms(out)

    def __repr__(self):
        parts = []
        for key in sorted(self.terms, key=lambda k: (len(k), sorted(k))):
            coef = self.terms[key]
            if not key:
                parts.append(repr(coef))
            else:
                eps = "·".join(f"ε{t}" for t in sorted(key))
                parts.append(f"{coef!r}·{eps}")
        return f"Differential({' + '.join(parts)})"

    # ------------------------------ comparison ----------------------------- #
    def __eq__(self, other):
        if isinstance(other, Differential):
            return _nonzero(self.terms) == _nonzero(other.terms)
        if ADConfig.is_differentiable_scalar(other):
            rest = {k: c for k, c in _nonzero(self.terms).items() if k}
            return not rest and self.primal == other
        return NotImplemented

    def __hash__(self):
        return hash(frozenset(_nonzero(self.terms).items()))

    def __bool__(self):
        return bool(_nonzero(self.terms))

    # Ordering looks only at the primal, so control flow on perturbed values
    # follows the same branch as on the unperturbed input.
    def __lt__(self, other):
        return self.primal < primal_part(other)

    def __le__(self, other):
        return self.primal <= primal_part(other)

    def __gt__(self, other):
        return self.primal > primal_part(other)

    def __ge__(self, other):
        return self.primal >= primal_part(other)

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add, coercible
        return add(self, other) if coercible(other) else NotImplemented

    def __radd__(self, other):
        from ..ops.arithmetic import add, coercible
        return add(other, self) if coercible(other) else NotImplemented

    def __sub__(self, other):
        from ..ops.arithmetic import sub, coercible
        return sub(self, other) if coercible(other) else NotImplemented

    def __rsub__(self, other):
        from ..ops.arithmetic import sub, coercible
        return sub(other, self) if coercible(other) else NotImplemented

    def __mul__(self, other):
        from ..ops.arithmetic import mul, coercible
        return mul(self, other) if coercible(other) else NotImplemented

    def __rmul__(self, other):
        from ..ops.arithmetic import mul, coercible
        return mul(other, self) if coercible(other) else NotImplemented

    def __truediv__(self, other):
        from ..ops.arithmetic import div, coercible
        return div(self, other) if coercible(other) else NotImplemented

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div, coercible
        return div(other, self) if coercible(other) else NotImplemented

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pos__(self):
        return self

    def __abs__(self):
        from ..ops.arithmetic import absolute
        return absolute(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow, coercible
        return pow(self, other) if coercible(other) else NotImplemented

    def __rpow__(self, other):
        from ..ops.arithmetic import pow, coercible
        return pow(other, self) if coercible(other) else NotImplemented


def _is_zero(c) -> bool:
    try:
        return bool(c == 0)
    except (TypeError, ValueError):
        return False


def _nonzero(terms):
    return {k: c for k, c in terms.items() if not _is_zero(c)}


def _terms_of(x) -> Dict[FrozenSet[int], Any]:
    """View a Differential or plain scalar as a term mapping."""
    if isinstance(x, Differential):
        return x.terms
    return {_PRIMAL: x}


def add_terms(x, y):
    """x + y where at least one side is a Differential."""
    out = dict(_terms_of(x))
    for key, coef in _terms_of(y).items():
        out[key] = out[key] + coef if key in out else coef
    return Differential.from_terms(out)


def mul_terms(x, y):
    """x * y where at least one side is a Differential (ε_t² = 0 drops overlaps)."""
    out: Dict[FrozenSet[int], Any] = {}
    for kx, cx in _terms_of(x).items():
        for ky, cy in _terms_of(y).items():
            if kx & ky:
                continue
            key = kx | ky
            prod = cx * cy
            out[key] = out[key] + prod if key in out else prod
    return Differential.from_terms(out)


def zero_like(x):
    """Additive identity of x's kind."""
    from .structure import Structure

    if isinstance(x, Structure):
        return x.fmap(zero_like)
    if isinstance(x, np.ndarray):
        return np.zeros_like(x)
    if isinstance(x, numbers.Number) and not isinstance(x, bool):
        return type(x)(0)
    return 0


def _rebuild(seq, items):
    """Same sequence kind as `seq` holding `items`; namedtuples take positional fields."""
    if hasattr(seq, "_fields"):
        return type(seq)(*items)
    return type(seq)(items)


# --------------------------- substrate contract --------------------------- #
# All of the following are deep: they recurse through structures, lists,
# tuples, dicts and numpy arrays. Callables are delegated to the function
# adapters.

def primal_part(x, tag: Optional[int] = None):
    """
    Finite part of `x` with respect to `tag`, or the fully unperturbed value
    when `tag` is None.
    """
    from .structure import Structure

    if isinstance(x, Differential):
        return x.primal if tag is None else x.finite_part(tag)
    if isinstance(x, Structure):
        return x.fmap(lambda v: primal_part(v, tag))
    if isinstance(x, (list, tuple)):
        return _rebuild(x, [primal_part(v, tag) for v in x])
    if isinstance(x, dict):
        return {k: primal_part(v, tag) for k, v in x.items()}
    if isinstance(x, np.ndarray) and x.dtype == object:
        return np.frompyfunc(lambda v: primal_part(v, tag), 1, 1)(x)
    return x


def bundle(value, coefficient, tag: int):
    """value + coefficient·ε_tag, applied to every leaf of a container."""
    from .structure import Structure
    from ..ops.arithmetic import add, mul

    if isinstance(value, Structure):
        return value.fmap(lambda v: bundle(v, coefficient, tag))
    if isinstance(value, (list, tuple)):
        return _rebuild(value, [bundle(v, coefficient, tag) for v in value])
    if isinstance(value, dict):
        return {k: bundle(v, coefficient, tag) for k, v in value.items()}
    if isinstance(value, np.ndarray):
        # elementwise, into an object array of perturbed entries
        return np.frompyfunc(lambda v: bundle(v, coefficient, tag), 1, 1)(value)
    return add(value, mul(coefficient, Differential.epsilon(tag)))


def extract_tangent(value, tag: int):
    """
    Coefficient of ε_tag in `value`.

    Values not perturbed by `tag` yield the additive identity of their kind.
    A callable yields a wrapper whose results are tangents
    (see `tagged_ad.calculus.derivative.extract_tangent_fn`).
    """
    from .structure import Structure
    from ..calculus.derivative import extract_tangent_fn

    if isinstance(value, Differential):
        return value.infinitesimal_part(tag)
    if isinstance(value, Structure):
        return value.fmap(lambda v: extract_tangent(v, tag))
    if isinstance(value, (list, tuple)):
        return _rebuild(value, [extract_tangent(v, tag) for v in value])
    if isinstance(value, dict):
        return {k: extract_tangent(v, tag) for k, v in value.items()}
    if isinstance(value, np.ndarray):
        if value.dtype == object:
            return np.frompyfunc(lambda v: extract_tangent(v, tag), 1, 1)(value)
        return np.zeros_like(value)
    if callable(value):
        return extract_tangent_fn(value, tag)
    return zero_like(value)


def replace_tag(value, old: int, new: int):
    """Rename tag `old` to `new` throughout `value`."""
    from .structure import Structure
    from ..calculus.derivative import replace_tag_fn

    if isinstance(value, Differential):
        return value.rename_tag(old, new)
    if isinstance(value, Structure):
        return value.fmap(lambda v: replace_tag(v, old, new))
    if isinstance(value, (list, tuple)):
        return _rebuild(value, [replace_tag(v, old, new) for v in value])
    if isinstance(value, dict):
        return {k: replace_tag(v, old, new) for k, v in value.items()}
    if isinstance(value, np.ndarray) and value.dtype == object:
        return np.frompyfunc(lambda v: replace_tag(v, old, new), 1, 1)(value)
    if callable(value):
        return replace_tag_fn(value, old, new)
    return value


def is_perturbed(value) -> bool:
    """True if any leaf of `value` carries an infinitesimal part."""
    from .structure import Structure

    if isinstance(value, Differential):
        return True
    if isinstance(value, (Structure, list, tuple)):
        return any(is_perturbed(v) for v in value)
    if isinstance(value, dict):
        return any(is_perturbed(v) for v in value.values())
    if isinstance(value, np.ndarray) and value.dtype == object:
        return any(is_perturbed(v) for v in value.flat)
    return False
