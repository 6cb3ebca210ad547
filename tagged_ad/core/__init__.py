# tagged_ad/core/__init__.py

"""
Core substrate of the tagged forward-mode engine.

This module exposes the values and primitives the differentiation layer is
built on. Keeping this surface small makes it easier to change the
representation of perturbed values without breaking the calculus layer.

Exports:
    Differential      : Perturbed value (primal + tangents for each tag).
    fresh_tag         : Mint a globally unique tag.
    active_tag        : Context manager marking a tag active for a block.
    with_active_tag   : Call a function with a tag marked active.
    tag_active        : Whether a tag's scope is currently open.
    bundle            : value + coefficient·ε_tag.
    extract_tangent   : Coefficient of ε_tag.
    replace_tag       : Rename a tag throughout a value.
    is_perturbed      : Whether a value carries any infinitesimal part.
    Up, Down          : Oriented structures.
    Function          : Differentiable callable with arity and pointwise arithmetic.
"""

from .errors import ShapeMismatch, NonDifferentiableLeaf
from .tags import fresh_tag, active_tag, with_active_tag, tag_active
from .differential import (
    Differential,
    bundle,
    extract_tangent,
    replace_tag,
    is_perturbed,
    primal_part,
    zero_like,
)
from .structure import (
    Structure, Up, Down, up, down,
    orientation, opposite, transpose, get_in, assoc_in, map_with_path, trace,
    matrix_to_structure,
)
from .function import Arity, Function, arity_of, compose, constant

__all__ = [
    "ShapeMismatch", "NonDifferentiableLeaf",
    "fresh_tag", "active_tag", "with_active_tag", "tag_active",
    "Differential", "bundle", "extract_tangent", "replace_tag", "is_perturbed",
    "primal_part", "zero_like",
    "Structure", "Up", "Down", "up", "down",
    "orientation", "opposite", "transpose", "get_in", "assoc_in", "map_with_path", "trace",
    "matrix_to_structure",
    "Arity", "Function", "arity_of", "compose", "constant",
]
