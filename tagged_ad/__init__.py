# tagged_ad/__init__.py
# Tagged forward-mode differentiation library

__version__ = "0.1.0"

from .config import ADConfig
from .core import (
    ShapeMismatch,
    NonDifferentiableLeaf,
    Differential,
    fresh_tag,
    active_tag,
    with_active_tag,
    tag_active,
    bundle,
    extract_tangent,
    replace_tag,
    is_perturbed,
    primal_part,
    Structure,
    Up,
    Down,
    up,
    down,
    orientation,
    opposite,
    transpose,
    get_in,
    trace,
    Arity,
    Function,
    arity_of,
    compose,
)
from .calculus import (
    derivative,
    extract_tangent_fn,
    replace_tag_fn,
    deep_partial,
    jacobian,
    euclidean,
    multivariate,
    partial_derivative,
    Operator,
    Series,
    D,
    partial,
    Grad,
    Div,
    Curl,
    Lap,
)
from .ops import (
    exp, log, sqrt, sin, cos, tan, asin, acos, atan, sinh, cosh, tanh, erf,
    norm_cdf, expt, square, cube, absolute,
)

# Taylor expansion module
from . import taylor
from .taylor import taylor_series, taylor_polynomial

__all__ = [
    # Config / errors
    'ADConfig',
    'ShapeMismatch',
    'NonDifferentiableLeaf',
    # Substrate
    'Differential',
    'fresh_tag',
    'active_tag',
    'with_active_tag',
    'tag_active',
    'bundle',
    'extract_tangent',
    'replace_tag',
    'is_perturbed',
    'primal_part',
    # Structures and functions
    'Structure',
    'Up',
    'Down',
    'up',
    'down',
    'orientation',
    'opposite',
    'transpose',
    'get_in',
    'trace',
    'Arity',
    'Function',
    'arity_of',
    'compose',
    # Differentiation
    'derivative',
    'extract_tangent_fn',
    'replace_tag_fn',
    'deep_partial',
    'jacobian',
    'euclidean',
    'multivariate',
    'partial_derivative',
    # Operators
    'Operator',
    'D',
    'partial',
    'Grad',
    'Div',
    'Curl',
    'Lap',
    # Elementary functions
    'exp', 'log', 'sqrt', 'sin', 'cos', 'tan', 'asin', 'acos', 'atan',
    'sinh', 'cosh', 'tanh', 'erf', 'norm_cdf', 'expt', 'square', 'cube', 'absolute',
    # Taylor
    'taylor',
    'Series',
    'taylor_series',
    'taylor_polynomial',
]
