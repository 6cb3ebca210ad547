# tagged_ad/calculus/__init__.py

from .derivative import derivative, extract_tangent_fn, replace_tag_fn
from .jacobian import deep_partial, jacobian, euclidean, multivariate, partial_derivative
from .operator import Operator, identity, exp_series
from .operators import D, partial, Grad, Div, Curl, Lap
from .series import Series

__all__ = [
    "derivative", "extract_tangent_fn", "replace_tag_fn",
    "deep_partial", "jacobian", "euclidean", "multivariate", "partial_derivative",
    "Operator", "identity", "exp_series",
    "D", "partial", "Grad", "Div", "Curl", "Lap",
    "Series",
]
