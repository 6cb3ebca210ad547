# tagged_ad/ops/__init__.py

# Generic arithmetic: plain values pass through to Python operators, perturbed
# values expand in their tags.
from .arithmetic import add, sub, mul, div, neg, pow, expt, square, cube, absolute, reciprocal
from .transcendental import exp, log, sqrt, sin, cos, tan, asin, acos, atan, sinh, cosh, tanh, erf
from .special import norm_cdf, norm_pdf

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow", "expt", "square", "cube", "absolute", "reciprocal",
    "exp", "log", "sqrt", "sin", "cos", "tan", "asin", "acos", "atan", "sinh", "cosh", "tanh",
    "erf",
    "norm_cdf", "norm_pdf",
]
