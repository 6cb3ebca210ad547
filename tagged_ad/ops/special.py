# tagged_ad/ops/special.py
import numpy as np
from scipy.special import ndtr

from .arithmetic import mul, square
from .transcendental import _elementary, exp

INV_SQRT_TWO_PI = 1.0 / np.sqrt(2.0 * np.pi)


def norm_pdf(x):
    """Standard normal density φ(x) = exp(-x²/2) / √(2π)."""
    return mul(exp(mul(-0.5, square(x))), INV_SQRT_TWO_PI)


def norm_cdf(x):
    """
    Standard normal CDF Φ(x), evaluated with scipy's ndtr.
    Derivative: dΦ/dx = φ(x).
    """
    return _elementary(x, ndtr, norm_cdf, norm_pdf)
