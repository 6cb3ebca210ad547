"""Tests for generic arithmetic and the elementary function library."""

import math
import warnings
from fractions import Fraction

import numpy as np
import pytest

from tagged_ad import (
    Differential,
    Function,
    absolute,
    acos,
    asin,
    bundle,
    cosh,
    derivative,
    erf,
    exp,
    expt,
    extract_tangent,
    fresh_tag,
    log,
    norm_cdf,
    sinh,
    sqrt,
    square,
    up,
)
from tagged_ad.ops import norm_pdf, reciprocal


class TestPlainValues:
    def test_elementary_functions_on_numbers(self):
        assert exp(0) == 1
        assert log(math.e) == pytest.approx(1.0)
        assert sqrt(9.0) == 3.0
        assert erf(0.0) == 0.0
        assert norm_cdf(0.0) == pytest.approx(0.5)

    def test_fractions_are_accepted(self):
        assert exp(Fraction(1, 2)) == pytest.approx(math.exp(0.5))

    def test_structures_are_rejected(self):
        with pytest.raises(TypeError):
            exp(up(1, 2))

    def test_arithmetic_helpers(self):
        assert square(4) == 16
        assert expt(2, 10) == 1024
        assert absolute(-3) == 3
        assert reciprocal(4) == 0.25


class TestFunctionComposition:
    def test_elementary_of_function(self):
        f = exp(lambda x: 2 * x)
        assert isinstance(f, Function)
        assert f(1.5) == pytest.approx(math.exp(3.0))

    def test_keeps_arity(self):
        f = sinh(lambda x, y: x * y)
        assert f.arity.min == 2
        assert f(1.0, 2.0) == pytest.approx(math.sinh(2.0))


class TestElementaryDerivatives:
    @pytest.mark.parametrize("f, df, x", [
        (asin, lambda x: 1 / math.sqrt(1 - x * x), 0.3),
        (acos, lambda x: -1 / math.sqrt(1 - x * x), -0.4),
        (sinh, math.cosh, 0.8),
        (cosh, math.sinh, -1.2),
        (log, lambda x: 1 / x, 2.5),
        (sqrt, lambda x: 0.5 / math.sqrt(x), 3.0),
        (reciprocal, lambda x: -1 / (x * x), 1.7),
        (norm_pdf, lambda x: -x * math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi), 0.9),
    ])
    def test_against_closed_form(self, f, df, x):
        assert derivative(f)(x) == pytest.approx(df(x))

    def test_second_derivative_of_erf(self):
        x = 0.6
        expected = -4 * x / math.sqrt(math.pi) * math.exp(-x * x)
        assert derivative(derivative(erf))(x) == pytest.approx(expected)

    def test_norm_cdf_derivative_is_density(self, point):
        assert derivative(norm_cdf)(point) == pytest.approx(norm_pdf(point))

    def test_absolute(self):
        assert derivative(absolute)(-2.0) == -1
        assert derivative(absolute)(3.0) == 1
        assert derivative(abs)(-2.0) == -1


class TestPowers:
    def test_integer_power(self):
        assert derivative(lambda x: x ** 5)(2) == 80

    def test_zero_power(self):
        assert derivative(lambda x: x ** 0)(2) == 0

    def test_fractional_power(self):
        assert derivative(lambda x: x ** 0.5)(4.0) == pytest.approx(0.25)

    def test_variable_exponent(self):
        assert derivative(lambda x: 2 ** x)(3) == pytest.approx(8 * math.log(2))

    def test_variable_base_and_exponent(self):
        assert derivative(lambda x: x ** x)(2.0) == pytest.approx(4 * (1 + math.log(2)))

    def test_integer_power_of_negative_base(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert derivative(lambda x: x ** 3)(-2) == 12

    def test_fractional_power_of_non_positive_base_warns(self):
        with pytest.warns(RuntimeWarning, match="undefined over the reals"):
            derivative(lambda x: x ** 0.5)(-1.0)

    def test_power_of_perturbed_integer_valued_float(self):
        assert derivative(lambda x: x ** 2.0)(-3.0) == -6.0


class TestArithmetic:
    def test_plain_divisor_scales(self):
        t = fresh_tag()
        x = bundle(6.0, 3.0, t)
        y = x / 2
        assert isinstance(y, Differential)
        assert y.primal == 3.0
        assert extract_tangent(y, t) == 1.5

    def test_quotient_rule(self):
        f = lambda x: (x * x + 1) / (x - 3)
        x = 1.0
        expected = (2 * x * (x - 3) - (x * x + 1)) / (x - 3) ** 2
        assert derivative(f)(x) == pytest.approx(expected)

    def test_numpy_scalars(self):
        assert derivative(lambda x: x * x)(np.float64(1.5)) == pytest.approx(3.0)
        assert derivative(exp)(np.float32(0.0)) == pytest.approx(1.0)

    def test_control_flow_on_perturbed_values(self):
        def relu(x):
            return x if x > 0 else 0 * x

        assert derivative(relu)(2.0) == 1
        assert derivative(relu)(-2.0) == 0
