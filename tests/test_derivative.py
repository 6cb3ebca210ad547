"""Tests for the scalar derivative and the hygienic function adapters."""

import math

import numpy as np
import pytest

from tagged_ad import (
    Arity,
    D,
    Differential,
    Function,
    active_tag,
    atan,
    bundle,
    cos,
    derivative,
    down,
    erf,
    exp,
    extract_tangent,
    extract_tangent_fn,
    fresh_tag,
    log,
    norm_cdf,
    replace_tag_fn,
    sin,
    sqrt,
    tag_active,
    tan,
    tanh,
    up,
)
from tagged_ad.core.tags import active_tags


class TestScalarDerivative:
    def test_cube(self, cube):
        assert derivative(cube)(2) == 12

    def test_constant_function(self):
        assert derivative(lambda x: 5)(3) == 0

    @pytest.mark.parametrize("f, df", [
        (exp, lambda x: math.exp(x)),
        (sin, lambda x: math.cos(x)),
        (cos, lambda x: -math.sin(x)),
        (tan, lambda x: 1 / math.cos(x) ** 2),
        (atan, lambda x: 1 / (1 + x * x)),
        (tanh, lambda x: 1 - math.tanh(x) ** 2),
        (erf, lambda x: 2 / math.sqrt(math.pi) * math.exp(-x * x)),
        (norm_cdf, lambda x: math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi)),
    ])
    def test_elementary_functions(self, f, df, point):
        assert derivative(f)(point) == pytest.approx(df(point))

    def test_log_and_sqrt(self):
        assert derivative(log)(4.0) == pytest.approx(0.25)
        assert derivative(sqrt)(4.0) == pytest.approx(0.25)

    def test_chain_rule(self, point):
        f = lambda x: sin(x) * exp(x)
        g = lambda x: x * x + 1
        lhs = derivative(lambda x: f(g(x)))(point)
        rhs = derivative(f)(g(point)) * derivative(g)(point)
        assert lhs == pytest.approx(rhs)

    def test_second_derivative(self, cube):
        assert derivative(derivative(cube))(2) == 12

    def test_third_derivative(self):
        assert derivative(derivative(derivative(lambda x: x ** 4)))(2) == 48

    def test_higher_order_exp(self):
        d4 = derivative(derivative(derivative(derivative(exp))))
        assert d4(1.0) == pytest.approx(math.e)

    def test_structure_valued_function(self):
        result = derivative(lambda t: up(cos(t), sin(t), t * t))(0.0)
        assert result[0] == pytest.approx(0.0)
        assert result[1] == pytest.approx(1.0)
        assert result[2] == pytest.approx(0.0)
        assert result.orientation == "up"

    def test_returns_function(self, cube):
        d = derivative(cube)
        assert isinstance(d, Function)
        assert d.arity == Arity(1, 1)

    def test_no_scope_leaks(self, cube):
        derivative(cube)(3)
        assert active_tags() == ()

    def test_scope_released_when_function_raises(self):
        def boom(x):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            derivative(boom)(1.0)
        assert active_tags() == ()


class TestHigherOrderFunctions:
    def test_curried_function(self):
        # d/dx (y -> x*y) = (y -> y)
        dfn = derivative(lambda x: lambda y: x * y)(3)
        assert callable(dfn)
        assert dfn(5) == 5
        assert dfn(-2.5) == -2.5

    def test_curried_function_nonlinear(self):
        dfn = derivative(lambda x: lambda y: sin(x * y))(1.0)
        assert dfn(2.0) == pytest.approx(2.0 * math.cos(2.0))

    def test_function_returning_function_of_two_args(self):
        dfn = derivative(lambda x: lambda y, z: x * x * y + z)(3)
        assert dfn.arity == Arity(2, 2)
        assert dfn(2, 100) == 12

    def test_differentiating_a_returned_function(self):
        g = derivative(lambda x: lambda y: x * y * y)(5)
        assert derivative(g)(3) == 6

    def test_dict_valued_function(self):
        result = derivative(lambda x: {"sq": x * x, "lin": 4 * x})(3)
        assert result == {"sq": 6, "lin": 4}


class TestPerturbationConfusion:
    def test_classic_nested_derivative(self):
        # d/dx [x * (d/dy (x + y))|y=1] at x=1 is 1; confusing the two
        # infinitesimals gives 2.
        inner = lambda x: derivative(lambda y: x + y)(1)
        assert derivative(lambda x: x * inner(x))(1) == 1

    def test_nested_closure_over_outer_variable(self):
        # d/dx [ d/dy (x*y) ] = d/dx [x] = 1
        assert derivative(lambda x: derivative(lambda y: x * y)(2.0))(3.0) == 1

    def test_constant_inner_function(self):
        # g(y) = x is constant in y, so x * g'(0) = 0 for every x
        assert derivative(lambda x: x * derivative(lambda y: x)(0))(1.0) == 0

    @staticmethod
    def _shift():
        # f(x) = g -> (y -> g(x + y)); its derivative at 0 maps g to g'
        return lambda x: lambda g: lambda y: g(x + y)

    def test_self_application_depth_2(self):
        f_hat = D(self._shift())(0)
        assert f_hat(f_hat(exp))(1) == pytest.approx(math.e)

    def test_self_application_depth_3(self):
        f_hat = D(self._shift())(0)
        assert f_hat(f_hat(f_hat(exp)))(1) == pytest.approx(math.e)

    def test_self_application_depth_3_sin(self):
        # third derivative of sin is -cos; a sign or count error shows up here
        f_hat = D(self._shift())(0)
        assert f_hat(f_hat(f_hat(sin)))(1.0) == pytest.approx(-math.cos(1.0))

    def test_self_application_depth_4(self):
        f_hat = D(self._shift())(0)
        assert f_hat(f_hat(f_hat(f_hat(sin))))(0.7) == pytest.approx(math.sin(0.7))

    @pytest.mark.parametrize("depth", [1, 2, 3, 4, 5])
    def test_self_application_matches_power_rule(self, depth):
        # (f_hat^depth)(y -> y^6) = y -> 6!/(6-depth)! * y^(6-depth)
        f_hat = D(self._shift())(0)
        g = lambda y: y ** 6
        for _ in range(depth):
            g = f_hat(g)
        expected = math.factorial(6) // math.factorial(6 - depth) * 2 ** (6 - depth)
        assert g(2) == expected

    def test_self_application_mixed_with_outer_derivative(self):
        # d/dz [ f_hat(f_hat(y -> z * y^3))(1) ] = d/dz [6z] = 6
        f_hat = D(self._shift())(0)
        outer = derivative(lambda z: f_hat(f_hat(lambda y: z * y ** 3))(1))
        assert outer(4.0) == pytest.approx(6.0)

    def test_no_tags_leak_into_results(self):
        f_hat = D(self._shift())(0)
        result = f_hat(f_hat(exp))(1)
        assert not isinstance(result, Differential)
        assert active_tags() == ()


class TestFunctionAdapters:
    def test_extract_tangent_fn_ordinary_call(self):
        t = fresh_tag()
        x = bundle(3, 1, t)
        g = extract_tangent_fn(lambda y: x * y, t)
        assert g(4) == 4
        assert not tag_active(t)

    def test_extract_tangent_fn_reentrant_call(self):
        # the argument carries its own ε_t; only the closure's ε_t is extracted
        t = fresh_tag()
        x = bundle(3, 1, t)
        g = extract_tangent_fn(lambda y: x * y, t)
        with active_tag(t):
            result = g(bundle(4, 1, t))
        assert extract_tangent(result, t) == 1
        assert result - Differential.epsilon(t) == 4

    def test_extract_tangent_fn_preserves_arity(self):
        t = fresh_tag()
        g = extract_tangent_fn(lambda a, b, c=0: a, t)
        assert g.arity == Arity(2, 3)

    def test_extract_tangent_of_callable_is_wrapper(self):
        t = fresh_tag()
        x = bundle(2, 1, t)
        g = extract_tangent(lambda y: x * x * y, t)
        assert g(10) == 40

    def test_replace_tag_fn_ordinary_call(self):
        a, b = fresh_tag(), fresh_tag()
        f = lambda y: y + 2 * Differential.epsilon(a)
        g = replace_tag_fn(f, a, b)
        result = g(1)
        assert extract_tangent(result, b) == 2
        assert extract_tangent(result, a) == 0

    def test_replace_tag_fn_reentrant_call(self):
        a, b = fresh_tag(), fresh_tag()
        f = lambda y: y + 2 * Differential.epsilon(a)
        g = replace_tag_fn(f, a, b)
        with active_tag(a):
            result = g(bundle(1, 5, a))
        # the argument's ε_a survives, the function's own ε_a became ε_b
        assert extract_tangent(result, a) == 5
        assert extract_tangent(result, b) == 2

    def test_replace_tag_fn_preserves_arity_and_name(self):
        a, b = fresh_tag(), fresh_tag()
        f = Function(lambda x, y: x, name="first")
        g = replace_tag_fn(f, a, b)
        assert g.arity == Arity(2, 2)
        assert g.name == "first"

    def test_adapters_accept_callable_objects(self):
        class Scale:
            def __init__(self, k):
                self.k = k

            def __call__(self, y):
                return self.k * y

        t = fresh_tag()
        g = extract_tangent_fn(Scale(bundle(2.0, 3.0, t)), t)
        assert g(np.float64(2.0)) == pytest.approx(6.0)
        assert g.arity == Arity(1, 1)

    def test_derivative_of_structure_of_functions(self):
        dfs = derivative(lambda x: up(lambda y: x * y, lambda y: x * x + y))(3)
        assert dfs(2) == up(2, 6)

    def test_tangent_of_covector_of_functions(self):
        dfs = derivative(lambda x: down(lambda y: x * y))(1)
        assert dfs(7) == down(7)
