"""Pytest configuration and fixtures."""

import pytest

from tagged_ad import up, exp, sin, cos
from tagged_ad.core.tags import active_tags


@pytest.fixture(autouse=True)
def no_leaked_scopes():
    """Every test must leave the active-tag stack empty."""
    yield
    assert active_tags() == ()


@pytest.fixture
def cube():
    return lambda x: x ** 3


@pytest.fixture
def xyz():
    """f(x, y, z) = x*y*z."""
    return lambda x, y, z: x * y * z


@pytest.fixture
def rotating_field():
    """F(x, y, z) = (y, z, x), whose curl is the constant (-1, -1, -1)."""
    return lambda x, y, z: up(y, z, x)


@pytest.fixture
def smooth_scalar():
    """Scalar field on R^3 taking one up argument."""
    return lambda v: v[0] ** 2 * sin(v[1]) + exp(v[0] * v[2]) - v[1] * v[2] ** 3


@pytest.fixture
def smooth_field():
    """Vector field R^3 -> R^3 taking one up argument."""
    return lambda v: up(sin(v[1] * v[2]), v[0] ** 2 * cos(v[2]), exp(v[0]) * v[1])


@pytest.fixture(params=[-1.3, -0.2, 0.5, 1.7, 2.4])
def point(request):
    """Sample points for pointwise identities."""
    return request.param


@pytest.fixture(params=[(0.3, -1.1, 0.8), (1.5, 0.4, -0.6), (-0.7, 2.0, 1.2)])
def point3(request):
    return up(*request.param)
