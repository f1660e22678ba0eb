"""Tests for calculus module."""

import math

import pytest
from scipy.integrate import quad
from calculus import (
    definite_integral, derivative_at, evaluate_limit, factorial,
    find_critical_points, second_derivative_at, simpsons_rule,
    taylor_atan, taylor_cos, taylor_exp, taylor_ln, taylor_sin,
    trapezoidal_rule,
)


class TestLimits:
    def test_removable_singularity(self):
        assert evaluate_limit("sin(x)/x", 0) == 1.0

    def test_hole_in_rational_function(self):
        assert evaluate_limit("(x^2 - 1)/(x - 1)", 1) == 2.0

    def test_continuous_point(self):
        assert evaluate_limit("x^2 + 1", 2) == 5.0

    def test_one_sided_infinities(self):
        assert evaluate_limit("1/x", 0, direction='right') == math.inf
        assert evaluate_limit("1/x", 0, direction='left') == -math.inf

    def test_disagreeing_sides_is_nan(self):
        assert math.isnan(evaluate_limit("1/x", 0))

    def test_same_infinity_both_sides(self):
        assert evaluate_limit("1/x^2", 0) == math.inf

    def test_oscillation_is_nan(self):
        assert math.isnan(evaluate_limit("sin(1/x)", 0))

    def test_at_infinity(self):
        assert evaluate_limit("1/x", math.inf) == 0.0
        assert evaluate_limit("(2x + 1)/x", math.inf) == 2.0
        assert evaluate_limit("x^2", math.inf) == math.inf
        assert evaluate_limit("x^3", -math.inf) == -math.inf

    def test_other_variable(self):
        assert evaluate_limit("(1 + t)^(1/t)", 0, variable='t', tolerance=1e-3) == pytest.approx(math.e, abs=1e-3)

    def test_bad_direction(self):
        with pytest.raises(ValueError):
            evaluate_limit("x", 0, direction='up')

    def test_unparseable_is_nan(self):
        assert math.isnan(evaluate_limit("2 +", 0))


class TestDerivatives:
    def test_polynomial(self):
        result = derivative_at("x^2", 3)
        assert result['value'] == pytest.approx(6.0, abs=1e-6)
        assert result['point'] == 3
        assert result['method'] == 'Central difference'

    def test_trig(self):
        assert derivative_at("sin(x)", 0)['value'] == pytest.approx(1.0, abs=1e-6)

    def test_second_derivative(self):
        assert second_derivative_at(lambda x: x ** 3, 2) == pytest.approx(12.0, abs=1e-3)


class TestCriticalPoints:
    def test_parabola_minimum(self):
        points = find_critical_points("x^2 - 4x")
        assert len(points) == 1
        assert points[0]['x'] == pytest.approx(2.0, abs=1e-5)
        assert points[0]['y'] == pytest.approx(-4.0, abs=1e-6)
        assert points[0]['type'] == 'local minimum'

    def test_cubic_max_and_min(self):
        points = find_critical_points("x^3 - 3x", -5, 5)
        assert [p['type'] for p in points] == ['local maximum', 'local minimum']
        assert points[0]['x'] == pytest.approx(-1.0, abs=1e-5)
        assert points[1]['x'] == pytest.approx(1.0, abs=1e-5)

    def test_monotonic_has_none(self):
        assert find_critical_points("exp(x)", -3, 3) == []


class TestIntegration:
    def test_simpson_polynomial(self):
        result = definite_integral("x^2", 0, 3)
        assert result['value'] == pytest.approx(9.0, abs=1e-9)
        assert result['method'] == "Simpson's Rule"
        assert result['lower_bound'] == 0
        assert result['upper_bound'] == 3

    def test_sine(self):
        assert definite_integral("sin(x)", 0, math.pi)['value'] == pytest.approx(2.0, abs=1e-9)

    def test_odd_interval_count_rounded_up(self):
        assert definite_integral("x", 0, 1, n=5)['intervals'] == 6

    def test_reversed_bounds(self):
        assert definite_integral("x", 1, 0)['value'] == pytest.approx(-0.5)

    def test_trapezoidal(self):
        assert trapezoidal_rule(lambda x: x, 0, 1, 10) == pytest.approx(0.5)

    def test_simpson_exact_for_cubics(self):
        assert simpsons_rule(lambda x: x ** 3, 0, 2, 3) == pytest.approx(4.0)

    def test_simpson_matches_adaptive_quadrature(self):
        expected, _ = quad(math.exp, 0, 1)
        assert simpsons_rule(math.exp, 0, 1, 100) == pytest.approx(expected, abs=1e-9)

    def test_odd_and_even_counts_agree(self):
        f = lambda x: math.sin(x) ** 2
        assert simpsons_rule(f, 0, 2, 7) == simpsons_rule(f, 0, 2, 8)

    def test_trapezoidal_converges(self):
        coarse = abs(trapezoidal_rule(math.exp, 0, 1, 10) - (math.e - 1))
        fine = abs(trapezoidal_rule(math.exp, 0, 1, 100) - (math.e - 1))
        assert fine < coarse / 50


class TestTaylor:
    def test_factorial(self):
        assert factorial(0) == 1.0
        assert factorial(5) == 120.0
        assert math.isnan(factorial(-1))

    def test_sin_at_zero(self):
        assert taylor_sin(0.5, 0, 5) == pytest.approx(math.sin(0.5), abs=1e-10)

    def test_sin_shifted_center(self):
        assert taylor_sin(1.2, 1.0, 6) == pytest.approx(math.sin(1.2), abs=1e-10)

    def test_cos_shifted_center(self):
        assert taylor_cos(2.0, 1.5, 8) == pytest.approx(math.cos(2.0), abs=1e-10)

    def test_exp(self):
        assert taylor_exp(1.0, 0.0, 20) == pytest.approx(math.e, abs=1e-12)
        assert taylor_exp(2.1, 2.0, 10) == pytest.approx(math.exp(2.1), abs=1e-10)

    def test_ln(self):
        assert taylor_ln(0.5, 40) == pytest.approx(math.log(1.5), abs=1e-10)

    def test_atan(self):
        assert taylor_atan(0.5, 30) == pytest.approx(math.atan(0.5), abs=1e-10)
