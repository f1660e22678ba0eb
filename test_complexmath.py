"""Tests for complexmath module."""

import math

import pytest
from complexmath import (
    Complex, ZERO, ONE, clean, complex_abs, complex_add, complex_cbrt,
    complex_conjugate, complex_div, complex_mul, complex_pow, complex_scale,
    complex_sqrt, complex_sub, eval_poly, format_complex, format_roots,
    is_essentially_real, is_essentially_zero,
)


class TestArithmetic:
    def test_add_sub(self):
        a, b = Complex(1, 2), Complex(3, -5)
        assert complex_add(a, b) == Complex(4, -3)
        assert complex_sub(a, b) == Complex(-2, 7)

    def test_mul(self):
        # (1 + 2i)(3 - i) = 5 + 5i
        assert complex_mul(Complex(1, 2), Complex(3, -1)) == Complex(5, 5)

    def test_i_squared(self):
        i = Complex(0, 1)
        assert complex_mul(i, i) == Complex(-1, 0)

    def test_div(self):
        # (5 + 5i) / (1 + 2i) = 3 - i
        q = complex_div(Complex(5, 5), Complex(1, 2))
        assert q.re == pytest.approx(3)
        assert q.im == pytest.approx(-1)

    def test_div_by_zero_is_nan(self):
        q = complex_div(Complex(1, 1), ZERO)
        assert math.isnan(q.re) and math.isnan(q.im)
        assert not q.is_finite()

    def test_scale_and_conjugate(self):
        assert complex_scale(Complex(1, -2), 3) == Complex(3, -6)
        assert complex_conjugate(Complex(1, -2)) == Complex(1, 2)

    def test_abs(self):
        assert complex_abs(Complex(3, 4)) == 5.0

    def test_operators(self):
        z = Complex(1, 1)
        assert z + 1 == Complex(2, 1)
        assert 1 - z == Complex(0, -1)
        assert 2 * z == Complex(2, 2)
        assert -z == Complex(-1, -1)
        assert abs(Complex(0, -2)) == 2.0

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            Complex(1, 1) + "a"

    def test_builtin_round_trip(self):
        z = Complex.from_builtin(complex(1.5, -2))
        assert z == Complex(1.5, -2)
        assert z.to_builtin() == complex(1.5, -2)


class TestPower:
    def test_integer_power(self):
        assert complex_pow(Complex(0, 1), 4) == ONE
        assert complex_pow(Complex(2, 0), 3) == Complex(8, 0)

    def test_zero_power(self):
        assert complex_pow(Complex(7, 3), 0) == ONE

    def test_negative_power(self):
        z = complex_pow(Complex(2, 0), -2)
        assert z.re == pytest.approx(0.25)

    def test_fractional_power_is_nan(self):
        assert math.isnan(complex_pow(Complex(2, 0), 0.5).re)


class TestRoots:
    def test_sqrt_negative_real_is_exact(self):
        assert complex_sqrt(Complex(-4)) == Complex(0.0, 2.0)
        assert complex_sqrt(Complex(-1)) == Complex(0.0, 1.0)

    def test_sqrt_positive_real(self):
        assert complex_sqrt(Complex(9)) == Complex(3.0, 0.0)

    def test_sqrt_principal_branch(self):
        # sqrt(-2i) = 1 - i
        z = complex_sqrt(Complex(0, -2))
        assert z.re == pytest.approx(1)
        assert z.im == pytest.approx(-1)
        assert z.re >= 0

    def test_sqrt_squares_back(self):
        z = Complex(3, -7)
        s = complex_sqrt(z)
        back = complex_mul(s, s)
        assert back.re == pytest.approx(z.re)
        assert back.im == pytest.approx(z.im)

    def test_cbrt_positive_real(self):
        z = complex_cbrt(Complex(27))
        assert z.re == pytest.approx(3)
        assert z.im == pytest.approx(0)

    def test_cbrt_negative_real_is_principal(self):
        z = complex_cbrt(Complex(-8))
        assert z.re == pytest.approx(1)
        assert z.im == pytest.approx(math.sqrt(3))

    def test_cbrt_zero(self):
        assert complex_cbrt(ZERO) == ZERO


class TestTolerance:
    def test_essentially_real(self):
        assert is_essentially_real(Complex(1, 1e-12))
        assert not is_essentially_real(Complex(1, 1e-3))

    def test_essentially_zero(self):
        assert is_essentially_zero(Complex(1e-12, -1e-12))
        assert Complex(1e-12, 0).is_zero()

    def test_clean(self):
        assert clean(Complex(1e-12, 2.0)) == Complex(0.0, 2.0)
        assert clean(Complex(1.5, -1e-11)) == Complex(1.5, 0.0)


class TestEvalPoly:
    def test_real_point(self):
        # x^2 - 3x + 2 at 5
        assert eval_poly([1, -3, 2], Complex(5)) == Complex(12, 0)

    def test_complex_point(self):
        # x^2 + 1 at i
        assert eval_poly([1, 0, 1], Complex(0, 1)) == ZERO


class TestFormat:
    def test_full(self):
        assert format_complex(Complex(3, 4)) == "3.0000 + 4.0000i"
        assert format_complex(Complex(3, -4)) == "3.0000 - 4.0000i"

    def test_zero(self):
        assert format_complex(ZERO) == "0"
        assert format_complex(Complex(1e-7, -1e-7)) == "0"

    def test_real_only(self):
        assert format_complex(Complex(-2.5, 1e-9)) == "-2.5000"

    def test_imaginary_only(self):
        assert format_complex(Complex(0, 1)) == "i"
        assert format_complex(Complex(0, -1)) == "-i"
        assert format_complex(Complex(0, 2)) == "2.0000i"

    def test_unit_imaginary_part(self):
        assert format_complex(Complex(2, 1)) == "2.0000 + i"
        assert format_complex(Complex(2, -1)) == "2.0000 - i"

    def test_nan_renders_once(self):
        assert format_complex(Complex(math.nan, math.nan)) == "nan"
        assert format_complex(complex_div(ONE, ZERO)) == "nan"
        assert format_complex(Complex(1, math.nan)) == "nan"

    def test_decimals(self):
        assert format_complex(Complex(1.23456, 0), decimals=2) == "1.23"

    def test_str_and_format_roots(self):
        assert str(Complex(0, 1)) == "i"
        assert format_roots([ONE, Complex(0, -1)]) == ["1.0000", "-i"]
