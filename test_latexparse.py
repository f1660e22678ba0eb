"""Tests for latexparse module."""

import logging

import pytest
from latexparse import (
    InvalidEquationFormat, collect_terms, format_polynomial, normalize_latex,
    parse_latex_equation, parse_polynomial, to_dense,
)


class TestNormalize:
    def test_braced_exponent(self):
        assert normalize_latex("x^{2} + 1") == "x^2+1"

    def test_cdot_and_times(self):
        assert normalize_latex(r"3 \cdot x + 2 \times x") == "3*x+2*x"

    def test_left_right_and_spacing(self):
        assert normalize_latex(r"\left{x\right}\,+\;1") == "x+1"


class TestCollectTerms:
    def test_sparse_map(self):
        assert collect_terms("3x^4-x+7") == {4: 3.0, 1: -1.0, 0: 7.0}

    def test_repeated_powers_are_summed(self):
        assert collect_terms("x^2+2x^2-x") == {2: 3.0, 1: -1.0}

    def test_sign_runs(self):
        assert collect_terms("--3") == {0: 3.0}
        assert collect_terms("x+-2") == {1: 1.0, 0: -2.0}

    def test_explicit_multiplication(self):
        assert collect_terms("2.5*x^3") == {3: 2.5}

    def test_other_variable(self):
        assert collect_terms("t^2-4", variable="t") == {2: 1.0, 0: -4.0}

    def test_bad_term(self):
        with pytest.raises(InvalidEquationFormat):
            collect_terms("2y")

    def test_dangling_sign(self):
        with pytest.raises(InvalidEquationFormat):
            collect_terms("x+")

    def test_to_dense(self):
        assert to_dense({3: 2.0, 0: -1.0}) == [2.0, 0.0, 0.0, -1.0]


class TestParseLatexEquation:
    def test_quadratic(self):
        result = parse_latex_equation("x^{2} - 5x + 6 = 0")
        assert result == {'degree': 2, 'coefficients': [1.0, -5.0, 6.0], 'type': 'quadratic'}

    def test_cdot(self):
        result = parse_latex_equation(r"3x^{2} + 2 \cdot x - 5 = 0")
        assert result['coefficients'] == [3.0, 2.0, -5.0]

    def test_sparse_high_degree(self):
        result = parse_latex_equation("x^5 - 1 = 0")
        assert result['degree'] == 5
        assert result['type'] == 'quintic'
        assert result['coefficients'] == [1.0, 0.0, 0.0, 0.0, 0.0, -1.0]

    def test_degree_beyond_names(self):
        assert parse_latex_equation("x^7 + x = 0")['type'] == 'polynomial'

    def test_linear(self):
        result = parse_latex_equation("4x - 8 = 0")
        assert result['type'] == 'linear'
        assert result['coefficients'] == [4.0, -8.0]

    def test_missing_equals(self):
        with pytest.raises(InvalidEquationFormat):
            parse_latex_equation("x^2 - 1")

    def test_two_equals(self):
        with pytest.raises(InvalidEquationFormat):
            parse_latex_equation("x = 1 = 2")

    def test_empty_left_side(self):
        with pytest.raises(InvalidEquationFormat):
            parse_latex_equation("= 0")

    def test_unreadable_term(self):
        with pytest.raises(InvalidEquationFormat):
            parse_latex_equation("sin(x) = 0")

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_latex_equation("x^2")

    def test_nonzero_right_side_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger='latexparse'):
            result = parse_latex_equation("x^2 = 4")
        assert result['coefficients'] == [1.0, 0.0, 0.0]
        assert 'right-hand side' in caplog.text


class TestParsePolynomial:
    def test_basic(self):
        assert parse_polynomial("2x^3 - x + 4") == [2.0, 0.0, -1.0, 4.0]

    def test_case_and_spaces(self):
        assert parse_polynomial("  X^2 + 2 X + 1 ") == [1.0, 2.0, 1.0]

    def test_constant(self):
        assert parse_polynomial("7.5") == [7.5]

    def test_leading_zero_trimmed(self):
        assert parse_polynomial("0x^3 + x - 1") == [1.0, -1.0]

    def test_invalid(self):
        assert parse_polynomial("") is None
        assert parse_polynomial(None) is None
        assert parse_polynomial("abc") is None
        assert parse_polynomial("x^2 + sin(x)") is None


class TestFormatPolynomial:
    def test_unit_coefficients(self):
        assert format_polynomial([1, -3, 2]) == "x^2 - 3x + 2"
        assert format_polynomial([-1, 0, 1]) == "-x^2 + 1"

    def test_fractions(self):
        assert format_polynomial([1, 0, -2.5, 1]) == "x^3 - 2.5x + 1"

    def test_digits_are_not_truncated(self):
        assert format_polynomial([1, 123456.789]) == "x + 123456.789"
        assert format_polynomial([1, 2.5e-7]) == "x + 0.00000025"

    def test_large_coefficient_has_no_exponent(self):
        assert format_polynomial([1e20, 0]) == "100000000000000000000x"

    def test_zero(self):
        assert format_polynomial([]) == "0"
        assert format_polynomial([0, 0]) == "0"

    def test_constant_one(self):
        assert format_polynomial([0, 1]) == "1"

    @pytest.mark.parametrize("coefficients", [
        [1.0, -3.0, 2.0],
        [2.0, 0.0, -1.0, 4.0],
        [-1.0, 0.5, 0.0, 0.0, 3.0],
        [1.0, 0.0, 0.0, 0.0, 0.0, -1.0],
        [1 / 3, 1.0],
        [1.0, 123456.789],
        [2.0 / 7, -1e-7, 5.0],
    ])
    def test_parse_reads_back_format(self, coefficients):
        assert parse_polynomial(format_polynomial(coefficients)) == coefficients
