"""Tests for exact (SymPy) rendering."""

import pytest
import sympy as sp

from scicalc_pkg.api import evaluate, exact
from scicalc_pkg.evaluator import AngleMode, EvaluationContext
from scicalc_pkg.parser import parse_expression
from scicalc_pkg.symbolic import ExactFormUnavailable, exact_form, to_sympy

DEGREES = EvaluationContext(AngleMode.DEGREES)
RADIANS = EvaluationContext(AngleMode.RADIANS)


class TestToSympy:
    """Test tree -> SymPy conversion."""

    def test_literals_are_exact_rationals(self):
        assert to_sympy(parse_expression("0.5"), DEGREES) == sp.Rational(1, 2)
        assert to_sympy(parse_expression("0.1+0.2"), DEGREES) == sp.Rational(3, 10)
        assert to_sympy(parse_expression("1.0E10"), DEGREES) == sp.Integer(10**10)

    def test_constants(self):
        assert to_sympy(parse_expression("π"), DEGREES) == sp.pi
        assert to_sympy(parse_expression("φ"), DEGREES) == sp.GoldenRatio
        assert to_sympy(parse_expression("e"), DEGREES) == sp.E

    def test_degree_trig(self):
        assert to_sympy(parse_expression("sin(30)"), DEGREES) == sp.Rational(1, 2)
        assert to_sympy(parse_expression("asin(1)"), DEGREES) == 90

    def test_radian_trig(self):
        assert to_sympy(parse_expression("cos(π)"), RADIANS) == -1

    def test_mod_truncates_toward_zero(self):
        assert to_sympy(parse_expression("7mod(3)"), DEGREES) == 1
        assert to_sympy(parse_expression("-7mod(3)"), DEGREES) == -1

    def test_log_is_base_ten(self):
        assert sp.simplify(to_sympy(parse_expression("log(1000)"), DEGREES) - 3) == 0

    def test_huge_exponent_is_refused(self):
        with pytest.raises(ExactFormUnavailable):
            to_sympy(parse_expression("1^5000"), DEGREES)

    def test_huge_rational_is_refused(self):
        with pytest.raises(ExactFormUnavailable):
            to_sympy(parse_expression("((1/3)^1000)^1000"), DEGREES)
        with pytest.raises(ExactFormUnavailable):
            to_sympy(parse_expression("(2^999)*(2^999)*(2^999)*(2^999)*(2^999)"), DEGREES)


class TestExactForm:
    """Test which exact forms are shown."""

    def test_surds(self):
        assert exact("sqrt(8)") == "2×√(2)"
        assert exact("sqrt(2)") == "√(2)"

    def test_degree_sine(self):
        assert exact("sin(60)", True) == "√(3)/2"

    def test_fractions(self):
        assert exact("1/3") == "1/3"
        assert exact("0.1+0.2") == "3/10"

    def test_constants(self):
        assert exact("2*π") == "2×π"
        assert exact("φ^2") == "φ²"

    def test_same_as_numeric_is_hidden(self):
        assert exact("3+4*2") is None
        assert exact("ln(e)") is None

    def test_unevaluated_functions_are_hidden(self):
        assert exact("sin(90)", False) is None
        assert exact("ln(2)") is None

    def test_too_long_is_hidden(self):
        assert exact("factorial(100)") is None

    def test_huge_rational_is_hidden(self):
        assert exact("((1/3)^1000)^1000") is None
        result = evaluate("((1/3)^1000)^1000", exact=True)
        assert result.ok is True
        assert result.result == "0"
        assert result.exact is None

    def test_failed_evaluation_has_no_exact_form(self):
        assert exact("5/0") is None
        assert exact("sqrt(-4)") is None

    def test_exact_form_with_numeric_display(self):
        assert exact_form("1/4", True, numeric_display="0.25") == "1/4"
        assert exact_form("1/4", True, numeric_display="1/4") is None
