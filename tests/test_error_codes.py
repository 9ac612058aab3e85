"""Test error codes raised and returned by the calculator layers."""

import unittest

from scicalc_pkg.api import calculate, evaluate
from scicalc_pkg.memory import MemoryRegister
from scicalc_pkg.parser import parse_expression
from scicalc_pkg.tokenizer import tokenize
from scicalc_pkg.types import (
    CalculatorError,
    InvalidOperand,
    LexError,
    MathError,
    MathErrorKind,
    ParseError,
)


class TestErrorCodes(unittest.TestCase):
    """Test that functions raise appropriate error codes."""

    def assertCode(self, func, expression, error_type, code):
        try:
            func(expression)
            self.fail(f"Should have raised {error_type.__name__} for {expression!r}")
        except error_type as e:
            self.assertEqual(e.code, code, f"Expected {code}, got {e.code}")
            self.assertIsInstance(e, CalculatorError)

    def test_lex_error_codes(self):
        self.assertCode(tokenize, "2 & 3", LexError, "INVALID_CHARACTER")
        self.assertCode(tokenize, "1..2", LexError, "MALFORMED_NUMBER")
        self.assertCode(tokenize, "x+1", LexError, "UNKNOWN_NAME")
        self.assertCode(tokenize, "1" * 10001, LexError, "TOO_LONG")

    def test_parse_error_codes(self):
        self.assertCode(parse_expression, "(1+2", ParseError, "UNBALANCED_PARENS")
        self.assertCode(parse_expression, "1+", ParseError, "MISSING_OPERAND")
        self.assertCode(parse_expression, "cos()", ParseError, "EMPTY_ARGUMENT")
        self.assertCode(parse_expression, "1 2", ParseError, "UNEXPECTED_TOKEN")
        self.assertCode(parse_expression, "", ParseError, "EMPTY_EXPRESSION")
        self.assertCode(parse_expression, "(" * 200 + "1" + ")" * 200, ParseError, "TOO_DEEP")

    def test_math_error_codes(self):
        cases = {
            "1/0": MathErrorKind.DIVISION_BY_ZERO,
            "ln(0)": MathErrorKind.DOMAIN_ERROR,
            "(-1)^0.5": MathErrorKind.COMPLEX_RESULT,
            "factorial(200)": MathErrorKind.OVERFLOW,
        }
        for expression, kind in cases.items():
            with self.subTest(expression=expression):
                self.assertCode(calculate, expression, MathError, kind.value)

    def test_invalid_operand_code(self):
        self.assertCode(MemoryRegister().store, float("inf"), InvalidOperand, "INVALID_OPERAND")

    def test_evaluation_error_code(self):
        """Test that evaluation errors include error information."""
        result = evaluate("sqrt(-4)")
        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "DOMAIN_ERROR")
        self.assertIn("Domain error", result.error)

    def test_error_position_in_message(self):
        result = evaluate("2+3)")
        self.assertIn("(at position 3)", result.error)


if __name__ == "__main__":
    unittest.main()
