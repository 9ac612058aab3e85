"""Unit tests for parser module."""

import unittest

from scicalc_pkg.api import calculate
from scicalc_pkg.config import MAX_EXPRESSION_DEPTH
from scicalc_pkg.nodes import BinaryOp, Constant, Literal, Negation, UnaryFunction, to_infix
from scicalc_pkg.parser import parse, parse_expression
from scicalc_pkg.tokenizer import Token, TokenKind
from scicalc_pkg.types import ParseError


def infix(expression):
    return to_infix(parse_expression(expression))


class TestPrecedence(unittest.TestCase):
    """Test operator binding and associativity."""

    def test_multiplication_binds_tighter(self):
        self.assertEqual(infix("3+4*2"), "(3 + (4 * 2))")

    def test_power_is_right_associative(self):
        self.assertEqual(infix("2^3^2"), "(2 ^ (3 ^ 2))")

    def test_subtraction_is_left_associative(self):
        self.assertEqual(infix("10-4-3"), "((10 - 4) - 3)")
        self.assertEqual(infix("8/4/2"), "((8 / 4) / 2)")

    def test_unary_minus_below_power(self):
        self.assertEqual(infix("-2^2"), "(-(2 ^ 2))")
        self.assertEqual(infix("2^-1"), "(2 ^ (-1))")

    def test_unary_minus_above_multiplication(self):
        self.assertEqual(infix("-3*2"), "((-3) * 2)")
        self.assertEqual(infix("2*-3"), "(2 * (-3))")
        self.assertEqual(infix("--2"), "(-(-2))")

    def test_unary_minus_after_paren(self):
        self.assertEqual(infix("(-2)"), "(-2)")

    def test_mod_shares_multiplication_level(self):
        self.assertEqual(infix("7mod(3)+1"), "((7 mod 3) + 1)")
        self.assertEqual(infix("8/2mod(3)"), "((8 / 2) mod 3)")

    def test_function_call_is_an_atom(self):
        self.assertEqual(infix("sin(30)^2"), "(sin(30) ^ 2)")
        self.assertEqual(infix("√(4)*2"), "(sqrt(4) * 2)")

    def test_tree_nodes(self):
        tree = parse_expression("-sin(π)+1.5")
        self.assertEqual(
            tree,
            BinaryOp(
                "+",
                Negation(UnaryFunction("sin", Constant("π"))),
                Literal(1.5, "1.5"),
            ),
        )

    def test_parse_cache_returns_same_tree(self):
        self.assertIs(parse_expression("1+2*3"), parse_expression("1+2*3"))


class TestParseErrors(unittest.TestCase):
    """Test structural validation."""

    def assertParseError(self, expression, code):
        with self.assertRaises(ParseError) as ctx:
            parse_expression(expression)
        self.assertEqual(ctx.exception.code, code, ctx.exception.message)
        return ctx.exception

    def test_unclosed_paren(self):
        error = self.assertParseError("((2+3", "UNBALANCED_PARENS")
        self.assertIsNotNone(error.position)

    def test_extra_close_paren(self):
        error = self.assertParseError("2+3)", "UNBALANCED_PARENS")
        self.assertEqual(error.position, 3)
        self.assertParseError(")", "UNBALANCED_PARENS")

    def test_missing_operand(self):
        error = self.assertParseError("2+", "MISSING_OPERAND")
        self.assertEqual(error.reason, "Missing operand after '+'")
        self.assertEqual(error.position, 2)
        self.assertParseError("*3", "MISSING_OPERAND")
        self.assertParseError("(2+)", "MISSING_OPERAND")
        self.assertParseError("2*/3", "MISSING_OPERAND")

    def test_unary_plus_not_supported(self):
        self.assertParseError("+2", "MISSING_OPERAND")

    def test_empty_argument(self):
        self.assertParseError("sin()", "EMPTY_ARGUMENT")
        self.assertParseError("2*()", "EMPTY_ARGUMENT")

    def test_no_implicit_multiplication(self):
        self.assertParseError("2 3", "UNEXPECTED_TOKEN")
        self.assertParseError("2π", "UNEXPECTED_TOKEN")
        self.assertParseError("(2)(3)", "UNEXPECTED_TOKEN")
        self.assertParseError("2sin(30)", "UNEXPECTED_TOKEN")

    def test_empty_expression(self):
        self.assertParseError("", "EMPTY_EXPRESSION")
        self.assertParseError("   ", "EMPTY_EXPRESSION")

    def test_function_token_without_paren(self):
        tokens = (
            Token(TokenKind.FUNCTION, "sin", 0),
            Token(TokenKind.NUMBER, "3", 3, 3.0),
        )
        with self.assertRaises(ParseError) as ctx:
            parse(tokens)
        self.assertEqual(ctx.exception.code, "MISSING_OPERAND")


class TestNestingLimits(unittest.TestCase):
    """Test that nesting depth is bounded."""

    def test_nesting_within_limit(self):
        depth = MAX_EXPRESSION_DEPTH // 2
        tree = parse_expression("(" * depth + "1" + ")" * depth)
        self.assertEqual(tree, Literal(1.0, "1"))

    def test_deep_parentheses(self):
        depth = MAX_EXPRESSION_DEPTH + 1
        with self.assertRaises(ParseError) as ctx:
            parse_expression("(" * depth + "1" + ")" * depth)
        self.assertEqual(ctx.exception.code, "TOO_DEEP")

    def test_deep_unary_minus(self):
        with self.assertRaises(ParseError) as ctx:
            parse_expression("-" * (MAX_EXPRESSION_DEPTH + 1) + "1")
        self.assertEqual(ctx.exception.code, "TOO_DEEP")

    def test_long_power_tower(self):
        with self.assertRaises(ParseError) as ctx:
            parse_expression("2^" * (MAX_EXPRESSION_DEPTH + 1) + "2")
        self.assertEqual(ctx.exception.code, "TOO_DEEP")

    def test_long_flat_chain(self):
        tree = parse_expression("+".join(["1"] * 1500))
        self.assertIsInstance(tree, BinaryOp)
        self.assertEqual(calculate("+".join(["1"] * 1500)), 1500.0)
        self.assertTrue(infix("1-" * 1200 + "1").startswith("(" * 1200 + "1 - 1)"))

    def test_nesting_inside_a_long_chain(self):
        chain = "+".join(["1"] * 1000)
        self.assertEqual(calculate(f"({chain})*2"), 2000.0)
        with self.assertRaises(ParseError) as ctx:
            parse_expression(chain + "+" + "(" * (MAX_EXPRESSION_DEPTH + 1) + "1" + ")" * (MAX_EXPRESSION_DEPTH + 1))
        self.assertEqual(ctx.exception.code, "TOO_DEEP")


if __name__ == "__main__":
    unittest.main()
