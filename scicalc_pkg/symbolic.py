"""Exact rendering of expression trees through SymPy.

The numeric evaluator always works in doubles. For display, the same tree
can be rebuilt as a SymPy expression so results such as ``sqrt(8)`` or
``sin(60)`` (degrees) can also be shown exactly: ``2×√(2)``, ``√(3)/2``.
Only trees that already evaluated numerically are rendered here.
"""

from __future__ import annotations

from fractions import Fraction

import sympy as sp

from . import config
from .evaluator import EvaluationContext
from .formatter import prettify_expr
from .logging_config import get_logger
from .nodes import BinaryOp, Constant, Literal, Negation, Node, UnaryFunction, left_spine
from .parser import parse_expression

logger = get_logger("symbolic")

SYMPY_CONSTANTS = {
    "π": sp.pi,
    "e": sp.E,
    "φ": sp.GoldenRatio,
}

# Exact rational powers beyond this are never short enough to print
MAX_EXACT_EXPONENT = 1000
# Numerators and denominators wider than this are never short enough to print
MAX_EXACT_BITS = 4096


class ExactFormUnavailable(Exception):
    """Raised when a tree has no meaningful exact SymPy counterpart."""


def _bits(value: sp.Rational) -> int:
    return max(int(value.p).bit_length(), int(value.q).bit_length())


def _truncated_mod(left: sp.Expr, right: sp.Expr) -> sp.Expr:
    # fmod semantics: the remainder takes the sign of the dividend
    quotient = left / right
    if quotient.is_nonnegative is None:
        raise ExactFormUnavailable("cannot decide the sign of the quotient")
    truncated = sp.floor(quotient) if quotient.is_nonnegative else sp.ceiling(quotient)
    return left - right * truncated


def _function_to_sympy(name: str, argument: sp.Expr, context: EvaluationContext) -> sp.Expr:
    degree = sp.pi / 180
    if name in ("sin", "cos", "tan"):
        func = getattr(sp, name)
        return func(argument * degree) if context.degrees else func(argument)
    if name in ("asin", "acos", "atan"):
        result = getattr(sp, name)(argument)
        return result / degree if context.degrees else result
    if name in ("sinh", "cosh", "tanh", "exp", "sqrt"):
        return getattr(sp, name)(argument)
    if name == "log":
        return sp.log(argument, 10)
    if name == "ln":
        return sp.log(argument)
    if name == "cbrt":
        return sp.real_root(argument, 3)
    if name == "abs":
        return sp.Abs(argument)
    if name == "factorial":
        return sp.factorial(sp.Integer(round(float(argument))))
    raise ExactFormUnavailable(f"no exact form for {name}")


def _binary_to_sympy(operator: str, left: sp.Expr, right: sp.Expr) -> sp.Expr:
    if operator == "*":
        result = left * right
    elif operator == "/":
        result = left / right
    elif operator == "^":
        if right.is_Rational and abs(right) > MAX_EXACT_EXPONENT:
            raise ExactFormUnavailable("exponent too large for an exact form")
        if left.is_Rational and right.is_Rational and _bits(left) * abs(float(right)) > MAX_EXACT_BITS:
            raise ExactFormUnavailable("power too large for an exact form")
        result = sp.Pow(left, right)
    elif operator == "mod":
        result = _truncated_mod(left, right)
    else:
        raise ExactFormUnavailable(f"unsupported operator {operator!r}")
    if result.is_Rational and _bits(result) > MAX_EXACT_BITS:
        raise ExactFormUnavailable("exact value too large")
    return result


def to_sympy(tree: Node, context: EvaluationContext | None = None) -> sp.Expr:
    """Convert an expression tree to an exact SymPy expression.

    Number literals become exact rationals (``0.1`` -> ``1/10``). Runs of
    ``+``/``-`` along a left-deep chain are summed in one ``Add``.

    Raises:
        ExactFormUnavailable: If part of the tree cannot be represented exactly
    """
    if context is None:
        context = EvaluationContext()

    if isinstance(tree, Literal):
        fraction = Fraction(tree.text)
        return sp.Rational(fraction.numerator, fraction.denominator)
    if isinstance(tree, Constant):
        return SYMPY_CONSTANTS[tree.symbol]
    if isinstance(tree, Negation):
        return -to_sympy(tree.operand, context)
    if isinstance(tree, UnaryFunction):
        return _function_to_sympy(tree.function, to_sympy(tree.argument, context), context)
    if not isinstance(tree, BinaryOp):
        raise ExactFormUnavailable(f"unsupported node {tree!r}")

    base, chain = left_spine(tree)
    value = to_sympy(base, context)
    terms: list[sp.Expr] | None = None
    for node in chain:
        right = to_sympy(node.right, context)
        if node.operator in ("+", "-"):
            if terms is None:
                terms = [value]
            terms.append(right if node.operator == "+" else -right)
            continue
        if terms is not None:
            value, terms = sp.Add(*terms), None
        value = _binary_to_sympy(node.operator, value, right)
    if terms is not None:
        value = sp.Add(*terms)
    return value


def exact_form(
    expression: str, degree_mode: bool | None = None, numeric_display: str | None = None
) -> str | None:
    """Return a prettified exact form of an expression, or None.

    None is returned when the exact form is no more informative than the
    numeric display (same text, still a float, or an unevaluated function
    call), when it contains non-finite parts, or when it is longer than
    ``config.EXACT_MAX_LENGTH``.

    Args:
        expression: Expression that has already evaluated successfully
        degree_mode: Angle mode (default from config)
        numeric_display: The formatted numeric result, for comparison
    """
    if degree_mode is None:
        degree_mode = config.DEFAULT_DEGREE_MODE
    context = EvaluationContext.from_degree_mode(degree_mode)
    try:
        expr = to_sympy(parse_expression(expression), context)
    except (ExactFormUnavailable, ValueError, TypeError, ArithmeticError, NotImplementedError) as e:
        logger.debug("No exact form for %r: %s", expression, e)
        return None

    if expr.is_Float or expr.has(sp.zoo, sp.nan, sp.oo, -sp.oo):
        return None
    # Unevaluated calls such as sin(90) or log(2) say nothing the number does not
    if expr.atoms(sp.Function):
        return None
    if any(_bits(number) > MAX_EXACT_BITS for number in expr.atoms(sp.Rational)):
        return None
    try:
        text = prettify_expr(str(expr))
    except ValueError as e:
        # int -> str conversion limit on huge exact values
        logger.debug("Exact form of %r too large to print: %s", expression, e)
        return None
    if text == numeric_display or len(text) > config.EXACT_MAX_LENGTH:
        return None
    return text
