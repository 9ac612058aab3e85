"""Tree evaluation with angle-mode aware trigonometry and strict float policy.

Every operation either produces a finite double or raises :class:`MathError`.
NaN and infinities never escape: anything non-finite that is not covered by
a more specific rule becomes an OVERFLOW error.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .config import (
    CONSTANTS,
    DEFAULT_DEGREE_MODE,
    FACTORIAL_LIMIT,
    INTEGER_TOLERANCE,
    TAN_POLE_TOLERANCE,
)
from .nodes import BinaryOp, Constant, Literal, Negation, Node, UnaryFunction, left_spine
from .types import MathError, MathErrorKind


class AngleMode(Enum):
    DEGREES = "degrees"
    RADIANS = "radians"


@dataclass(frozen=True)
class EvaluationContext:
    """Per-call evaluation settings."""

    angle_mode: AngleMode = (
        AngleMode.DEGREES if DEFAULT_DEGREE_MODE else AngleMode.RADIANS
    )

    @classmethod
    def from_degree_mode(cls, degree_mode: bool) -> EvaluationContext:
        return cls(AngleMode.DEGREES if degree_mode else AngleMode.RADIANS)

    @property
    def degrees(self) -> bool:
        return self.angle_mode is AngleMode.DEGREES


def _fmt(value: float) -> str:
    return f"{value:.10g}"


def _division_by_zero(detail: str) -> MathError:
    return MathError(MathErrorKind.DIVISION_BY_ZERO, detail)


def _domain_error(detail: str) -> MathError:
    return MathError(MathErrorKind.DOMAIN_ERROR, detail)


def _overflow(detail: str) -> MathError:
    return MathError(MathErrorKind.OVERFLOW, detail)


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise _overflow(f"result of {what} is out of range")
    return value


# Exact values at multiples of 90 degrees, keyed by angle mod 360
_SIN_QUADRANTS = {0: 0.0, 90: 1.0, 180: 0.0, 270: -1.0}
_COS_QUADRANTS = {0: 1.0, 90: 0.0, 180: -1.0, 270: 0.0}


def _quadrant(degrees: float) -> int | None:
    """Return the angle mod 360 if it is an exact multiple of 90, else None."""
    reduced = math.fmod(degrees, 360.0)
    if reduced % 90.0 != 0.0:
        return None
    return int(reduced) % 360


def _sin(x: float, context: EvaluationContext) -> float:
    if context.degrees:
        quadrant = _quadrant(x)
        if quadrant is not None:
            return _SIN_QUADRANTS[quadrant]
        x = math.radians(x)
    return math.sin(x)


def _cos(x: float, context: EvaluationContext) -> float:
    if context.degrees:
        quadrant = _quadrant(x)
        if quadrant is not None:
            return _COS_QUADRANTS[quadrant]
        x = math.radians(x)
    return math.cos(x)


def _tan(x: float, context: EvaluationContext) -> float:
    if context.degrees:
        quadrant = _quadrant(x)
        if quadrant in (90, 270):
            raise _domain_error(f"tan is undefined at {_fmt(x)}°")
        if quadrant is not None:
            return 0.0
        x = math.radians(x)
    else:
        half_pi = math.pi / 2
        normalized = math.fmod(x, math.pi)
        if (
            abs(normalized - half_pi) < TAN_POLE_TOLERANCE
            or abs(normalized + half_pi) < TAN_POLE_TOLERANCE
        ):
            raise _domain_error(f"tan is undefined at {_fmt(x)} rad")
    return math.tan(x)


def _to_angle_unit(radians: float, context: EvaluationContext) -> float:
    return math.degrees(radians) if context.degrees else radians


def _asin(x: float, context: EvaluationContext) -> float:
    if not -1.0 <= x <= 1.0:
        raise _domain_error(f"asin argument {_fmt(x)} is outside [-1, 1]")
    return _to_angle_unit(math.asin(x), context)


def _acos(x: float, context: EvaluationContext) -> float:
    if not -1.0 <= x <= 1.0:
        raise _domain_error(f"acos argument {_fmt(x)} is outside [-1, 1]")
    return _to_angle_unit(math.acos(x), context)


def _atan(x: float, context: EvaluationContext) -> float:
    return _to_angle_unit(math.atan(x), context)


def _log(x: float, context: EvaluationContext) -> float:
    if x <= 0.0:
        raise _domain_error(f"log of non-positive number {_fmt(x)}")
    return math.log10(x)


def _ln(x: float, context: EvaluationContext) -> float:
    if x <= 0.0:
        raise _domain_error(f"ln of non-positive number {_fmt(x)}")
    return math.log(x)


def _sqrt(x: float, context: EvaluationContext) -> float:
    if x < 0.0:
        raise _domain_error(f"sqrt of negative number {_fmt(x)}")
    return math.sqrt(x)


def _cbrt(x: float, context: EvaluationContext) -> float:
    root = math.copysign(abs(x) ** (1.0 / 3.0), x)
    nearest = round(root)
    if nearest**3 == x:
        return float(nearest)
    return root


def _factorial(x: float, context: EvaluationContext) -> float:
    nearest = round(x)
    if abs(x - nearest) > INTEGER_TOLERANCE:
        raise _domain_error(f"factorial requires an integer, got {_fmt(x)}")
    if nearest < 0:
        raise _domain_error(f"factorial of negative number {nearest}")
    if nearest > FACTORIAL_LIMIT:
        raise _overflow(f"factorial({nearest}) exceeds the largest representable number")
    return float(math.factorial(nearest))


def _unit_free(func: Callable[[float], float]) -> Callable[[float, EvaluationContext], float]:
    """Wrap a one-argument function that does not depend on the angle mode."""

    def apply(x: float, context: EvaluationContext) -> float:
        return func(x)

    return apply


FUNCTIONS: dict[str, Callable[[float, EvaluationContext], float]] = {
    "sin": _sin,
    "cos": _cos,
    "tan": _tan,
    "asin": _asin,
    "acos": _acos,
    "atan": _atan,
    "sinh": _unit_free(math.sinh),
    "cosh": _unit_free(math.cosh),
    "tanh": _unit_free(math.tanh),
    "log": _log,
    "ln": _ln,
    "sqrt": _sqrt,
    "factorial": _factorial,
    "exp": _unit_free(math.exp),
    "cbrt": _cbrt,
    "abs": _unit_free(abs),
}


def _power(base: float, exponent: float) -> float:
    if base == 0.0 and exponent == 0.0:
        return 1.0
    if base == 0.0 and exponent < 0.0:
        raise _division_by_zero("0 raised to a negative power")
    if base < 0.0 and not exponent.is_integer():
        raise MathError(
            MathErrorKind.COMPLEX_RESULT,
            f"{_fmt(base)} ^ {_fmt(exponent)} has no real value",
        )
    try:
        return math.pow(base, exponent)
    except OverflowError:
        raise _overflow(f"{_fmt(base)} ^ {_fmt(exponent)} is out of range") from None


def _apply_binary(operator: str, left: float, right: float) -> float:
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "*":
        return left * right
    if operator == "/":
        if right == 0.0:
            raise _division_by_zero(f"cannot divide {_fmt(left)} by zero")
        return left / right
    if operator == "mod":
        if right == 0.0:
            raise _division_by_zero(f"cannot take {_fmt(left)} mod zero")
        return math.fmod(left, right)
    if operator == "^":
        return _power(left, right)
    raise ValueError(f"Unknown operator: {operator}")


def _apply_function(name: str, argument: float, context: EvaluationContext) -> float:
    try:
        return FUNCTIONS[name](argument, context)
    except OverflowError:
        raise _overflow(f"{name}({_fmt(argument)}) is out of range") from None


def evaluate(tree: Node, context: EvaluationContext | None = None) -> float:
    """Evaluate an expression tree.

    Args:
        tree: Root node produced by the parser
        context: Angle mode for trigonometric functions (default from config)

    Returns:
        Finite double result

    Raises:
        MathError: On division by zero, domain violations, complex results,
            or values that do not fit in a double
    """
    if context is None:
        context = EvaluationContext()

    if isinstance(tree, Literal):
        return _finite(tree.value, f"number {tree.text}")
    if isinstance(tree, Constant):
        return CONSTANTS[tree.symbol]
    if isinstance(tree, Negation):
        return -evaluate(tree.operand, context)
    if isinstance(tree, UnaryFunction):
        argument = evaluate(tree.argument, context)
        return _finite(_apply_function(tree.function, argument, context), tree.function)
    if isinstance(tree, BinaryOp):
        base, chain = left_spine(tree)
        value = evaluate(base, context)
        for node in chain:
            right = evaluate(node.right, context)
            value = _finite(_apply_binary(node.operator, value, right), f"'{node.operator}'")
        return value
    raise TypeError(f"Not an expression node: {tree!r}")
