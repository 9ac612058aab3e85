"""Result formatting: canonical display strings for numbers, errors and exact forms."""

from __future__ import annotations

import math
import re

from . import config
from .types import (
    CalculatorError,
    InvalidOperand,
    LexError,
    MathError,
    MathErrorKind,
    ParseError,
)

MATH_ERROR_LABELS = {
    MathErrorKind.DIVISION_BY_ZERO: "Division by zero",
    MathErrorKind.DOMAIN_ERROR: "Domain error",
    MathErrorKind.COMPLEX_RESULT: "Complex result",
    MathErrorKind.OVERFLOW: "Overflow error",
}


def format_result(value: float, precision: int | None = None) -> str:
    """Format a finite double for display.

    Integral values below 1e15 print without a decimal point; everything
    else prints with ``precision`` significant digits (default
    ``config.OUTPUT_PRECISION``), trailing zeros trimmed. The output
    re-tokenizes to the same value within the printed precision.

    Args:
        value: Finite result of an evaluation
        precision: Number of significant digits

    Returns:
        Display string (e.g. "11", "0.5", "1.5e+20")
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value!r}")
    if precision is None:
        precision = config.OUTPUT_PRECISION
    if value == 0.0:
        return "0"  # also folds -0.0
    if value.is_integer() and abs(value) < config.INTEGRAL_DISPLAY_LIMIT:
        return str(int(value))
    text = f"{value:.{int(precision)}g}"
    if "e" in text:
        mantissa, exponent = text.split("e")
        text = f"{mantissa}e{int(exponent):+d}"
    return text


def error_label(error: CalculatorError) -> str:
    """Return the short label for an error's subtype."""
    if isinstance(error, MathError):
        return MATH_ERROR_LABELS[error.kind]
    if isinstance(error, LexError):
        return "Invalid character"
    if isinstance(error, ParseError):
        return "Syntax error"
    if isinstance(error, InvalidOperand):
        return "Invalid operand"
    return "Error"


def format_error(error: CalculatorError) -> str:
    """Render an error as ``<label>: <detail>`` with the position when known."""
    message = f"{error_label(error)}: {error.message}"
    position = getattr(error, "position", None)
    if position is not None:
        message = f"{message} (at position {position})"
    return message


def superscriptify(input_str: str) -> str:
    """Convert numeric string to Unicode superscript characters.

    Args:
        input_str: Input string with digits and '-' (e.g., "123", "-5")

    Returns:
        String with superscript Unicode characters (e.g., "¹²³", "⁻⁵")
    """
    mapping = {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "-": "⁻",
    }
    return "".join(mapping.get(char, char) for char in input_str)


def format_superscript(expr_str: str) -> str:
    """Replace Python power notation (**) with Unicode superscripts.

    Args:
        expr_str: Expression string (e.g., "x**2", "x**-3")

    Returns:
        String with superscripts (e.g., "x²", "x⁻³")
    """
    return re.sub(r"\*\*(\-?\d+)", lambda m: superscriptify(m.group(1)), expr_str)


_SYMBOL_NAMES = (
    (re.compile(r"\bpi\b"), "π"),
    (re.compile(r"\bGoldenRatio\b"), "φ"),
    (re.compile(r"\bE\b"), "e"),
)


def prettify_expr(expr_str: str) -> str:
    """Convert a SymPy expression string to calculator notation.

    Replaces 'sqrt(' with '√(', integer powers with superscripts, remaining
    '**' with '^', '*' with '×' and SymPy constant names with their symbols.

    Args:
        expr_str: Expression string (e.g., "sqrt(3)*pi/2")

    Returns:
        Prettified string (e.g., "√(3)×π/2")
    """
    result = re.sub(r"sqrt\(([^)]+)\)", r"√(\1)", expr_str)
    # Names first: superscript digits count as word characters for \b
    for pattern, symbol in _SYMBOL_NAMES:
        result = pattern.sub(symbol, result)
    result = format_superscript(result)
    return result.replace("**", "^").replace("*", "×")
