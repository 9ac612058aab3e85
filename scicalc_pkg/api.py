"""Public API for SciCalc - returns structured objects without side effects."""

from __future__ import annotations

from . import config
from .evaluator import EvaluationContext
from .evaluator import evaluate as evaluate_tree
from .formatter import format_error, format_result
from .logging_config import get_logger
from .parser import parse_expression
from .symbolic import exact_form
from .types import CalculatorError, EvalResult, LexError, ParseError

logger = get_logger("api")


def calculate(expression: str, degree_mode: bool | None = None) -> float:
    """Evaluate an expression and return the raw double.

    Args:
        expression: Calculator expression (e.g., "3+4*2", "sin(30)")
        degree_mode: Interpret trigonometric angles in degrees (default from config)

    Returns:
        Finite double result

    Raises:
        LexError: On unrecognized characters or malformed numbers
        ParseError: On structurally invalid expressions
        MathError: On division by zero, domain errors, complex results or overflow

    Example:
        >>> from scicalc_pkg.api import calculate
        >>> calculate("2^3^2")
        512.0
    """
    if degree_mode is None:
        degree_mode = config.DEFAULT_DEGREE_MODE
    tree = parse_expression(expression or "")
    return evaluate_tree(tree, EvaluationContext.from_degree_mode(degree_mode))


def evaluate(
    expression: str, degree_mode: bool | None = None, exact: bool = False
) -> EvalResult:
    """Evaluate an expression without raising for calculator errors.

    Args:
        expression: Calculator expression
        degree_mode: Interpret trigonometric angles in degrees (default from config)
        exact: Also compute an exact SymPy rendering when one is informative

    Returns:
        EvalResult with the formatted result and value, or the error details

    Example:
        >>> from scicalc_pkg.api import evaluate
        >>> evaluate("3+4*2").result
        '11'
        >>> evaluate("5/0").error_kind
        'MathError'
    """
    try:
        value = calculate(expression, degree_mode)
    except CalculatorError as e:
        logger.debug("Evaluation of %r failed: %s", expression, e)
        return EvalResult(
            ok=False,
            error=format_error(e),
            error_code=e.code,
            error_kind=type(e).__name__,
        )

    result = format_result(value)
    exact_text = None
    if exact:
        exact_text = exact_form(expression, degree_mode, numeric_display=result)
    logger.debug("Evaluated %r = %s", expression, result)
    return EvalResult(ok=True, result=result, value=value, exact=exact_text)


def exact(expression: str, degree_mode: bool | None = None) -> str | None:
    """Return the exact form of an expression, or None if it has no useful one.

    Example:
        >>> from scicalc_pkg.api import exact
        >>> exact("sqrt(8)")
        '2×√(2)'
    """
    result = evaluate(expression, degree_mode, exact=True)
    return result.exact if result.ok else None


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Check that an expression tokenizes and parses, without evaluating it.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from scicalc_pkg.api import validate_expression
        >>> validate_expression("2 + 2")
        (True, None)
        >>> validate_expression("((2+3")[0]
        False
    """
    try:
        parse_expression(expression or "")
    except (LexError, ParseError) as e:
        return False, format_error(e)
    return True, None
