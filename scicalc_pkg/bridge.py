"""Flat, string-returning interface for UI front ends.

This is the boundary a UI collaborator talks to. It mirrors the legacy
native interface: ``evaluate`` returns either a formatted number or
``"ERROR: <message>"``, memory operations never raise, and the message of
the most recent failure stays queryable through ``get_last_error``.

In-process callers that want structured errors should use
:mod:`scicalc_pkg.api` instead.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from . import memory
from .api import evaluate as evaluate_structured
from .formatter import format_error
from .logging_config import get_logger
from .types import CalculatorError, EvalResult

logger = get_logger("bridge")

ERROR_PREFIX = "ERROR: "

_last_error = ""
_last_error_lock = threading.Lock()


def _set_last_error(message: str) -> None:
    global _last_error
    with _last_error_lock:
        _last_error = message


def get_last_error() -> str:
    """Return the message of the most recent failure, or "" after a success."""
    with _last_error_lock:
        return _last_error


def evaluate_result(expression: str, degree_mode: bool, exact: bool = False) -> EvalResult:
    """Evaluate an expression and record the outcome in the last-error slot.

    Front ends that need more than a display string (exact form, JSON)
    call this instead of :func:`evaluate`. It never raises.
    """
    try:
        result = evaluate_structured(expression, degree_mode, exact=exact)
    except Exception:
        logger.exception("Unexpected error evaluating %r", expression)
        result = EvalResult(
            ok=False,
            error="Internal error",
            error_code="INTERNAL_ERROR",
            error_kind="InternalError",
        )

    if result.ok:
        _set_last_error("")
        logger.info("Calculation result: %s = %s", expression, result.result)
    else:
        _set_last_error(result.error)
        logger.info("Calculation error: %s", result.error)
    return result


def evaluate(expression: str, degree_mode: bool) -> str:
    """Evaluate an expression for display.

    Args:
        expression: Expression assembled by the UI (e.g., "sin(90)+2×π")
        degree_mode: True to interpret angles in degrees

    Returns:
        Formatted result, or a string starting with "ERROR: "
    """
    result = evaluate_result(expression, degree_mode)
    if result.ok:
        return result.result
    return ERROR_PREFIX + result.error


def _memory_call(operation: Callable[[Any], None], value: Any) -> str | None:
    try:
        operation(value)
    except CalculatorError as e:
        message = format_error(e)
        _set_last_error(message)
        logger.info("Memory operation rejected: %s", message)
        return ERROR_PREFIX + message
    return None


def store_memory(value: Any) -> str | None:
    """MS: overwrite memory. Returns None, or an "ERROR: " string if rejected."""
    return _memory_call(memory.store, value)


def add_memory(value: Any) -> str | None:
    """M+: add to memory. Returns None, or an "ERROR: " string if rejected."""
    return _memory_call(memory.add, value)


def subtract_memory(value: Any) -> str | None:
    """M-: subtract from memory. Returns None, or an "ERROR: " string if rejected."""
    return _memory_call(memory.subtract, value)


def recall_memory() -> float:
    """MR: current memory value."""
    return memory.recall()


def clear_memory() -> None:
    """MC: reset memory to 0."""
    memory.clear()
