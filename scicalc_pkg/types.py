"""Type definitions, result dataclasses and the calculator error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MathErrorKind(Enum):
    """Cause of a failed arithmetic operation."""

    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    DOMAIN_ERROR = "DOMAIN_ERROR"
    COMPLEX_RESULT = "COMPLEX_RESULT"
    OVERFLOW = "OVERFLOW"


class CalculatorError(Exception):
    """Base class for every recoverable calculator failure."""

    def __init__(self, message: str, code: str = "CALCULATOR_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class LexError(CalculatorError):
    """Raised when the tokenizer meets an unrecognized character or malformed literal."""

    def __init__(
        self, message: str, code: str = "INVALID_CHARACTER", position: int | None = None
    ):
        self.position = position
        super().__init__(message, code)


class ParseError(CalculatorError):
    """Raised when a token sequence is structurally invalid."""

    def __init__(
        self, message: str, code: str = "PARSE_ERROR", position: int | None = None
    ):
        self.position = position
        super().__init__(message, code)

    @property
    def reason(self) -> str:
        return self.message


class MathError(CalculatorError):
    """Raised when evaluation hits division by zero, a domain error, or overflow."""

    def __init__(self, kind: MathErrorKind, message: str):
        self.kind = kind
        super().__init__(message, kind.value)


class InvalidOperand(CalculatorError):
    """Raised when a non-finite or non-numeric value is passed to a memory operation."""

    def __init__(self, message: str, code: str = "INVALID_OPERAND"):
        super().__init__(message, code)


@dataclass
class EvalResult:
    """Result of evaluating a calculator expression.

    Exactly one of (``value``/``result``) or (``error``/``error_code``) is set.
    """

    ok: bool
    result: str | None = None
    value: float | None = None
    exact: str | None = None
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.value is not None:
            result_dict["value"] = self.value
        if self.exact is not None:
            result_dict["exact"] = self.exact
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.error_kind is not None:
            result_dict["error_kind"] = self.error_kind
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        parts = [f"ok={self.ok}", f"result={self.result!r}", f"value={self.value!r}"]
        if self.exact is not None:
            parts.append(f"exact={self.exact!r}")
        return f"EvalResult({', '.join(parts)})"
