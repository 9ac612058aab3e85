"""Centralized configuration for SciCalc.

This module defines:
- Output formatting precision
- Input validation limits (length, nesting depth)
- Cache sizes for the parse cache
- Numeric policy constants (factorial ceiling, integer tolerance)
- Keyword tables used by the tokenizer

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with SCICALC_)
"""

import importlib.metadata
import math
import os

try:
    VERSION = importlib.metadata.version("scicalc")
except importlib.metadata.PackageNotFoundError:
    # Running from a source checkout
    VERSION = "1.0.0"

# Output formatting
OUTPUT_PRECISION = int(
    os.getenv("SCICALC_OUTPUT_PRECISION", "15")
)  # significant digits
EXACT_MAX_LENGTH = int(
    os.getenv("SCICALC_EXACT_MAX_LENGTH", "80")
)  # longest exact form worth printing

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("SCICALC_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("SCICALC_MAX_EXPRESSION_DEPTH", "100")
)  # parenthesis / unary nesting

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("SCICALC_CACHE_SIZE_PARSE", "1024"))

# Numeric policy
FACTORIAL_LIMIT = int(
    os.getenv("SCICALC_FACTORIAL_LIMIT", "170")
)  # 171! overflows a double
INTEGER_TOLERANCE = float(
    os.getenv("SCICALC_INTEGER_TOLERANCE", "1e-9")
)  # distance from nearest integer still treated as integral
TAN_POLE_TOLERANCE = 1e-15  # radians
INTEGRAL_DISPLAY_LIMIT = 1e15  # integral values below this print without exponent

# Angle mode used when the caller does not pass one
DEFAULT_DEGREE_MODE = os.getenv("SCICALC_DEGREE_MODE", "true").lower() == "true"

# Keyword tables. Names must be followed by "(" in the input.
FUNCTION_NAMES = (
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "log",
    "ln",
    "sqrt",
    "factorial",
    "exp",
    "cbrt",
    "abs",
)

FUNCTION_ALIASES = {
    "√": "sqrt",
}

# Symbol -> value. Aliases resolve to the canonical symbol.
CONSTANTS = {
    "π": math.pi,
    "e": math.e,
    "φ": (1 + math.sqrt(5)) / 2,
}

CONSTANT_ALIASES = {
    "pi": "π",
    "phi": "φ",
}

# Display symbols the UI may emit -> canonical operator
OPERATOR_SYMBOLS = {
    "+": "+",
    "-": "-",
    "−": "-",
    "*": "*",
    "×": "*",
    "/": "/",
    "÷": "/",
    "^": "^",
}

MOD_KEYWORD = "mod"
