"""Lexical analysis: turns a raw expression string into typed tokens.

The tokenizer recognizes:
- Number literals (greedy, one decimal point, optional exponent suffix)
- Operators, including the display symbols the UI emits (×, ÷, −)
- Function names and the ``mod(`` keyword, by longest-prefix match;
  each must be immediately followed by ``(``
- Constant symbols (π, e, φ) and their ASCII spellings
- Parentheses

Anything else raises :class:`LexError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import (
    CONSTANT_ALIASES,
    CONSTANTS,
    FUNCTION_ALIASES,
    FUNCTION_NAMES,
    MAX_INPUT_LENGTH,
    MOD_KEYWORD,
    OPERATOR_SYMBOLS,
)
from .types import LexError

DIGITS = "0123456789"


class TokenKind(Enum):
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    FUNCTION = "FUNCTION"
    CONSTANT = "CONSTANT"
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    ``text`` is canonical: operators use their ASCII symbol (or ``mod``),
    functions their canonical name, constants their canonical symbol, and
    numbers their source text. ``position`` is the 0-based offset of the
    token in the original expression.
    """

    kind: TokenKind
    text: str
    position: int
    value: float | None = None

    def __str__(self) -> str:
        return self.text


def _build_keyword_table() -> list[tuple[str, TokenKind, str]]:
    """Return (spelling, kind, canonical) entries, longest spelling first."""
    table: list[tuple[str, TokenKind, str]] = []
    for name in FUNCTION_NAMES:
        table.append((name, TokenKind.FUNCTION, name))
    for alias, name in FUNCTION_ALIASES.items():
        table.append((alias, TokenKind.FUNCTION, name))
    table.append((MOD_KEYWORD, TokenKind.OPERATOR, MOD_KEYWORD))
    for symbol in CONSTANTS:
        table.append((symbol, TokenKind.CONSTANT, symbol))
    for alias, symbol in CONSTANT_ALIASES.items():
        table.append((alias, TokenKind.CONSTANT, symbol))
    table.sort(key=lambda entry: len(entry[0]), reverse=True)
    return table


_KEYWORDS = _build_keyword_table()


def _scan_number(expression: str, start: int) -> tuple[Token, int]:
    """Scan a number literal starting at ``start``. Returns (token, next index)."""
    n = len(expression)
    i = start
    seen_dot = False
    while i < n and (expression[i] in DIGITS or expression[i] == "."):
        if expression[i] == ".":
            if seen_dot:
                raise LexError(
                    f"malformed number '{expression[start:i + 1]}': more than one decimal point",
                    "MALFORMED_NUMBER",
                    position=i,
                )
            seen_dot = True
        i += 1

    if expression[start:i] == ".":
        raise LexError(
            "malformed number: '.' without digits", "MALFORMED_NUMBER", position=start
        )

    # Exponent suffix only when digits follow, otherwise 'e' is the constant
    if i < n and expression[i] in "eE":
        j = i + 1
        if j < n and expression[j] in "+-":
            j += 1
        if j < n and expression[j] in DIGITS:
            while j < n and expression[j] in DIGITS:
                j += 1
            i = j

    text = expression[start:i]
    return Token(TokenKind.NUMBER, text, start, float(text)), i


def _match_keyword(expression: str, start: int) -> tuple[str, TokenKind, str] | None:
    for entry in _KEYWORDS:
        if expression.startswith(entry[0], start):
            return entry
    return None


def _unknown_word(expression: str, start: int) -> str:
    end = start
    while end < len(expression) and expression[end].isalpha():
        end += 1
    return expression[start:end]


def tokenize(expression: str) -> tuple[Token, ...]:
    """Split an expression into tokens.

    Args:
        expression: Raw expression text (e.g. "sin(30)+2×π")

    Returns:
        Immutable tuple of tokens in source order

    Raises:
        LexError: On an unrecognized character, a malformed number, a
            function name not followed by "(", or input that is too long
    """
    if len(expression) > MAX_INPUT_LENGTH:
        raise LexError(
            f"input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )

    tokens: list[Token] = []
    i = 0
    n = len(expression)
    while i < n:
        char = expression[i]
        if char.isspace():
            i += 1
            continue
        if char in DIGITS or char == ".":
            token, i = _scan_number(expression, i)
            tokens.append(token)
            continue
        if char in OPERATOR_SYMBOLS:
            tokens.append(Token(TokenKind.OPERATOR, OPERATOR_SYMBOLS[char], i))
            i += 1
            continue
        if char == "(":
            tokens.append(Token(TokenKind.LEFT_PAREN, "(", i))
            i += 1
            continue
        if char == ")":
            tokens.append(Token(TokenKind.RIGHT_PAREN, ")", i))
            i += 1
            continue

        match = _match_keyword(expression, i)
        if match is None:
            if char.isalpha():
                word = _unknown_word(expression, i)
                raise LexError(f"unknown name '{word}'", "UNKNOWN_NAME", position=i)
            raise LexError(f"unrecognized symbol '{char}'", "INVALID_CHARACTER", position=i)

        spelling, kind, canonical = match
        end = i + len(spelling)
        if kind is not TokenKind.CONSTANT and not expression.startswith("(", end):
            raise LexError(
                f"'{spelling}' must be followed by '('", "UNKNOWN_NAME", position=i
            )
        tokens.append(Token(kind, canonical, i))
        i = end

    return tuple(tokens)
