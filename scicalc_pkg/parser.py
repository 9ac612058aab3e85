"""Expression parsing module.

This module handles:
- Precedence climbing over the token sequence produced by the tokenizer
- Structural validation (balanced parentheses, missing operands, empty
  function arguments, trailing tokens)
- A nesting limit that keeps parser and evaluator recursion bounded
- A cached string -> tree entry point

Binding levels, low to high: ``+ -`` < ``* / mod`` < unary minus < ``^``.
``^`` is right-associative, everything else left-associative. Function
calls and parenthesized groups are atoms. Adjacent atoms are rejected:
there is no implicit multiplication.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from functools import lru_cache

from .config import CACHE_SIZE_PARSE, MAX_EXPRESSION_DEPTH
from .nodes import BinaryOp, Constant, Literal, Negation, Node, UnaryFunction
from .tokenizer import Token, TokenKind, tokenize
from .types import ParseError

BINARY_PRECEDENCE = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
    "mod": 2,
    "^": 4,
}
UNARY_MINUS_PRECEDENCE = 3
RIGHT_ASSOCIATIVE = frozenset({"^"})


class _TokenStream:
    """Cursor over a token sequence."""

    def __init__(self, tokens: Sequence[Token], end_position: int):
        self._tokens = tokens
        self._index = 0
        self._end_position = end_position
        self.last: Token | None = None

    def peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        self.last = token
        return token

    def position(self) -> int:
        token = self.peek()
        return token.position if token is not None else self._end_position


class _Parser:
    def __init__(self, tokens: Sequence[Token], end_position: int):
        self._stream = _TokenStream(tokens, end_position)
        self._depth = 0
        self._open_parens = 0

    def parse(self) -> Node:
        node = self._parse_binary(1)
        token = self._stream.peek()
        if token is not None:
            if token.kind is TokenKind.RIGHT_PAREN:
                raise ParseError(
                    "Unbalanced parentheses: unexpected ')'",
                    "UNBALANCED_PARENS",
                    position=token.position,
                )
            raise self._unexpected(token)
        return node

    @contextmanager
    def _nested(self, token: Token) -> Iterator[None]:
        self._depth += 1
        if self._depth > MAX_EXPRESSION_DEPTH:
            raise ParseError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                "TOO_DEEP",
                position=token.position,
            )
        try:
            yield
        finally:
            self._depth -= 1

    def _parse_binary(self, min_precedence: int) -> Node:
        # Same-level chains are built in this loop, so only nesting recurses
        left = self._parse_unary()
        while True:
            token = self._stream.peek()
            if token is None or token.kind is not TokenKind.OPERATOR:
                break
            precedence = BINARY_PRECEDENCE[token.text]
            if precedence < min_precedence:
                break
            self._stream.advance()
            if token.text in RIGHT_ASSOCIATIVE:
                with self._nested(token):
                    right = self._parse_binary(precedence)
            else:
                right = self._parse_binary(precedence + 1)
            left = BinaryOp(token.text, left, right)
        return left

    def _parse_unary(self) -> Node:
        token = self._stream.peek()
        if (
            token is not None
            and token.kind is TokenKind.OPERATOR
            and token.text == "-"
        ):
            self._stream.advance()
            with self._nested(token):
                operand = self._parse_binary(UNARY_MINUS_PRECEDENCE + 1)
            return Negation(operand)
        return self._parse_atom()

    def _parse_atom(self) -> Node:
        token = self._stream.peek()
        if token is None:
            raise self._missing_operand()

        if token.kind is TokenKind.NUMBER:
            self._stream.advance()
            return Literal(token.value, token.text)

        if token.kind is TokenKind.CONSTANT:
            self._stream.advance()
            return Constant(token.text)

        if token.kind is TokenKind.FUNCTION:
            self._stream.advance()
            open_paren = self._stream.peek()
            if open_paren is None or open_paren.kind is not TokenKind.LEFT_PAREN:
                raise ParseError(
                    f"'{token.text}' must be followed by '('",
                    "MISSING_OPERAND",
                    position=self._stream.position(),
                )
            self._stream.advance()
            following = self._stream.peek()
            if following is not None and following.kind is TokenKind.RIGHT_PAREN:
                raise ParseError(
                    f"Empty argument in {token.text}()",
                    "EMPTY_ARGUMENT",
                    position=following.position,
                )
            return UnaryFunction(token.text, self._parse_group(open_paren))

        if token.kind is TokenKind.LEFT_PAREN:
            self._stream.advance()
            following = self._stream.peek()
            if following is not None and following.kind is TokenKind.RIGHT_PAREN:
                raise ParseError(
                    "Empty parentheses",
                    "EMPTY_ARGUMENT",
                    position=following.position,
                )
            return self._parse_group(token)

        if token.kind is TokenKind.RIGHT_PAREN:
            if self._open_parens == 0:
                raise ParseError(
                    "Unbalanced parentheses: unexpected ')'",
                    "UNBALANCED_PARENS",
                    position=token.position,
                )
            raise self._missing_operand()

        # An operator where an operand should start
        raise ParseError(
            f"Missing operand before '{token.text}'",
            "MISSING_OPERAND",
            position=token.position,
        )

    def _parse_group(self, open_paren: Token) -> Node:
        """Parse the body of a group whose '(' has been consumed, then its ')'."""
        self._open_parens += 1
        with self._nested(open_paren):
            inner = self._parse_binary(1)
        close = self._stream.peek()
        if close is None:
            raise ParseError(
                f"Unbalanced parentheses: '(' at position {open_paren.position} is never closed",
                "UNBALANCED_PARENS",
                position=open_paren.position,
            )
        if close.kind is not TokenKind.RIGHT_PAREN:
            raise self._unexpected(close)
        self._stream.advance()
        self._open_parens -= 1
        return inner

    def _missing_operand(self) -> ParseError:
        last = self._stream.last
        position = self._stream.position()
        if last is not None and last.kind is TokenKind.OPERATOR:
            return ParseError(
                f"Missing operand after '{last.text}'", "MISSING_OPERAND", position=position
            )
        return ParseError("Missing operand", "MISSING_OPERAND", position=position)

    @staticmethod
    def _unexpected(token: Token) -> ParseError:
        return ParseError(
            f"Unexpected '{token.text}' (missing operator?)",
            "UNEXPECTED_TOKEN",
            position=token.position,
        )


def parse(tokens: Sequence[Token], source_length: int | None = None) -> Node:
    """Build an expression tree from tokens.

    Args:
        tokens: Token sequence from :func:`tokenize`
        source_length: Length of the source text, used as the error position
            for failures at end of input

    Returns:
        Root node of the expression tree

    Raises:
        ParseError: If the token sequence is not a single well-formed expression
    """
    if not tokens:
        raise ParseError("Empty expression", "EMPTY_EXPRESSION", position=0)
    if source_length is None:
        last = tokens[-1]
        source_length = last.position + len(last.text)
    return _Parser(tokens, source_length).parse()


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse_expression(expression: str) -> Node:
    """Tokenize and parse an expression string (cached; trees are immutable)."""
    return parse(tokenize(expression), len(expression))
