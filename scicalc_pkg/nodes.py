"""Expression tree node types.

Nodes are immutable and own their children exclusively. A tree is built by
the parser, walked once by the evaluator (and optionally by the exact
renderer), then discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Literal:
    """A number literal. ``text`` keeps the source spelling for exact rendering."""

    value: float
    text: str


@dataclass(frozen=True)
class Constant:
    """A named constant such as π."""

    symbol: str


@dataclass(frozen=True)
class Negation:
    """Unary minus."""

    operand: Node


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: Node
    right: Node


@dataclass(frozen=True)
class UnaryFunction:
    function: str
    argument: Node


Node = Union[Literal, Constant, Negation, BinaryOp, UnaryFunction]


def left_spine(node: Node) -> tuple[Node, list[BinaryOp]]:
    """Split a left-deep operator chain into its innermost left operand and
    its operators, innermost first.

    Flat input such as ``1+2+...+n`` parses to a chain as tall as the input
    is long, so tree walkers follow the left spine in a loop and recurse only
    into right operands and nested nodes.
    """
    chain = []
    while isinstance(node, BinaryOp):
        chain.append(node)
        node = node.left
    chain.reverse()
    return node, chain


def to_infix(node: Node) -> str:
    """Render a tree as a fully parenthesized string, e.g. ``(3 + (4 * 2))``."""
    if isinstance(node, Literal):
        return node.text
    if isinstance(node, Constant):
        return node.symbol
    if isinstance(node, Negation):
        return f"(-{to_infix(node.operand)})"
    if isinstance(node, UnaryFunction):
        return f"{node.function}({to_infix(node.argument)})"
    base, chain = left_spine(node)
    text = to_infix(base)
    for link in chain:
        text = f"({text} {link.operator} {to_infix(link.right)})"
    return text
