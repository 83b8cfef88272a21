"""Arithmetic formula language for pricing rules.

Grammar (``*``/``/`` bind tighter than ``+``/``-``, all left-associative)::

    expression := term (("+" | "-") term)*
    term       := factor (("*" | "/") factor)*
    factor     := ("+" | "-") factor | "(" expression ")" | NUMBER | IDENT
    NUMBER     := digits ["." digits] | "." digits
    IDENT      := [A-Za-z_][A-Za-z0-9_]*

Parsing builds a small immutable AST which is then evaluated against a
resolved ``VariableTable``. ``parse_formula`` and ``evaluate_ast`` raise
``FormulaError``; ``evaluate_formula`` is the total entry point used on the
pricing hot path and turns every failure into ``None``.
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional, Union

from core.pricing.variables import (
    CALENDAR_VARIABLES,
    DURATION_UNITS,
    VariableTable,
    normalize_key,
)

logger = logging.getLogger(__name__)

FORMULA_MAX_LENGTH = 1000
FORMULA_MAX_NESTING_DEPTH = 32


class FormulaError(ValueError):
    """A formula could not be parsed or evaluated."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

NUMBER = "number"
IDENT = "ident"
OP = "op"
LPAREN = "("
RPAREN = ")"
END = "end"

_OPERATORS = frozenset("+-*/")


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


def _is_ident_start(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_ident_part(char: str) -> bool:
    return _is_ident_start(char) or "0" <= char <= "9"


def tokenize(formula: str) -> list[Token]:
    """Split a formula into tokens, ending with an ``END`` token."""
    tokens: list[Token] = []
    pos = 0
    length = len(formula)

    while pos < length:
        char = formula[pos]
        if char.isspace():
            pos += 1
            continue

        start = pos
        if char in _OPERATORS:
            tokens.append(Token(OP, char, start))
            pos += 1
        elif char in "()":
            tokens.append(Token(char, char, start))
            pos += 1
        elif "0" <= char <= "9" or char == ".":
            while pos < length and "0" <= formula[pos] <= "9":
                pos += 1
            if pos < length and formula[pos] == ".":
                pos += 1
                while pos < length and "0" <= formula[pos] <= "9":
                    pos += 1
            text = formula[start:pos]
            if text == ".":
                raise FormulaError("Invalid number literal.", start)
            tokens.append(Token(NUMBER, text, start))
        elif _is_ident_start(char):
            while pos < length and _is_ident_part(formula[pos]):
                pos += 1
            tokens.append(Token(IDENT, formula[start:pos], start))
        else:
            raise FormulaError(f'Unexpected character "{char}".', start)

    tokens.append(Token(END, "", length))
    return tokens


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Variable:
    key: str


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Number, Variable, UnaryOp, BinaryOp]


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class _Parser:
    def __init__(self, tokens: list[Token], max_depth: int):
        self.tokens = tokens
        self.index = 0
        self.depth = 0
        self.max_depth = max_depth

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def parse(self) -> Node:
        node = self.expression()
        token = self.current
        if token.kind != END:
            raise FormulaError(f'Unexpected token "{token.text}".', token.position)
        return node

    def expression(self) -> Node:
        node = self.term()
        while self.current.kind == OP and self.current.text in "+-":
            op = self.advance().text
            node = BinaryOp(op, node, self.term())
        return node

    def term(self) -> Node:
        node = self.factor()
        while self.current.kind == OP and self.current.text in "*/":
            op = self.advance().text
            node = BinaryOp(op, node, self.factor())
        return node

    def _enter(self, token: Token) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise FormulaError(
                f"Formula exceeds maximum nesting depth of {self.max_depth}.",
                token.position,
            )

    def factor(self) -> Node:
        token = self.current

        if token.kind == END:
            raise FormulaError("Unexpected end of expression.", token.position)

        if token.kind == OP and token.text in "+-":
            self.advance()
            self._enter(token)
            operand = self.factor()
            self.depth -= 1
            return UnaryOp(token.text, operand)

        if token.kind == LPAREN:
            self.advance()
            self._enter(token)
            node = self.expression()
            if self.current.kind != RPAREN:
                raise FormulaError("Expected closing parenthesis.", self.current.position)
            self.advance()
            self.depth -= 1
            return node

        if token.kind == NUMBER:
            self.advance()
            value = float(token.text)
            if not math.isfinite(value):
                raise FormulaError(f'Invalid number "{token.text}".', token.position)
            return Number(value)

        if token.kind == IDENT:
            self.advance()
            return Variable(normalize_key(token.text))

        raise FormulaError(f'Unexpected token "{token.text}".', token.position)


@lru_cache(maxsize=512)
def _parse_cached(formula: str, max_length: int, max_depth: int) -> Node:
    if not formula.strip():
        raise FormulaError("Formula is empty.", 0)
    if len(formula) > max_length:
        raise FormulaError(f"Formula exceeds maximum length of {max_length} characters.")
    return _Parser(tokenize(formula), max_depth).parse()


def parse_formula(
    formula: str,
    max_length: int = FORMULA_MAX_LENGTH,
    max_depth: int = FORMULA_MAX_NESTING_DEPTH,
) -> Node:
    """Parse ``formula`` into an AST. Raises ``FormulaError``.

    Results are memoized by formula text; the AST is immutable so sharing
    it between calls cannot change what any caller observes.
    """
    return _parse_cached(formula, max_length, max_depth)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate_ast(node: Node, table: VariableTable) -> float:
    if isinstance(node, Number):
        return node.value

    if isinstance(node, Variable):
        value = table.lookup(node.key)
        if value is None:
            raise FormulaError(f'Unknown variable "{node.key}".')
        return value

    if isinstance(node, UnaryOp):
        value = evaluate_ast(node.operand, table)
        return -value if node.op == "-" else value

    if isinstance(node, BinaryOp):
        left = evaluate_ast(node.left, table)
        right = evaluate_ast(node.right, table)
        if node.op == "+":
            result = left + right
        elif node.op == "-":
            result = left - right
        elif node.op == "*":
            result = left * right
        else:
            if right == 0:
                raise FormulaError("Division by zero.")
            result = left / right
        if not math.isfinite(result):
            raise FormulaError("Expression evaluates to an invalid number.")
        return result

    raise TypeError(f"Unsupported formula node: {node!r}")


def evaluate_formula(formula: str, table: VariableTable) -> Optional[float]:
    """Evaluate ``formula`` against ``table``.

    Returns ``None`` for malformed syntax, unresolved variables, division by
    zero or a non-finite result. Never raises for formula content.
    """
    try:
        result = evaluate_ast(parse_formula(formula), table)
    except FormulaError as exc:
        logger.debug("Formula %r not evaluable: %s", formula, exc.message)
        return None
    # -0.0 and 0.0 compare equal but render differently downstream
    return result + 0.0


def _collect(node: Node, seen: dict[str, None]) -> None:
    if isinstance(node, Variable):
        seen.setdefault(node.key, None)
    elif isinstance(node, UnaryOp):
        _collect(node.operand, seen)
    elif isinstance(node, BinaryOp):
        _collect(node.left, seen)
        _collect(node.right, seen)


def formula_variables(formula: str) -> tuple[str, ...]:
    """Normalized variable keys referenced by ``formula``, in order of appearance.

    Returns an empty tuple for a formula that does not parse.
    """
    try:
        node = parse_formula(formula)
    except FormulaError:
        return ()
    seen: dict[str, None] = {}
    _collect(node, seen)
    return tuple(seen)


def validate_formula(formula: str, known_keys: Optional[Iterable[str]] = None) -> list[str]:
    """Authoring-time check. Returns a list of problems, empty when valid.

    When ``known_keys`` is given, references to keys that are neither known
    nor derived duration or calendar variables are reported.
    """
    try:
        parse_formula(formula)
    except FormulaError as exc:
        if exc.position is None:
            return [exc.message]
        return [f"{exc.message} (at position {exc.position})"]

    if known_keys is None:
        return []

    allowed = {normalize_key(k) for k in known_keys}
    allowed.update(DURATION_UNITS, CALENDAR_VARIABLES)
    return [
        f'Unknown variable "{key}".'
        for key in formula_variables(formula)
        if key not in allowed
    ]
