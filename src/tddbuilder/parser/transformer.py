"""Build Expression trees from JSON condition objects and legacy strings."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError

from tddbuilder.model.expression import (
    OPERATORS,
    And,
    Eq,
    Expression,
    Has,
    Neq,
    Not,
    Or,
    Truthy,
)
from tddbuilder.parser.errors import ExpressionError

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

# One backslash escapes the character after it, in a single left-to-right pass.
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


class ConditionTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into Expression nodes."""

    # ---- literals ----

    def double_quoted(self, items: list[Token]) -> str:
        raw = str(items[0])
        return _ESCAPE.sub(r"\1", raw[1:-1])

    def single_quoted(self, items: list[Token]) -> str:
        return str(items[0])[1:-1]

    def number(self, items: list[Token]) -> int | float:
        raw = str(items[0])
        try:
            return int(raw)
        except ValueError:
            return float(raw)

    def true(self, items: list[Token]) -> bool:
        return True

    def false(self, items: list[Token]) -> bool:
        return False

    def null(self, items: list[Token]) -> None:
        return None

    def bare_word(self, items: list[Token]) -> str:
        return str(items[0])

    # ---- comparisons ----

    def equals(self, items: list[Any]) -> Eq:
        return Eq(str(items[0]), items[1])

    def not_equals(self, items: list[Any]) -> Neq:
        return Neq(str(items[0]), items[1])

    def contains(self, items: list[Any]) -> Has:
        return Has(str(items[0]), items[1])

    def truthy(self, items: list[Token]) -> Truthy:
        return Truthy(str(items[0]))

    # ---- logic ----

    def not_(self, items: list[Expression]) -> Not:
        return Not(items[0])

    def conjunction(self, items: list[Expression]) -> And:
        return And(tuple(items))

    def disjunction(self, items: list[Expression]) -> Or:
        return Or(tuple(items))


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def parse_condition(source: str) -> Expression:
    """Parse a legacy condition string such as ``"a == 'x' && b != 'y'"``."""
    try:
        tree = _parser().parse(source)
    except LarkError as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise ExpressionError(
            f"Invalid condition {source!r}: {e}", line=line, column=column
        ) from e
    return ConditionTransformer().transform(tree)


def parse_expression(raw: Any) -> Expression | None:
    """Convert a catalog ``skip_if`` value into an Expression tree.

    Accepts the JSON object form (``{"eq": [field, value]}`` and friends) or
    a legacy condition string. ``None`` and blank strings mean "no condition".
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        if not raw.strip():
            return None
        return parse_condition(raw)
    if isinstance(raw, dict):
        return _from_object(raw)
    raise ExpressionError(f"Unsupported condition value: {raw!r}")


def _from_object(raw: Any) -> Expression:
    if isinstance(raw, str):
        return parse_condition(raw)
    if not isinstance(raw, dict) or len(raw) != 1:
        raise ExpressionError(
            f"Condition objects need exactly one operator key, got {raw!r}"
        )
    (op, args), = raw.items()
    if op not in OPERATORS:
        raise ExpressionError(
            f"Unsupported operator {op!r}; use one of: {', '.join(OPERATORS)}"
        )

    if op in ("eq", "neq", "has"):
        if not isinstance(args, (list, tuple)) or len(args) != 2 or not isinstance(args[0], str):
            raise ExpressionError(f"'{op}' expects [field, value], got {args!r}")
        return OPERATORS[op](args[0], args[1])

    if op == "truthy":
        if not isinstance(args, str):
            raise ExpressionError(f"'truthy' expects a field name, got {args!r}")
        return Truthy(args)

    if op == "not":
        return Not(_from_object(args))

    if not isinstance(args, (list, tuple)) or not args:
        raise ExpressionError(f"'{op}' expects a non-empty list of conditions")
    operands = tuple(_from_object(a) for a in args)
    return And(operands) if op == "and" else Or(operands)
