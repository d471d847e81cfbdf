"""Condition expression evaluator for question visibility decisions.

Expressions are evaluated against the current answer map. A field that has not
been answered is *absent*: it is never equal to any value, so ``eq`` is false
and ``neq`` is true. Skip conditions therefore default to showing a question
until the answer it depends on exists.
"""

from __future__ import annotations

from typing import Any, Mapping

from tddbuilder.model.expression import And, Eq, Expression, Has, Neq, Not, Or, Truthy

__all__ = ["evaluate", "referenced_fields", "values_equal"]


class _Absent:
    def __repr__(self) -> str:
        return "<absent>"


ABSENT = _Absent()


def values_equal(actual: Any, expected: Any) -> bool:
    """Strict equality: booleans only ever equal booleans."""
    if actual is ABSENT:
        return False
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    return actual == expected


def evaluate(expr: Expression, answers: Mapping[str, Any]) -> bool:
    """Evaluate *expr* against *answers*."""
    if isinstance(expr, Eq):
        return values_equal(answers.get(expr.field, ABSENT), expr.value)

    if isinstance(expr, Neq):
        return not values_equal(answers.get(expr.field, ABSENT), expr.value)

    if isinstance(expr, Has):
        actual = answers.get(expr.field, ABSENT)
        if isinstance(actual, (list, tuple, set, frozenset)):
            return any(values_equal(item, expr.value) for item in actual)
        return False

    if isinstance(expr, Truthy):
        actual = answers.get(expr.field, ABSENT)
        return actual is not ABSENT and bool(actual)

    if isinstance(expr, Not):
        return not evaluate(expr.operand, answers)

    if isinstance(expr, And):
        return all(evaluate(e, answers) for e in expr.operands)

    if isinstance(expr, Or):
        return any(evaluate(e, answers) for e in expr.operands)

    raise TypeError(f"Unknown expression node: {expr!r}")


def referenced_fields(expr: Expression) -> list[str]:
    """Return the answer keys *expr* reads, in first-seen order."""
    seen: list[str] = []

    def walk(node: Expression) -> None:
        if isinstance(node, (Eq, Neq, Has, Truthy)):
            if node.field not in seen:
                seen.append(node.field)
        elif isinstance(node, Not):
            walk(node.operand)
        elif isinstance(node, (And, Or)):
            for operand in node.operands:
                walk(operand)

    walk(expr)
    return seen
