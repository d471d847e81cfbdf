"""Expression model: the closed boolean algebra used by ``skip_if`` conditions.

Expressions are parsed once at catalog load time (see :mod:`tddbuilder.parser`)
and evaluated many times by :mod:`tddbuilder.conditions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Eq:
    """True when the answer for *field* equals *value*."""

    field: str
    value: Any


@dataclass(frozen=True)
class Neq:
    """True when the answer for *field* differs from *value* (or is absent)."""

    field: str
    value: Any


@dataclass(frozen=True)
class Has:
    """True when the list answer for *field* contains *value*."""

    field: str
    value: Any


@dataclass(frozen=True)
class Truthy:
    """True when *field* is answered with a truthy value."""

    field: str


@dataclass(frozen=True)
class Not:
    operand: Expression


@dataclass(frozen=True)
class And:
    operands: tuple[Expression, ...]


@dataclass(frozen=True)
class Or:
    operands: tuple[Expression, ...]


Expression = Union[Eq, Neq, Has, Truthy, Not, And, Or]

# Operator names accepted in the JSON form, mapped to their node type.
OPERATORS: dict[str, type] = {
    "eq": Eq,
    "neq": Neq,
    "has": Has,
    "truthy": Truthy,
    "not": Not,
    "and": And,
    "or": Or,
}
