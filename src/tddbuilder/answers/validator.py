"""Answer validator: check one proposed answer against its question.

Checks run in three categories and stop at the first one that fails:

1. required: an empty answer to a required question
2. type: coercion of the raw answer to the question's declared type
3. constraints: length, pattern, numeric bounds, item counts, membership

Every violation inside the failing category is reported. Messages come from
fixed templates; no exception text ever reaches the user.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

from tddbuilder.answers.dates import check_iso_date
from tddbuilder.conditions import values_equal
from tddbuilder.model.question import Constraints, Question, QuestionType
from tddbuilder.model.result import ValidationResult

REQUIRED_MESSAGE = "This question requires an answer"

_TRUE_WORDS = frozenset({"yes", "y", "true", "1"})
_FALSE_WORDS = frozenset({"no", "n", "false", "0"})

_TEXT_TYPES = (QuestionType.TEXT, QuestionType.TEXTAREA, QuestionType.SELECT, QuestionType.DATE)


class _TypeMismatch(Exception):
    """Raised internally when a raw answer cannot be coerced."""


def _items(limit: int) -> str:
    return "item" if limit == 1 else "items"


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple, set)):
        return "array"
    return "object"


def _mismatch(expected: str, value: Any) -> _TypeMismatch:
    return _TypeMismatch(f"Expected {expected}, but got {_json_type(value)}")


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


# ---------------------------------------------------------------------------
# Emptiness
# ---------------------------------------------------------------------------


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _is_empty(raw: Any) -> bool:
    return _is_blank(raw) or (isinstance(raw, (list, tuple)) and len(raw) == 0)


def _required_errors(question: Question) -> list[str]:
    if question.type is QuestionType.MULTI_SELECT:
        limit = max(1, question.validation.min_items or 0)
        return [f"Please select at least {limit} {_items(limit)}"]
    return [REQUIRED_MESSAGE]


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def _coerce_text(raw: Any) -> str:
    if not isinstance(raw, str):
        raise _mismatch("string", raw)
    return raw.strip()


def _coerce_number(raw: Any, constraints: Constraints) -> int | float:
    if isinstance(raw, bool):
        raise _mismatch("number", raw)
    if isinstance(raw, (int, float)):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise _mismatch("number", raw) from None
    else:
        raise _mismatch("number", raw)

    if isinstance(value, float) and not math.isfinite(value):
        raise _TypeMismatch(f"Expected number, but got {value}")

    if constraints.type == "integer":
        if isinstance(value, float):
            if not value.is_integer():
                raise _TypeMismatch("Expected integer, but got number")
            value = int(value)
    return value


def _coerce_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (str, int)):
        word = str(raw).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise _mismatch("boolean", raw)


def _coerce_list(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",") if part.strip()]
    if not isinstance(raw, (list, tuple)):
        raise _mismatch("array", raw)
    values: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise _mismatch("string", item)
        values.append(item.strip())
    return values


def _coerce_date(raw: Any) -> str:
    text = _coerce_text(raw)
    check = check_iso_date(text)
    if not check.is_valid:
        raise _TypeMismatch(check.error or "Date must use ISO-8601 format (YYYY-MM-DD)")
    return text


def coerce(question: Question, raw: Any) -> Any:
    """Convert a raw answer to the question's type; raises on mismatch."""
    qtype = question.type
    if qtype is QuestionType.NUMBER:
        return _coerce_number(raw, question.validation)
    if qtype is QuestionType.BOOLEAN:
        return _coerce_boolean(raw)
    if qtype is QuestionType.MULTI_SELECT:
        return _coerce_list(raw)
    if qtype is QuestionType.DATE:
        return _coerce_date(raw)
    return _coerce_text(raw)


# ---------------------------------------------------------------------------
# Constraint checks
# ---------------------------------------------------------------------------


def _string_errors(value: str, c: Constraints) -> list[str]:
    errors = []
    if c.min_length is not None and len(value) < c.min_length:
        errors.append(f"Answer must be at least {c.min_length} characters long")
    if c.max_length is not None and len(value) > c.max_length:
        errors.append(f"Answer must be no more than {c.max_length} characters long")
    if c.pattern is not None and re.search(c.pattern, value) is None:
        errors.append("Answer does not match the required format")
    return errors


def _number_errors(value: float, c: Constraints) -> list[str]:
    errors = []
    if c.minimum is not None and value < c.minimum:
        errors.append(f"Value must be at least {_format_number(c.minimum)}")
    if c.maximum is not None and value > c.maximum:
        errors.append(f"Value must be no more than {_format_number(c.maximum)}")
    return errors


def _item_errors(values: list[str], c: Constraints) -> list[str]:
    errors = []
    if c.min_items is not None and len(values) < c.min_items:
        errors.append(f"Please select at least {c.min_items} {_items(c.min_items)}")
    if c.max_items is not None and len(values) > c.max_items:
        errors.append(f"Please select no more than {c.max_items} {_items(c.max_items)}")
    return errors


def _is_allowed(value: Any, allowed: Iterable[Any]) -> bool:
    return any(values_equal(value, candidate) for candidate in allowed)


def _membership_errors(question: Question, value: Any) -> list[str]:
    values = value if isinstance(value, list) else [value]
    if question.type.is_choice and question.options:
        if not all(v in question.options for v in values):
            return ["Please select from the available options"]
    allowed = question.validation.allowed_values
    if allowed is not None and not all(_is_allowed(v, allowed) for v in values):
        if question.options:
            return ["Please select from the available options"]
        listed = ", ".join(str(a) for a in allowed)
        return [f"Value must be one of the allowed values: {listed}"]
    return []


def constraint_errors(question: Question, value: Any) -> list[str]:
    """All constraint violations for an already-coerced *value*."""
    c = question.validation
    errors: list[str] = []
    if question.type in _TEXT_TYPES:
        errors.extend(_string_errors(value, c))
    elif question.type is QuestionType.NUMBER:
        errors.extend(_number_errors(value, c))
    elif question.type is QuestionType.MULTI_SELECT:
        errors.extend(_item_errors(value, c))
    errors.extend(_membership_errors(question, value))
    return errors


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _failure(question: Question, errors: list[str]) -> ValidationResult:
    result = ValidationResult(valid=False, errors=errors)
    if question.help is not None:
        if question.help.examples:
            result.examples = list(question.help.examples)
        result.learn_more = question.help.learn_more
    return result


def validate(question: Question, raw: Any) -> ValidationResult:
    """Validate *raw* for *question*; never raises for a bad answer."""
    if _is_empty(raw):
        if question.required:
            return _failure(question, _required_errors(question))
        if _is_blank(raw):
            return ValidationResult.ok(None)

    try:
        value = coerce(question, raw)
    except _TypeMismatch as exc:
        return _failure(question, [str(exc)])

    if question.required and _is_empty(value):
        return _failure(question, _required_errors(question))

    errors = constraint_errors(question, value)
    if errors:
        return _failure(question, errors)
    return ValidationResult.ok(value)


def validate_answers(
    questions: Iterable[Question], answers: Mapping[str, Any]
) -> dict[str, ValidationResult]:
    """Validate every answered question; unanswered ones count as valid."""
    results: dict[str, ValidationResult] = {}
    for question in questions:
        if question.id not in answers:
            results[question.id] = ValidationResult(valid=True)
            continue
        results[question.id] = validate(question, answers[question.id])
    return results


def all_valid(results: Mapping[str, ValidationResult]) -> bool:
    return all(r.valid for r in results.values())


def all_errors(results: Mapping[str, ValidationResult]) -> dict[str, list[str]]:
    """Errors keyed by question id, only for failed results."""
    return {qid: list(r.errors) for qid, r in results.items() if not r.valid}
