"""Catalog validator: runs all structural rules and reports diagnostics."""

from __future__ import annotations

from typing import Any, Callable

from tddbuilder.model.diagnostic import Diagnostic
from tddbuilder.validation.rules import ALL_RULES, TAG_RULES, check_field_references


class SchemaError(Exception):
    """Raised when a catalog is malformed or internally inconsistent."""

    def __init__(self, diagnostics: list[Diagnostic], source: str | None = None) -> None:
        self.diagnostics = diagnostics
        self.source = source
        messages = [str(d) for d in diagnostics if d.is_error]
        prefix = f"{source}: " if source else ""
        super().__init__(
            f"{prefix}Catalog failed with {len(messages)} error(s): " + "; ".join(messages)
        )


RuleFunc = Callable[[dict[str, Any]], list[Diagnostic]]


def validate_catalog(
    document: dict[str, Any], extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Run all questionnaire rules against *document*.

    Returns the full list of diagnostics (errors, warnings, info).
    """
    rules: list[RuleFunc] = list(ALL_RULES)
    if extra_rules:
        rules.extend(extra_rules)
    diagnostics: list[Diagnostic] = []
    for rule in rules:
        diagnostics.extend(rule(document))
    return diagnostics


def validate_catalog_or_raise(
    document: dict[str, Any],
    extra_rules: list[RuleFunc] | None = None,
    source: str | None = None,
) -> list[Diagnostic]:
    """Run validation; raises :class:`SchemaError` if any ERROR diagnostics exist.

    Returns the non-error diagnostics (warnings/info) when no errors are found.
    """
    diagnostics = validate_catalog(document, extra_rules=extra_rules)
    _raise_on_errors(diagnostics, source)
    return diagnostics


def validate_tag_document(
    document: dict[str, Any], question_ids: set[str] | None = None
) -> list[Diagnostic]:
    """Run the tag metadata rules, plus reference checks when ids are known."""
    diagnostics: list[Diagnostic] = []
    for rule in TAG_RULES:
        diagnostics.extend(rule(document))
    if question_ids is not None:
        diagnostics.extend(check_field_references(document, question_ids))
    return diagnostics


def validate_tag_document_or_raise(
    document: dict[str, Any],
    question_ids: set[str] | None = None,
    source: str | None = None,
) -> list[Diagnostic]:
    diagnostics = validate_tag_document(document, question_ids)
    _raise_on_errors(diagnostics, source)
    return diagnostics


def _raise_on_errors(diagnostics: list[Diagnostic], source: str | None) -> None:
    errors = [d for d in diagnostics if d.is_error]
    if errors:
        raise SchemaError(errors, source=source)
