"""Structural checks for questionnaire and tag catalogs.

Each rule is a function taking the raw catalog document (the decoded JSON
object) and returning a list of Diagnostic objects describing any issues
found. Rules never raise; a malformed entry yields a diagnostic and is
otherwise ignored by later rules.
"""

from __future__ import annotations

import math
import re
from typing import Any

from tddbuilder.conditions import referenced_fields
from tddbuilder.model.complexity import ComplexityLevel
from tddbuilder.model.diagnostic import Diagnostic, Severity
from tddbuilder.model.question import FOUNDATION_TAG, QuestionType, Stage
from tddbuilder.parser import ExpressionError, parse_expression


# ---------------------------------------------------------------------------
# Known value sets
# ---------------------------------------------------------------------------

KNOWN_STAGES = frozenset(s.value for s in Stage)
KNOWN_TYPES = frozenset(t.value for t in QuestionType)
KNOWN_LEVELS = frozenset(level.value for level in ComplexityLevel)

# Catalog spellings accepted for each constraint field.
CONSTRAINT_ALIASES: dict[str, str] = {
    "required": "required",
    "type": "type",
    "min_length": "min_length",
    "minLength": "min_length",
    "max_length": "max_length",
    "maxLength": "max_length",
    "minimum": "minimum",
    "maximum": "maximum",
    "min_items": "min_items",
    "minItems": "min_items",
    "max_items": "max_items",
    "maxItems": "max_items",
    "pattern": "pattern",
    "allowed_values": "allowed_values",
    "enum": "allowed_values",
}

# JSON-schema-only keys tolerated in catalogs but ignored by the validator.
IGNORED_CONSTRAINT_KEYS = frozenset({"items", "format", "description"})

QUESTION_REQUIRED_KEYS = ("id", "stage", "type", "tags")

# Constraint groups that share a value shape.
_LENGTH_BOUNDS = frozenset({"min_length", "max_length", "min_items", "max_items"})
_NUMERIC_BOUNDS = frozenset({"minimum", "maximum"})
_BOUND_PAIRS = (
    ("min_length", "max_length"),
    ("minimum", "maximum"),
    ("min_items", "max_items"),
)


def _questions(document: dict[str, Any]) -> list[dict[str, Any]]:
    questions = document.get("questions")
    if not isinstance(questions, list):
        return []
    return [q for q in questions if isinstance(q, dict)]


def _known_ids(document: dict[str, Any]) -> set[str]:
    return {q["id"] for q in _questions(document) if isinstance(q.get("id"), str)}


def _qid(question: dict[str, Any]) -> str | None:
    qid = question.get("id")
    return qid if isinstance(qid, str) else None


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# ---------------------------------------------------------------------------
# Questionnaire rules (ERROR severity)
# ---------------------------------------------------------------------------


def check_document_keys(document: dict[str, Any]) -> list[Diagnostic]:
    """The catalog needs a version string and a list of questions."""
    diagnostics: list[Diagnostic] = []
    if "version" not in document:
        diagnostics.append(
            Diagnostic(
                rule="check_document_keys",
                severity=Severity.ERROR,
                message="Catalog is missing required property 'version'.",
                fix="Add a top-level \"version\" string.",
            )
        )
    if not isinstance(document.get("questions"), list):
        diagnostics.append(
            Diagnostic(
                rule="check_document_keys",
                severity=Severity.ERROR,
                message="Catalog is missing required property 'questions' (a list).",
                fix="Add a top-level \"questions\" array.",
            )
        )
    else:
        for i, entry in enumerate(document["questions"]):
            if not isinstance(entry, dict):
                diagnostics.append(
                    Diagnostic(
                        rule="check_document_keys",
                        severity=Severity.ERROR,
                        message=f"Question entry #{i} is not an object.",
                    )
                )
    return diagnostics


def check_required_fields(document: dict[str, Any]) -> list[Diagnostic]:
    """Every question declares id, stage, type, tags and prompt text."""
    diagnostics: list[Diagnostic] = []
    for i, question in enumerate(_questions(document)):
        qid = _qid(question)
        missing = [k for k in QUESTION_REQUIRED_KEYS if k not in question]
        if "question" not in question and "prompt" not in question:
            missing.append("question")
        if not qid and "id" not in missing:
            missing.insert(0, "id")
        if missing:
            where = f"'{qid}'" if qid else f"#{i}"
            diagnostics.append(
                Diagnostic(
                    rule="check_required_fields",
                    severity=Severity.ERROR,
                    message=f"Question {where} is missing: {', '.join(missing)}.",
                    question_id=qid,
                )
            )
    return diagnostics


def check_unique_ids(document: dict[str, Any]) -> list[Diagnostic]:
    """Question ids must be unique across the catalog."""
    seen: set[str] = set()
    reported: set[str] = set()
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        qid = _qid(question)
        if qid is None:
            continue
        if qid in seen and qid not in reported:
            reported.add(qid)
            diagnostics.append(
                Diagnostic(
                    rule="check_unique_ids",
                    severity=Severity.ERROR,
                    message=f"Duplicate question id '{qid}'.",
                    question_id=qid,
                    fix="Give every question a unique dotted id.",
                )
            )
        seen.add(qid)
    return diagnostics


def check_tags_present(document: dict[str, Any]) -> list[Diagnostic]:
    """Every question carries at least one string tag."""
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        if "tags" not in question:
            continue  # check_required_fields reports it
        tags = question["tags"]
        if (
            not isinstance(tags, list)
            or not tags
            or not all(isinstance(t, str) and t for t in tags)
        ):
            diagnostics.append(
                Diagnostic(
                    rule="check_tags_present",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' must have a non-empty list of tags.",
                    question_id=_qid(question),
                    fix=f"Tag foundational questions with '{FOUNDATION_TAG}'.",
                )
            )
    return diagnostics


def check_stage_known(document: dict[str, Any]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        stage = question.get("stage")
        if "stage" in question and (not isinstance(stage, str) or stage not in KNOWN_STAGES):
            diagnostics.append(
                Diagnostic(
                    rule="check_stage_known",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' has unknown stage '{stage}'.",
                    question_id=_qid(question),
                    fix=f"Use one of: {', '.join(sorted(KNOWN_STAGES))}.",
                )
            )
    return diagnostics


def check_type_known(document: dict[str, Any]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        qtype = question.get("type")
        if "type" in question and (not isinstance(qtype, str) or qtype not in KNOWN_TYPES):
            diagnostics.append(
                Diagnostic(
                    rule="check_type_known",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' has unknown type '{qtype}'.",
                    question_id=_qid(question),
                    fix=f"Use one of: {', '.join(sorted(KNOWN_TYPES))}.",
                )
            )
    return diagnostics


def check_choice_options(document: dict[str, Any]) -> list[Diagnostic]:
    """select / multi_select questions must list their options."""
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        options = question.get("options")
        if options is not None and not _is_string_list(options):
            diagnostics.append(
                Diagnostic(
                    rule="check_choice_options",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' options must be a list of strings.",
                    question_id=_qid(question),
                )
            )
            continue
        if question.get("type") not in ("select", "multi_select"):
            continue
        if not options:
            diagnostics.append(
                Diagnostic(
                    rule="check_choice_options",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' is a {question['type']} without options.",
                    question_id=_qid(question),
                    fix="Add a non-empty \"options\" array.",
                )
            )
    return diagnostics


def check_constraint_kinds(document: dict[str, Any]) -> list[Diagnostic]:
    """Validation bags may only use the known constraint kinds."""
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        bag = question.get("validation", {})
        if bag is None:
            continue
        if not isinstance(bag, dict):
            diagnostics.append(
                Diagnostic(
                    rule="check_constraint_kinds",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' has a non-object validation block.",
                    question_id=_qid(question),
                )
            )
            continue
        unknown = [
            k for k in bag if k not in CONSTRAINT_ALIASES and k not in IGNORED_CONSTRAINT_KEYS
        ]
        if unknown:
            diagnostics.append(
                Diagnostic(
                    rule="check_constraint_kinds",
                    severity=Severity.ERROR,
                    message=(
                        f"Question '{_qid(question)}' uses unknown constraint(s): "
                        f"{', '.join(sorted(unknown))}."
                    ),
                    question_id=_qid(question),
                    fix=f"Use one of: {', '.join(sorted(set(CONSTRAINT_ALIASES.values())))}.",
                )
            )
    return diagnostics


def check_pattern_compiles(document: dict[str, Any]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        bag = question.get("validation")
        if not isinstance(bag, dict) or not isinstance(bag.get("pattern"), str):
            continue  # check_constraint_values reports a non-string pattern
        try:
            re.compile(bag["pattern"])
        except re.error as exc:
            diagnostics.append(
                Diagnostic(
                    rule="check_pattern_compiles",
                    severity=Severity.ERROR,
                    message=f"Question '{_qid(question)}' has an invalid pattern: {exc}.",
                    question_id=_qid(question),
                )
            )
    return diagnostics


def _constraint_shape_error(name: str, value: Any) -> str | None:
    if name in _LENGTH_BOUNDS:
        if not _is_int(value) or value < 0:
            return "a non-negative integer"
    elif name in _NUMERIC_BOUNDS:
        if not _is_real(value):
            return "a finite number"
    elif name == "required":
        if not isinstance(value, bool):
            return "true or false"
    elif name in ("type", "pattern"):
        if not isinstance(value, str):
            return "a string"
    elif name == "allowed_values":
        if not isinstance(value, list):
            return "a list"
    return None


def check_constraint_values(document: dict[str, Any]) -> list[Diagnostic]:
    """Each known constraint must carry a value of the right JSON type.

    Values are never coerced: ``"required": "false"`` is an error rather
    than a truthy string.
    """
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        bag = question.get("validation")
        if not isinstance(bag, dict):
            continue  # check_constraint_kinds reports a non-object bag
        qid = _qid(question)
        canonical: dict[str, Any] = {}
        for key, value in bag.items():
            name = CONSTRAINT_ALIASES.get(key)
            if name is None or value is None:
                continue
            expected = _constraint_shape_error(name, value)
            if expected is not None:
                diagnostics.append(
                    Diagnostic(
                        rule="check_constraint_values",
                        severity=Severity.ERROR,
                        message=f"Question '{qid}' constraint '{key}' must be {expected}, got {value!r}.",
                        question_id=qid,
                    )
                )
                continue
            canonical[name] = value
        for low, high in _BOUND_PAIRS:
            if low in canonical and high in canonical and canonical[low] > canonical[high]:
                diagnostics.append(
                    Diagnostic(
                        rule="check_constraint_values",
                        severity=Severity.ERROR,
                        message=f"Question '{qid}' has {low} greater than {high}.",
                        question_id=qid,
                    )
                )
    return diagnostics


def check_help_shape(document: dict[str, Any]) -> list[Diagnostic]:
    """help is an object of strings; examples are lists of strings."""
    diagnostics: list[Diagnostic] = []

    def report(question: dict[str, Any], message: str) -> None:
        diagnostics.append(
            Diagnostic(
                rule="check_help_shape",
                severity=Severity.ERROR,
                message=f"Question '{_qid(question)}' {message}",
                question_id=_qid(question),
            )
        )

    for question in _questions(document):
        examples = question.get("examples")
        if examples is not None and not _is_string_list(examples):
            report(question, "examples must be a list of strings.")
        help_raw = question.get("help")
        if help_raw is None:
            continue
        if not isinstance(help_raw, dict):
            report(question, "help must be an object.")
            continue
        examples = help_raw.get("examples")
        if examples is not None and not _is_string_list(examples):
            report(question, "help.examples must be a list of strings.")
        for key in ("why", "learn_more", "learnMore"):
            value = help_raw.get(key)
            if value is not None and not isinstance(value, str):
                report(question, f"help.{key} must be a string.")
    return diagnostics


def check_skip_if(document: dict[str, Any]) -> list[Diagnostic]:
    """skip_if must parse and may only reference questions in the catalog."""
    known = _known_ids(document)
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        raw = question.get("skip_if")
        if raw is None:
            continue
        qid = _qid(question)
        try:
            expr = parse_expression(raw)
        except ExpressionError as exc:
            diagnostics.append(
                Diagnostic(
                    rule="check_skip_if",
                    severity=Severity.ERROR,
                    message=f"Question '{qid}' has an invalid skip_if: {exc}",
                    question_id=qid,
                    fix="Use eq/neq/has/not/and/or objects or a 'field == value' string.",
                )
            )
            continue
        if expr is None:
            continue
        for field_id in referenced_fields(expr):
            if field_id not in known:
                diagnostics.append(
                    Diagnostic(
                        rule="check_skip_if",
                        severity=Severity.ERROR,
                        message=f"Question '{qid}' skip_if references unknown question '{field_id}'.",
                        question_id=qid,
                        fix=f"Define question '{field_id}' or fix the condition.",
                    )
                )
    return diagnostics


def check_trigger_targets(document: dict[str, Any]) -> list[Diagnostic]:
    """Every trigger must map an answer value to a list of existing ids."""
    known = _known_ids(document)
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        triggers = question.get("triggers")
        if triggers is None:
            continue
        qid = _qid(question)
        if not isinstance(triggers, dict):
            diagnostics.append(
                Diagnostic(
                    rule="check_trigger_targets",
                    severity=Severity.ERROR,
                    message=f"Question '{qid}' triggers must be an object of value -> ids.",
                    question_id=qid,
                )
            )
            continue
        for value, targets in triggers.items():
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                diagnostics.append(
                    Diagnostic(
                        rule="check_trigger_targets",
                        severity=Severity.ERROR,
                        message=f"Question '{qid}' trigger '{value}' must list question ids.",
                        question_id=qid,
                    )
                )
                continue
            for target in targets:
                if target not in known:
                    diagnostics.append(
                        Diagnostic(
                            rule="check_trigger_targets",
                            severity=Severity.ERROR,
                            message=(
                                f"Question '{qid}' trigger '{value}' references "
                                f"unknown question '{target}'."
                            ),
                            question_id=qid,
                            fix=f"Define question '{target}' or remove it from the trigger.",
                        )
                    )
    return diagnostics


# ---------------------------------------------------------------------------
# Questionnaire rules (WARNING severity)
# ---------------------------------------------------------------------------


def check_trigger_keys_match_options(document: dict[str, Any]) -> list[Diagnostic]:
    """Trigger keys that can never be answered are dead. WARNING."""
    diagnostics: list[Diagnostic] = []
    for question in _questions(document):
        triggers = question.get("triggers")
        if not isinstance(triggers, dict):
            continue
        qtype = question.get("type")
        if qtype in ("select", "multi_select"):
            reachable = {str(o) for o in question.get("options") or []}
        elif qtype == "boolean":
            reachable = {"true", "false"}
        else:
            continue
        for value in triggers:
            if value not in reachable:
                diagnostics.append(
                    Diagnostic(
                        rule="check_trigger_keys_match_options",
                        severity=Severity.WARNING,
                        message=(
                            f"Question '{_qid(question)}' trigger key '{value}' "
                            "is not a possible answer."
                        ),
                        question_id=_qid(question),
                    )
                )
    return diagnostics


def check_foundation_present(document: dict[str, Any]) -> list[Diagnostic]:
    """A catalog without foundation questions has nothing to always ask. WARNING."""
    for question in _questions(document):
        tags = question.get("tags")
        if isinstance(tags, list) and FOUNDATION_TAG in tags:
            return []
    if not _questions(document):
        return []
    return [
        Diagnostic(
            rule="check_foundation_present",
            severity=Severity.WARNING,
            message=f"No question carries the '{FOUNDATION_TAG}' tag.",
            fix="Tag the questions every interview must ask with 'foundation'.",
        )
    ]


# ---------------------------------------------------------------------------
# Tag metadata rules
# ---------------------------------------------------------------------------


def check_tag_document_keys(document: dict[str, Any]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for key, kind in (("version", str), ("tags", dict), ("field_metadata", dict)):
        if not isinstance(document.get(key), kind):
            diagnostics.append(
                Diagnostic(
                    rule="check_tag_document_keys",
                    severity=Severity.ERROR,
                    message=f"Tag catalog is missing required property '{key}'.",
                )
            )
    return diagnostics


def check_field_metadata(document: dict[str, Any]) -> list[Diagnostic]:
    """Field metadata entries must be well-formed."""
    diagnostics: list[Diagnostic] = []
    fields = document.get("field_metadata")
    if not isinstance(fields, dict):
        return []
    for field_id, meta in fields.items():
        if not isinstance(meta, dict):
            diagnostics.append(
                Diagnostic(
                    rule="check_field_metadata",
                    severity=Severity.ERROR,
                    message=f"Field metadata for '{field_id}' is not an object.",
                    question_id=field_id,
                )
            )
            continue
        for key in ("tags", "related_fields"):
            if not _is_string_list(meta.get(key, [])):
                diagnostics.append(
                    Diagnostic(
                        rule="check_field_metadata",
                        severity=Severity.ERROR,
                        message=f"Field '{field_id}' {key} must be a list of strings.",
                        question_id=field_id,
                    )
                )
        levels = meta.get("complexity_levels", [])
        if isinstance(levels, list):
            bad_levels = [lv for lv in levels if not isinstance(lv, str) or lv not in KNOWN_LEVELS]
        else:
            bad_levels = [levels]
        if bad_levels:
            diagnostics.append(
                Diagnostic(
                    rule="check_field_metadata",
                    severity=Severity.ERROR,
                    message=(
                        f"Field '{field_id}' lists unknown complexity level(s): "
                        f"{', '.join(str(b) for b in bad_levels)}."
                    ),
                    question_id=field_id,
                    fix=f"Use one of: {', '.join(level.value for level in ComplexityLevel)}.",
                )
            )
        weight = meta.get("weight", 1)
        if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
            diagnostics.append(
                Diagnostic(
                    rule="check_field_metadata",
                    severity=Severity.ERROR,
                    message=f"Field '{field_id}' weight must be a non-negative integer.",
                    question_id=field_id,
                )
            )
    return diagnostics


def check_field_references(
    document: dict[str, Any], question_ids: set[str]
) -> list[Diagnostic]:
    """Metadata must describe catalog questions; related fields should too."""
    diagnostics: list[Diagnostic] = []
    fields = document.get("field_metadata")
    if not isinstance(fields, dict):
        return []
    for field_id, meta in fields.items():
        if field_id not in question_ids:
            diagnostics.append(
                Diagnostic(
                    rule="check_field_references",
                    severity=Severity.ERROR,
                    message=f"Field metadata references unknown question '{field_id}'.",
                    question_id=field_id,
                )
            )
            continue
        if not isinstance(meta, dict) or not _is_string_list(meta.get("related_fields", [])):
            continue  # check_field_metadata reports the shape
        for related in meta.get("related_fields", []):
            if related not in question_ids:
                diagnostics.append(
                    Diagnostic(
                        rule="check_field_references",
                        severity=Severity.WARNING,
                        message=f"Field '{field_id}' lists unknown related field '{related}'.",
                        question_id=field_id,
                    )
                )
    return diagnostics


# ---------------------------------------------------------------------------
# Rule registries
# ---------------------------------------------------------------------------

ALL_RULES = [
    # errors
    check_document_keys,
    check_required_fields,
    check_unique_ids,
    check_tags_present,
    check_stage_known,
    check_type_known,
    check_choice_options,
    check_constraint_kinds,
    check_pattern_compiles,
    check_constraint_values,
    check_help_shape,
    check_skip_if,
    check_trigger_targets,
    # warnings
    check_trigger_keys_match_options,
    check_foundation_present,
]

TAG_RULES = [
    check_tag_document_keys,
    check_field_metadata,
]
