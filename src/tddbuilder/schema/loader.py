"""Load questionnaire and tag catalogs from JSON into immutable models.

Loading is the single validation gate: a :class:`Schema` is only returned
after every structural rule passed, so the rest of the engine may assume
referential integrity.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from tddbuilder.model.catalog import Schema
from tddbuilder.model.diagnostic import Diagnostic, Severity
from tddbuilder.model.question import Constraints, Help, Question, QuestionType, Stage
from tddbuilder.model.tags import FieldMetadata, TagInfo, TagMetadata
from tddbuilder.parser import parse_expression
from tddbuilder.validation import (
    SchemaError,
    validate_catalog_or_raise,
    validate_tag_document_or_raise,
)
from tddbuilder.validation.rules import CONSTRAINT_ALIASES, KNOWN_STAGES

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_QUESTIONNAIRE_PATH = DATA_DIR / "questionnaire.json"
DEFAULT_TAGS_PATH = DATA_DIR / "tags.json"


def read_document(path: Path | str) -> dict[str, Any]:
    """Read and decode a JSON catalog, converting failures to SchemaError."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SchemaError([_load_failure(f"Cannot read catalog: {exc.strerror or exc}")], source=str(path)) from exc
    except json.JSONDecodeError as exc:
        raise SchemaError(
            [_load_failure(f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}")],
            source=str(path),
        ) from exc
    if not isinstance(data, dict):
        raise SchemaError([_load_failure("Catalog root must be a JSON object.")], source=str(path))
    return data


def _load_failure(message: str) -> Diagnostic:
    return Diagnostic(rule="read_document", severity=Severity.ERROR, message=message)


# ---------------------------------------------------------------------------
# Questionnaire
# ---------------------------------------------------------------------------


def load_questionnaire(path: Path | str | None = None) -> Schema:
    """Load, validate and build the question catalog."""
    path = Path(path) if path is not None else DEFAULT_QUESTIONNAIRE_PATH
    schema = parse_questionnaire(read_document(path), source=str(path))
    logger.info("Loaded %d questions from %s (version %s)", len(schema), path, schema.version)
    return schema


def parse_questionnaire(document: dict[str, Any], source: str | None = None) -> Schema:
    """Validate an already-decoded catalog document and build a Schema."""
    warnings = validate_catalog_or_raise(document, source=source)
    for diagnostic in warnings:
        logger.warning("%s", diagnostic)

    questions = tuple(_build_question(raw) for raw in document["questions"])
    stages = tuple(
        Stage(s) for s in document.get("stages", []) if s in KNOWN_STAGES
    ) or tuple(Stage)
    return Schema(
        version=str(document["version"]),
        questions=questions,
        stages=stages,
        complexity_levels=tuple(document.get("complexity_levels", [])),
    )


def _build_question(raw: dict[str, Any]) -> Question:
    return Question(
        id=raw["id"],
        stage=Stage(raw["stage"]),
        type=QuestionType(raw["type"]),
        prompt=raw.get("question") or raw.get("prompt", ""),
        hint=raw.get("hint") or "",
        tags=tuple(raw["tags"]),
        options=tuple(raw.get("options") or ()),
        validation=_build_constraints(raw.get("validation") or {}),
        skip_if=parse_expression(raw.get("skip_if")),
        triggers={str(k): tuple(v) for k, v in (raw.get("triggers") or {}).items()},
        help=_build_help(raw),
    )


def _build_constraints(bag: dict[str, Any]) -> Constraints:
    kwargs: dict[str, Any] = {}
    for key, value in bag.items():
        name = CONSTRAINT_ALIASES.get(key)
        if name is None or value is None:
            continue
        if name == "allowed_values":
            value = tuple(value)
        kwargs[name] = value
    return Constraints(**kwargs)


def _build_help(raw: dict[str, Any]) -> Help | None:
    help_raw = raw.get("help") or {}
    examples = help_raw.get("examples") or raw.get("examples") or []
    learn_more = help_raw.get("learn_more") or help_raw.get("learnMore")
    why = help_raw.get("why", "")
    if not (examples or learn_more or why):
        return None
    return Help(why=why, examples=tuple(str(e) for e in examples), learn_more=learn_more)


# ---------------------------------------------------------------------------
# Tag metadata
# ---------------------------------------------------------------------------


def load_tag_metadata(
    path: Path | str | None = None, schema: Schema | None = None
) -> TagMetadata:
    """Load the tag catalog; with *schema*, field ids are checked against it."""
    path = Path(path) if path is not None else DEFAULT_TAGS_PATH
    metadata = parse_tag_metadata(read_document(path), schema=schema, source=str(path))
    logger.info(
        "Loaded %d tags and %d field entries from %s",
        len(metadata.tags),
        len(metadata.field_metadata),
        path,
    )
    return metadata


def parse_tag_metadata(
    document: dict[str, Any], schema: Schema | None = None, source: str | None = None
) -> TagMetadata:
    question_ids = {q.id for q in schema} if schema is not None else None
    warnings = validate_tag_document_or_raise(document, question_ids, source=source)
    for diagnostic in warnings:
        logger.warning("%s", diagnostic)

    tags = {
        name: TagInfo(label=info.get("label", name), description=info.get("description", ""))
        if isinstance(info, dict)
        else TagInfo(label=str(info))
        for name, info in document["tags"].items()
    }
    fields = {
        field_id: FieldMetadata(
            tags=tuple(meta.get("tags", [])),
            related_fields=tuple(meta.get("related_fields", [])),
            complexity_levels=tuple(meta.get("complexity_levels", [])),
            weight=meta.get("weight", 1),
        )
        for field_id, meta in document["field_metadata"].items()
    }
    return TagMetadata(version=document["version"], tags=tags, field_metadata=fields)
