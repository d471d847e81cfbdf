"""Markdown rendering of the technical design document."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from tddbuilder.document.sections import OTHER, format_value, has_value, section_by_key, section_for
from tddbuilder.engine.complexity import describe_level, sections_for_level
from tddbuilder.engine.rules import applied_triggers, filter_questions
from tddbuilder.model.catalog import Schema
from tddbuilder.model.complexity import ComplexityLevel
from tddbuilder.model.question import Question

logger = logging.getLogger(__name__)

NOT_PROVIDED = "*Not Provided*"
DEFAULT_TITLE = "Untitled Project"


def _format_block(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "\n".join(f"- {item}" for item in value) if value else NOT_PROVIDED
    return format_value(value)


def _relevant_questions(schema: Schema, answers: Mapping[str, Any]) -> list[Question]:
    """Answered questions plus those the answers leave visible, catalog order."""
    follow_ups = schema.follow_up_ids()
    revealed = {q.id for q in applied_triggers(answers, schema)[0]}
    candidates = [q for q in schema if q.id not in follow_ups or q.id in revealed]
    visible = {q.id for q in filter_questions(candidates, answers)}
    return [q for q in schema if q.id in answers or q.id in visible]


def render_markdown(
    schema: Schema,
    answers: Mapping[str, Any],
    level: ComplexityLevel | str,
    generated_at: datetime | None = None,
) -> str:
    """Render one heading per section of *level*, one entry per question."""
    level = ComplexityLevel(level)
    generated_at = generated_at or datetime.now(timezone.utc)
    title = answers.get("project.name") if has_value(answers.get("project.name")) else DEFAULT_TITLE

    lines = [
        f"# Technical Design Document: {title}",
        "",
        f"> Complexity level: **{level.value}** ({describe_level(level)})",
        f"> Generated: {generated_at.strftime('%Y-%m-%d %H:%M UTC')}",
        "",
    ]

    questions = _relevant_questions(schema, answers)
    for number, key in enumerate(sections_for_level(level), start=1):
        section = section_by_key(key)
        lines.append(f"## {number}. {section.title}")
        lines.append("")
        members = [q for q in questions if section_for(q.id).key == key]
        if not members:
            lines.extend([NOT_PROVIDED, ""])
            continue
        for question in members:
            lines.append(f"### {question.prompt}")
            lines.append("")
            value = answers.get(question.id)
            lines.append(_format_block(value) if has_value(value) else NOT_PROVIDED)
            lines.append("")

    # Answers whose prefix maps to no section, catalog questions first.
    extra = [q.id for q in schema if q.id in answers] + [k for k in answers if k not in schema]
    extra = [k for k in extra if section_for(k) is OTHER and has_value(answers[k])]
    if extra:
        lines.extend([f"## {OTHER.title}", ""])
        for key in extra:
            question = schema.question_by_id(key)
            heading = question.prompt if question is not None else key
            lines.extend([f"### {heading}", "", _format_block(answers[key]), ""])

    return "\n".join(lines).rstrip() + "\n"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "project"


def document_filename(answers: Mapping[str, Any]) -> str:
    name = answers.get("project.name")
    return f"{slugify(str(name)) if has_value(name) else 'project'}-tdd.md"


def write_document(markdown: str, output: Path | str, answers: Mapping[str, Any] | None = None) -> Path:
    """Write *markdown*; a directory *output* gets a name derived from the answers."""
    path = Path(output)
    if path.suffix != ".md":
        path = path / document_filename(answers or {})
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markdown, encoding="utf-8")
    logger.info("Wrote technical design document to %s", path)
    return path
