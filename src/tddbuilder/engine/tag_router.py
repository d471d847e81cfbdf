"""Tag router: narrow the candidate questions to the requested topics."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from tddbuilder.engine.rules import filter_questions
from tddbuilder.model.complexity import ComplexityLevel
from tddbuilder.model.question import Question
from tddbuilder.model.tags import TagMetadata


def _tags_of(question: Question, tag_metadata: TagMetadata | None) -> tuple[str, ...]:
    if tag_metadata is None:
        return question.tags
    return tag_metadata.tags_for(question)


def filter_by_tags(
    questions: Iterable[Question],
    selected_tags: Iterable[str] | None,
    answers: Mapping[str, Any],
    tag_metadata: TagMetadata | None = None,
) -> list[Question]:
    """Filter by topic tags, then apply skip conditions.

    Rules:
    - No selected tags: every question passes the tag step.
    - Questions tagged ``foundation`` are always kept.
    - Otherwise keep a question when any of its tags is selected (OR).
    - Skip conditions are evaluated afterwards; a tag match never bypasses them.

    Output order follows the input (catalog) order.
    """
    selected = set(selected_tags or ())
    questions = list(questions)
    if selected:
        questions = [
            q
            for q in questions
            if q.is_foundation or selected.intersection(_tags_of(q, tag_metadata))
        ]
    return filter_questions(questions, answers)


def questions_by_tags(
    questions: Iterable[Question],
    tags: Iterable[str],
    tag_metadata: TagMetadata | None = None,
) -> list[Question]:
    """Questions carrying any of *tags*, without skip evaluation."""
    wanted = set(tags)
    return [q for q in questions if wanted.intersection(_tags_of(q, tag_metadata))]


def group_by_primary_tag(questions: Iterable[Question]) -> dict[str, list[Question]]:
    groups: dict[str, list[Question]] = {}
    for question in questions:
        groups.setdefault(question.primary_tag, []).append(question)
    return groups


def questions_for_level(
    questions: Iterable[Question],
    tag_metadata: TagMetadata,
    level: ComplexityLevel | str,
) -> list[Question]:
    """Questions relevant at *level*; fields without metadata belong to base only."""
    level = ComplexityLevel(level)
    selected: list[Question] = []
    for question in questions:
        meta = tag_metadata.field(question.id)
        if meta is None:
            if level is ComplexityLevel.BASE:
                selected.append(question)
        elif level.value in meta.complexity_levels:
            selected.append(question)
    return selected


def answered_weight(tag_metadata: TagMetadata, answered_ids: Iterable[str]) -> int:
    """Total scoring weight of the answered fields."""
    return sum(tag_metadata.weight(field_id) for field_id in sorted(set(answered_ids)))
