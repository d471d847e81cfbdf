"""Rules engine: question visibility and answer-triggered follow-ups."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from tddbuilder.conditions import evaluate
from tddbuilder.model.catalog import Schema
from tddbuilder.model.question import Question, Stage

AnswerMap = dict[str, Any]


def evaluate_skip(question: Question, answers: Mapping[str, Any]) -> bool:
    """True when *question* should be hidden. No ``skip_if`` means never skip."""
    if question.skip_if is None:
        return False
    return evaluate(question.skip_if, answers)


def trigger_key(value: Any) -> str:
    """Render a scalar answer the way catalog trigger keys spell it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def expand_triggers(question: Question, answer: Any, catalog: Schema) -> list[Question]:
    """Resolve the follow-up questions revealed by *answer*.

    List answers (multi-select) reveal the union of the triggers of every
    selected value, de-duplicated in first-seen order. Ids missing from the
    catalog are skipped.
    """
    if not question.triggers or answer is None:
        return []
    values = answer if isinstance(answer, (list, tuple)) else [answer]

    triggered: list[Question] = []
    seen: set[str] = set()
    for value in values:
        for target_id in question.triggers.get(trigger_key(value), ()):
            if target_id in seen:
                continue
            target = catalog.question_by_id(target_id)
            if target is not None:
                seen.add(target_id)
                triggered.append(target)
    return triggered


def filter_questions(
    questions: Iterable[Question], answers: Mapping[str, Any]
) -> list[Question]:
    """Drop skipped questions, preserving order."""
    return [q for q in questions if not evaluate_skip(q, answers)]


def next_questions(
    questions: Iterable[Question], answers: Mapping[str, Any], stage: Stage | str
) -> list[Question]:
    """Visible, still-unanswered questions of *stage*."""
    stage = Stage(stage)
    in_stage = [q for q in questions if q.stage is stage]
    return [q for q in filter_questions(in_stage, answers) if q.id not in answers]


def applied_triggers(
    answers: Mapping[str, Any], catalog: Schema
) -> tuple[list[Question], list[str]]:
    """All follow-ups revealed by the current answers.

    Returns the revealed questions (catalog order of the triggering answers)
    and the ``question_id:value`` keys that fired.
    """
    revealed: list[Question] = []
    fired: list[str] = []
    seen: set[str] = set()
    for question in catalog:
        if question.id not in answers or not question.triggers:
            continue
        answer = answers[question.id]
        values = answer if isinstance(answer, (list, tuple)) else [answer]
        for value in values:
            key = trigger_key(value)
            if key in question.triggers:
                fired.append(f"{question.id}:{key}")
        for follow_up in expand_triggers(question, answer, catalog):
            if follow_up.id not in seen:
                seen.add(follow_up.id)
                revealed.append(follow_up)
    return revealed, fired
