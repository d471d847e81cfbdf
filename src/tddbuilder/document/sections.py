"""Document layout: which answers land in which section, and how complete
each section of the chosen tier is.

Sections are keyed by the same names the complexity analyzer unlocks per
tier. Answers are routed by the prefix of their id (``privacy.pii`` belongs
to ``privacy``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from tddbuilder.engine.complexity import sections_for_level
from tddbuilder.model.catalog import Schema
from tddbuilder.model.complexity import ComplexityLevel


@dataclass(frozen=True)
class Section:
    key: str
    title: str
    prefixes: tuple[str, ...]
    key_fields: tuple[str, ...] = ()


SECTIONS: tuple[Section, ...] = (
    Section(
        "foundation",
        "Project Foundation",
        ("project", "doc", "deployment"),
        ("project.name", "project.industry", "deployment.model"),
    ),
    Section("summary", "Executive Summary", ("summary",), ("summary.problem", "summary.solution")),
    Section(
        "architecture",
        "Architecture Design",
        ("architecture", "cloud", "integrations"),
        ("architecture.style", "architecture.scale"),
    ),
    Section("operations", "Operations & Observability", ("operations",), ("operations.sla",)),
    Section(
        "security",
        "Security Architecture",
        ("security",),
        ("security.auth", "security.data_classification"),
    ),
    Section("privacy", "Privacy by Design", ("privacy",), ("privacy.pii",)),
    Section(
        "implementation", "Implementation Planning", ("implementation",), ("implementation.methodology",)
    ),
    Section("risks", "Risk Management", ("risks",), ("risks.technical",)),
    Section("compliance", "Compliance", ("compliance",)),
)

OTHER = Section("other", "Additional Information", ())

_BY_KEY = {s.key: s for s in SECTIONS}
_BY_PREFIX = {prefix: s for s in SECTIONS for prefix in s.prefixes}


def section_by_key(key: str) -> Section:
    return _BY_KEY.get(key, OTHER)


def section_for(field_id: str) -> Section:
    """Section an answer id belongs to; unknown prefixes go to ``other``."""
    return _BY_PREFIX.get(field_id.split(".", 1)[0], OTHER)


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


# ---------------------------------------------------------------------------
# Review screen
# ---------------------------------------------------------------------------


@dataclass
class AnswerEntry:
    field_id: str
    prompt: str
    value: Any


@dataclass
class SectionAnswers:
    section: Section
    entries: list[AnswerEntry] = field(default_factory=list)


def group_answers(answers: Mapping[str, Any], schema: Schema | None = None) -> list[SectionAnswers]:
    """Answers grouped by section, sections in document order.

    Within a section, entries follow catalog order when *schema* is given
    and answer-key order otherwise.
    """
    order = {q.id: i for i, q in enumerate(schema)} if schema is not None else {}
    keys = sorted(answers, key=lambda k: (order.get(k, len(order)), k)) if order else list(answers)

    grouped: dict[str, SectionAnswers] = {}
    for field_id in keys:
        section = section_for(field_id)
        question = schema.question_by_id(field_id) if schema is not None else None
        entry = AnswerEntry(field_id, question.prompt if question else field_id, answers[field_id])
        grouped.setdefault(section.key, SectionAnswers(section)).entries.append(entry)

    ranking = [s.key for s in SECTIONS] + [OTHER.key]
    return [grouped[key] for key in ranking if key in grouped]


@dataclass(frozen=True)
class SectionPreview:
    key: str
    title: str
    answered: int
    total: int
    completeness: int

    @property
    def status(self) -> str:
        if self.completeness == 100:
            return "complete"
        if self.completeness >= 50:
            return "partial"
        return "minimal"


def preview(answers: Mapping[str, Any], level: ComplexityLevel | str) -> list[SectionPreview]:
    """Sections the tier will generate, with completeness of their key fields."""
    previews = []
    for key in sections_for_level(level):
        section = section_by_key(key)
        total = len(section.key_fields)
        answered = sum(1 for f in section.key_fields if has_value(answers.get(f)))
        completeness = round(answered / total * 100) if total else 100
        previews.append(SectionPreview(key, section.title, answered, total, completeness))
    return previews


def format_value(value: Any) -> str:
    """One-line display form of an answer."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)
