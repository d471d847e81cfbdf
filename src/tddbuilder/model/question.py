"""Question model: catalog entries presented during the interview."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tddbuilder.model.expression import Expression

FOUNDATION_TAG = "foundation"


class Stage(Enum):
    """Interview pass in which a question is surfaced."""

    CORE = "core"
    REVIEW = "review"
    DEEP_DIVE = "deep_dive"


class QuestionType(Enum):
    """Kind of answer a question expects."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    BOOLEAN = "boolean"
    NUMBER = "number"
    DATE = "date"

    @property
    def is_choice(self) -> bool:
        return self in (QuestionType.SELECT, QuestionType.MULTI_SELECT)


@dataclass(frozen=True)
class Constraints:
    """Closed set of validation constraints a question may declare."""

    required: bool = False
    type: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_items: int | None = None
    max_items: int | None = None
    pattern: str | None = None
    allowed_values: tuple[Any, ...] | None = None


@dataclass(frozen=True)
class Help:
    """Inline guidance shown next to a question and on validation failure."""

    why: str = ""
    examples: tuple[str, ...] = ()
    learn_more: str | None = None


@dataclass(frozen=True)
class Question:
    """A single interview item. ``id`` doubles as the answer-map key."""

    id: str
    stage: Stage
    type: QuestionType
    prompt: str
    tags: tuple[str, ...]
    hint: str = ""
    options: tuple[str, ...] = ()
    validation: Constraints = field(default_factory=Constraints)
    skip_if: Expression | None = None
    triggers: dict[str, tuple[str, ...]] = field(default_factory=dict)
    help: Help | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Question id must be a non-empty string")
        if not self.tags:
            raise ValueError(f"Question '{self.id}' must carry at least one tag")

    def __hash__(self) -> int:
        # triggers is a dict; ids are unique within a catalog.
        return hash(self.id)

    @property
    def primary_tag(self) -> str:
        return self.tags[0]

    @property
    def is_foundation(self) -> bool:
        return FOUNDATION_TAG in self.tags

    @property
    def required(self) -> bool:
        return self.validation.required
