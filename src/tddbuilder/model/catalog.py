"""Schema: the immutable, validated question catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from tddbuilder.model.question import Question, Stage


@dataclass(frozen=True)
class Schema:
    """Read-only question catalog.

    Instances are only built by the loader after the catalog passed every
    structural check, so lookups may assume referential integrity.
    """

    version: str
    questions: tuple[Question, ...]
    stages: tuple[Stage, ...] = (Stage.CORE, Stage.REVIEW, Stage.DEEP_DIVE)
    complexity_levels: tuple[str, ...] = ()
    _index: dict[str, Question] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {q.id: q for q in self.questions})

    # --- lookups --------------------------------------------------------------

    def question_by_id(self, question_id: str) -> Question | None:
        return self._index.get(question_id)

    def questions_by_stage(self, stage: Stage | str) -> list[Question]:
        stage = Stage(stage)
        return [q for q in self.questions if q.stage is stage]

    def questions_by_tag(self, tag: str) -> list[Question]:
        return [q for q in self.questions if tag in q.tags]

    def follow_up_ids(self) -> set[str]:
        """Ids that some other question reveals through its triggers."""
        ids: set[str] = set()
        for question in self.questions:
            for targets in question.triggers.values():
                ids.update(targets)
        return ids

    # --- dunder helpers -------------------------------------------------------

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def __len__(self) -> int:
        return len(self.questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._index
