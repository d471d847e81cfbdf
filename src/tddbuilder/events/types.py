"""Event types emitted while an interview runs.

Events carry question ids, tags and counts only, never answer values.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InterviewStarted:
    question_count: int
    tags: tuple[str, ...] = ()
    file_mode: bool = False


@dataclass(frozen=True)
class StageStarted:
    stage: str
    question_count: int


@dataclass(frozen=True)
class QuestionAsked:
    question_id: str
    stage: str
    tags: tuple[str, ...]
    attempt: int = 1


@dataclass(frozen=True)
class AnswerAccepted:
    question_id: str
    tags: tuple[str, ...]


@dataclass(frozen=True)
class AnswerRejected:
    question_id: str
    errors: tuple[str, ...]
    attempt: int


@dataclass(frozen=True)
class QuestionSkipped:
    question_id: str
    tags: tuple[str, ...]
    reason: str


@dataclass(frozen=True)
class FollowUpsTriggered:
    question_id: str
    follow_up_ids: tuple[str, ...]


@dataclass(frozen=True)
class StageCompleted:
    stage: str
    answered: int
    skipped: int
    duration: float


@dataclass(frozen=True)
class ComplexityAssessed:
    recommended: str
    score: int
    selected: str | None = None


@dataclass(frozen=True)
class InterviewCompleted:
    answered: int
    level: str
    duration: float
