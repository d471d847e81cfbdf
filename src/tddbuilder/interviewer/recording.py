"""RecordingInterviewer: wraps another interviewer and records all Q&A pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tddbuilder.model.question import Question
from tddbuilder.model.result import ValidationResult


@dataclass(frozen=True)
class QAPair:
    """A recorded question-answer exchange."""

    question: Question
    answer: Any
    attempt: int = 1


class RecordingInterviewer:
    """Interviewer decorator that records every exchange and every rejection."""

    def __init__(self, inner: Any) -> None:
        self._inner = inner
        self._records: list[QAPair] = []
        self._rejections: list[tuple[str, ValidationResult]] = []

    def ask(self, question: Question, attempt: int = 1) -> Any:
        answer = self._inner.ask(question, attempt)
        self._records.append(QAPair(question=question, answer=answer, attempt=attempt))
        return answer

    def reject(self, question: Question, result: ValidationResult) -> None:
        self._rejections.append((question.id, result))
        self._inner.reject(question, result)

    def transcript(self) -> list[QAPair]:
        return list(self._records)

    def rejections(self) -> list[tuple[str, ValidationResult]]:
        return list(self._rejections)

    def clear(self) -> None:
        self._records.clear()
        self._rejections.clear()
