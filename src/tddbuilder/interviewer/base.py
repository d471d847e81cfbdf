"""Interviewer protocol definition."""

from __future__ import annotations

from typing import Any, Protocol

from tddbuilder.model.question import Question
from tddbuilder.model.result import ValidationResult


class Interviewer(Protocol):
    """Something that can put a question to the user and return the raw reply.

    ``ask`` returns ``None`` when the user gave no answer. ``reject`` is
    called with the failed validation result before the question is asked
    again.
    """

    def ask(self, question: Question, attempt: int = 1) -> Any: ...

    def reject(self, question: Question, result: ValidationResult) -> None: ...
