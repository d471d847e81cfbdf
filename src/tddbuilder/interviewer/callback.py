"""CallbackInterviewer: delegates to user-supplied callback functions."""

from __future__ import annotations

from typing import Any, Callable

from tddbuilder.model.question import Question
from tddbuilder.model.result import ValidationResult


class CallbackInterviewer:
    """Interviewer that delegates answering to a callback.

    The callback receives the question and the attempt number. An optional
    *on_reject* callback receives failed validation results.
    """

    def __init__(
        self,
        callback: Callable[[Question, int], Any],
        on_reject: Callable[[Question, ValidationResult], None] | None = None,
    ) -> None:
        self._callback = callback
        self._on_reject = on_reject

    def ask(self, question: Question, attempt: int = 1) -> Any:
        return self._callback(question, attempt)

    def reject(self, question: Question, result: ValidationResult) -> None:
        if self._on_reject is not None:
            self._on_reject(question, result)
