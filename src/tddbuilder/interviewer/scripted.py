"""ScriptedInterviewer: answers from a pre-filled answer map (file mode)."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tddbuilder.model.question import Question
from tddbuilder.model.result import ValidationResult

logger = logging.getLogger(__name__)


class ScriptedInterviewer:
    """Replays answers keyed by question id.

    A scripted answer is offered once. Retries, and questions the script does
    not cover, go to *fallback* when one is given and are otherwise left
    unanswered.
    """

    def __init__(self, answers: Mapping[str, Any], fallback: Any | None = None) -> None:
        self._answers = dict(answers)
        self._fallback = fallback
        self.rejected: dict[str, list[str]] = {}

    def ask(self, question: Question, attempt: int = 1) -> Any:
        if attempt == 1 and question.id in self._answers:
            return self._answers[question.id]
        if self._fallback is not None:
            return self._fallback.ask(question, attempt)
        return None

    def reject(self, question: Question, result: ValidationResult) -> None:
        if question.id in self._answers and question.id not in self.rejected:
            logger.warning("Scripted answer for %s rejected: %s", question.id, "; ".join(result.errors))
        self.rejected.setdefault(question.id, []).extend(result.errors)
        if self._fallback is not None:
            self._fallback.reject(question, result)

    def unused(self, asked_ids: set[str]) -> list[str]:
        """Scripted ids that were never asked, e.g. hidden by skip rules."""
        return sorted(set(self._answers) - asked_ids)
