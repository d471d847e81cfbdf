"""Stage controller: drives the three-pass interview over the rules engine.

The controller is the single writer of the answer map. It asks one question
at a time, validates the reply, stores it on success and then re-queries the
engine, so newly triggered follow-ups and skip conditions take effect
immediately.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from tddbuilder.answers.validator import validate
from tddbuilder.config import InterviewConfig
from tddbuilder.engine.complexity import analyze, is_level_sufficient
from tddbuilder.engine.rules import applied_triggers, expand_triggers
from tddbuilder.engine.tag_router import filter_by_tags
from tddbuilder.events import types as events
from tddbuilder.events.bus import EventBus
from tddbuilder.interviewer.base import Interviewer
from tddbuilder.interviewer.scripted import ScriptedInterviewer
from tddbuilder.model.catalog import Schema
from tddbuilder.model.complexity import ComplexityAnalysis, ComplexityLevel
from tddbuilder.model.question import Question, Stage
from tddbuilder.model.result import ValidationResult
from tddbuilder.model.tags import TagMetadata

logger = logging.getLogger(__name__)

_STAGE_ORDER = list(Stage)


@dataclass
class InterviewOutcome:
    """Everything a finished interview produced."""

    answers: dict[str, Any]
    analysis: ComplexityAnalysis
    level: ComplexityLevel
    skipped: list[str] = field(default_factory=list)

    @property
    def overridden(self) -> bool:
        return self.level is not self.analysis.level


class StageController:
    """Runs the core, review and deep-dive passes against one answer map."""

    def __init__(
        self,
        schema: Schema,
        interviewer: Interviewer,
        tag_metadata: TagMetadata | None = None,
        config: InterviewConfig | None = None,
        event_bus: EventBus | None = None,
        answers: dict[str, Any] | None = None,
    ) -> None:
        self.schema = schema
        self.interviewer = interviewer
        self.tag_metadata = tag_metadata
        self.config = config or InterviewConfig()
        self.event_bus = event_bus or EventBus()
        self.answers: dict[str, Any] = dict(answers or {})
        self.pending_follow_ups: list[Question] = []
        self._follow_up_ids = schema.follow_up_ids()
        self._revealed: set[str] = {q.id for q in applied_triggers(self.answers, schema)[0]}
        self._skipped: list[str] = []
        self._asked: set[str] = set()
        self._last_level: ComplexityLevel | None = None

    # --- visibility -----------------------------------------------------------

    def _in_stage(self, question: Question, stage: Stage) -> bool:
        if question.stage is stage:
            return True
        # Follow-ups revealed after their own pass has run are asked now.
        return (
            question.id in self._revealed
            and _STAGE_ORDER.index(question.stage) < _STAGE_ORDER.index(stage)
        )

    def visible_questions(self, stage: Stage | str) -> list[Question]:
        """Questions still to ask in *stage*, in catalog order.

        Applies the tag filter and skip conditions, hides follow-ups until an
        answer triggers them and drops questions already answered or skipped.
        """
        stage = Stage(stage)
        candidates = [
            q
            for q in self.schema
            if self._in_stage(q, stage)
            and (q.id not in self._follow_up_ids or q.id in self._revealed)
        ]
        visible = filter_by_tags(candidates, self.config.tags, self.answers, self.tag_metadata)
        done = set(self.answers) | set(self._skipped)
        return [q for q in visible if q.id not in done]

    # --- answering ------------------------------------------------------------

    def submit(self, question: Question, raw: Any) -> ValidationResult:
        """Validate *raw* and store it on success.

        Follow-ups revealed by the stored answer are left in
        :attr:`pending_follow_ups`. An optional question answered blank is
        recorded as skipped.
        """
        self.pending_follow_ups = []
        result = validate(question, raw)
        if not result.valid:
            return result

        if result.value is None:
            self._skip(question, "blank")
            return result

        self.answers[question.id] = result.value
        self.event_bus.emit(events.AnswerAccepted(question_id=question.id, tags=question.tags))

        new = [f for f in expand_triggers(question, result.value, self.schema) if f.id not in self._revealed]
        if new:
            self._revealed.update(f.id for f in new)
            self.pending_follow_ups = new
            logger.debug("%s revealed %s", question.id, ", ".join(f.id for f in new))
            self.event_bus.emit(
                events.FollowUpsTriggered(
                    question_id=question.id, follow_up_ids=tuple(f.id for f in new)
                )
            )
        return result

    def _skip(self, question: Question, reason: str) -> None:
        if question.id not in self._skipped:
            self._skipped.append(question.id)
        self.event_bus.emit(
            events.QuestionSkipped(question_id=question.id, tags=question.tags, reason=reason)
        )

    def ask(self, question: Question) -> bool:
        """Put *question* to the interviewer until it is answered or given up.

        Optional questions are skipped after ``max_attempts`` rejected replies.
        Required questions are asked again until they get a valid answer or
        the interviewer returns no answer at all.
        """
        self._asked.add(question.id)
        attempt = 1
        while True:
            self.event_bus.emit(
                events.QuestionAsked(
                    question_id=question.id,
                    stage=question.stage.value,
                    tags=question.tags,
                    attempt=attempt,
                )
            )
            raw = self.interviewer.ask(question, attempt)
            if raw is None and question.required:
                logger.info("Required question %s left unanswered", question.id)
                self._skip(question, "unanswered")
                return False

            result = self.submit(question, raw)
            if result.valid:
                return question.id in self.answers

            logger.debug("Rejected answer for %s (attempt %d): %s", question.id, attempt, result.errors)
            self.event_bus.emit(
                events.AnswerRejected(
                    question_id=question.id, errors=tuple(result.errors), attempt=attempt
                )
            )
            self.interviewer.reject(question, result)
            if not question.required and attempt >= self.config.max_attempts:
                self._skip(question, "max_attempts")
                return False
            attempt += 1

    # --- stages ---------------------------------------------------------------

    def run_stage(self, stage: Stage | str) -> list[str]:
        """Ask every visible question of *stage*; returns the ids answered."""
        stage = Stage(stage)
        started = time.monotonic()
        skipped_before = len(self._skipped)
        self.event_bus.emit(
            events.StageStarted(stage=stage.value, question_count=len(self.visible_questions(stage)))
        )
        logger.info("Starting %s stage", stage.value)

        answered: list[str] = []
        while True:
            remaining = [q for q in self.visible_questions(stage) if q.id not in self._asked]
            if not remaining:
                break
            question = remaining[0]
            if self.ask(question):
                answered.append(question.id)

        self.event_bus.emit(
            events.StageCompleted(
                stage=stage.value,
                answered=len(answered),
                skipped=len(self._skipped) - skipped_before,
                duration=time.monotonic() - started,
            )
        )
        return answered

    def assess(self) -> ComplexityAnalysis:
        """Score the current answers; logs when the recommended tier moves."""
        weights = self.tag_metadata if self.config.weighted_scoring else None
        analysis = analyze(self.answers, weights)
        if analysis.level is not self._last_level:
            logger.info(
                "Recommended complexity: %s (score %d)", analysis.level.value, analysis.score
            )
            self._last_level = analysis.level
        self.event_bus.emit(
            events.ComplexityAssessed(
                recommended=analysis.level.value,
                score=analysis.score,
                selected=self.config.level,
            )
        )
        return analysis

    def chosen_level(self, analysis: ComplexityAnalysis) -> ComplexityLevel:
        if self.config.level is None:
            return analysis.level
        level = ComplexityLevel(self.config.level)
        weights = self.tag_metadata if self.config.weighted_scoring else None
        if not is_level_sufficient(level, self.answers, weights):
            logger.warning(
                "Level override %s is below the recommended %s",
                level.value,
                analysis.level.value,
            )
        return level

    def run(self) -> InterviewOutcome:
        """Run every stage of the catalog in order and return the outcome."""
        started = time.monotonic()
        self.event_bus.emit(
            events.InterviewStarted(
                question_count=len(self.schema),
                tags=tuple(self.config.tags),
                file_mode=isinstance(self.interviewer, ScriptedInterviewer),
            )
        )
        analysis = None
        for stage in self.schema.stages:
            self.run_stage(stage)
            analysis = self.assess()
        if analysis is None:
            analysis = self.assess()

        level = self.chosen_level(analysis)
        self.event_bus.emit(
            events.InterviewCompleted(
                answered=len(self.answers),
                level=level.value,
                duration=time.monotonic() - started,
            )
        )
        return InterviewOutcome(
            answers=dict(self.answers),
            analysis=analysis,
            level=level,
            skipped=list(self._skipped),
        )

    @property
    def skipped(self) -> list[str]:
        return list(self._skipped)
