"""Event system: bus and event types for the interview lifecycle."""

from tddbuilder.events.bus import EventBus
from tddbuilder.events.types import (
    AnswerAccepted,
    AnswerRejected,
    ComplexityAssessed,
    FollowUpsTriggered,
    InterviewCompleted,
    InterviewStarted,
    QuestionAsked,
    QuestionSkipped,
    StageCompleted,
    StageStarted,
)

__all__ = [
    "EventBus",
    "AnswerAccepted",
    "AnswerRejected",
    "ComplexityAssessed",
    "FollowUpsTriggered",
    "InterviewCompleted",
    "InterviewStarted",
    "QuestionAsked",
    "QuestionSkipped",
    "StageCompleted",
    "StageStarted",
]
