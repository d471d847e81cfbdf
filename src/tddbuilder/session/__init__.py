"""Interview session control."""

from tddbuilder.session.controller import InterviewOutcome, StageController

__all__ = ["InterviewOutcome", "StageController"]
