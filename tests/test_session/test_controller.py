"""Tests for the stage controller that drives an interview."""

from __future__ import annotations

import pytest

from tddbuilder.config import InterviewConfig
from tddbuilder.events import (
    AnswerRejected,
    ComplexityAssessed,
    EventBus,
    FollowUpsTriggered,
    InterviewCompleted,
    InterviewStarted,
    QuestionSkipped,
    StageCompleted,
    StageStarted,
)
from tddbuilder.interviewer.callback import CallbackInterviewer
from tddbuilder.interviewer.recording import RecordingInterviewer
from tddbuilder.interviewer.scripted import ScriptedInterviewer
from tddbuilder.model.complexity import ComplexityLevel
from tddbuilder.session import StageController

SCRIPT = {
    "project.name": "Atlas",
    "deployment.model": "hybrid",
    "cloud.regions": ["us-east", "eu-west"],
    "privacy.pii": True,
    "team.size": 5,
    "launch.date": "2026-05-01",
    "privacy.regulations": ["gdpr", "hipaa"],
    "features.list": ["sso"],
    "security.idp": "okta",
    "security.mfa": True,
    "deployment.sites": 2,
    "ops.notes": "Runs in two data centres.",
}


def _asked_ids(recorder: RecordingInterviewer) -> list[str]:
    return [pair.question.id for pair in recorder.transcript()]


def _collect(bus: EventBus) -> list[object]:
    seen: list[object] = []
    bus.on_all(seen.append)
    return seen


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------


class TestRun:
    def test_scripted_run_asks_in_stage_order(self, schema) -> None:
        recorder = RecordingInterviewer(ScriptedInterviewer(SCRIPT))
        outcome = StageController(schema, recorder).run()

        assert _asked_ids(recorder) == [
            "project.name",
            "deployment.model",
            "cloud.regions",
            "privacy.pii",
            "team.size",
            "launch.date",
            "privacy.regulations",
            "features.list",
            "security.idp",
            "security.mfa",
            "deployment.sites",
            "ops.notes",
        ]
        assert outcome.answers == SCRIPT
        assert outcome.skipped == []

    def test_outcome_level_is_recommended(self, schema) -> None:
        outcome = StageController(schema, ScriptedInterviewer(SCRIPT)).run()
        # pii, phi, compliance, multi-region, hybrid tenancy and a sector regulation
        assert outcome.analysis.score == 43
        assert outcome.level is ComplexityLevel.COMPREHENSIVE
        assert outcome.overridden is False

    def test_skip_rule_reacts_to_earlier_answer(self, schema) -> None:
        script = dict(SCRIPT, **{"deployment.model": "cloud", "cloud.provider": "aws"})
        recorder = RecordingInterviewer(ScriptedInterviewer(script))
        StageController(schema, recorder).run()
        asked = _asked_ids(recorder)
        assert asked[:4] == ["project.name", "deployment.model", "cloud.provider", "cloud.regions"]
        assert "deployment.sites" not in asked

    def test_untriggered_follow_ups_stay_hidden(self, schema) -> None:
        script = {"project.name": "Atlas", "deployment.model": "on-premise", "privacy.pii": False}
        recorder = RecordingInterviewer(ScriptedInterviewer(script))
        StageController(schema, recorder).run()
        asked = _asked_ids(recorder)
        for hidden in ("cloud.provider", "cloud.regions", "privacy.regulations", "security.idp", "compliance.retention"):
            assert hidden not in asked

    def test_multi_select_reveals_union_once(self, schema) -> None:
        script = dict(SCRIPT, **{"features.list": ["sso", "audit-log"], "compliance.retention": "7 years"})
        recorder = RecordingInterviewer(ScriptedInterviewer(script))
        outcome = StageController(schema, recorder).run()
        asked = _asked_ids(recorder)
        assert asked.count("security.mfa") == 1
        assert outcome.answers["compliance.retention"] == "7 years"

    def test_tag_filter_keeps_foundation(self, schema) -> None:
        recorder = RecordingInterviewer(ScriptedInterviewer(SCRIPT))
        config = InterviewConfig(tags=("security",))
        StageController(schema, recorder, config=config).run()
        assert _asked_ids(recorder) == [
            "project.name",
            "deployment.model",
            "privacy.pii",
            "features.list",
            "security.idp",
            "security.mfa",
        ]

    def test_preloaded_answers_are_not_asked_again(self, schema) -> None:
        recorder = RecordingInterviewer(ScriptedInterviewer(SCRIPT))
        controller = StageController(schema, recorder, answers={"deployment.model": "hybrid"})
        controller.run()
        asked = _asked_ids(recorder)
        assert "deployment.model" not in asked
        assert "cloud.regions" in asked

    def test_no_answers_skips_every_visible_question(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        assert controller.run_stage("core") == []
        assert controller.skipped == [
            "project.name",
            "deployment.model",
            "privacy.pii",
            "team.size",
            "launch.date",
        ]
        assert controller.answers == {}


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


class TestVisibleQuestions:
    def test_initial_core(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        assert [q.id for q in controller.visible_questions("core")] == [
            "project.name",
            "deployment.model",
            "privacy.pii",
            "team.size",
            "launch.date",
        ]

    def test_late_follow_up_moves_to_current_stage(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        controller.submit(schema.question_by_id("deployment.model"), "hybrid")
        review = [q.id for q in controller.visible_questions("review")]
        assert "cloud.regions" in review
        assert "deployment.sites" not in review
        assert "deployment.sites" in [q.id for q in controller.visible_questions("deep_dive")]


# ---------------------------------------------------------------------------
# Answer handling
# ---------------------------------------------------------------------------


class TestSubmit:
    def test_valid_answer_is_coerced_and_stored(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        result = controller.submit(schema.question_by_id("team.size"), "7")
        assert result.valid
        assert controller.answers["team.size"] == 7

    def test_invalid_answer_is_not_stored(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        result = controller.submit(schema.question_by_id("team.size"), "99")
        assert not result.valid
        assert "team.size" not in controller.answers

    def test_pending_follow_ups(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        controller.submit(schema.question_by_id("privacy.pii"), "yes")
        assert [q.id for q in controller.pending_follow_ups] == ["privacy.regulations"]
        controller.submit(schema.question_by_id("team.size"), 3)
        assert controller.pending_follow_ups == []

    def test_blank_optional_answer_is_skipped(self, schema) -> None:
        controller = StageController(schema, ScriptedInterviewer({}))
        controller.submit(schema.question_by_id("ops.notes"), "  ")
        assert "ops.notes" not in controller.answers
        assert controller.skipped == ["ops.notes"]


class TestRetries:
    def test_required_question_is_asked_until_valid(self, schema) -> None:
        replies = {1: "A", 2: "Atlas"}
        rejected: list[str] = []
        interviewer = CallbackInterviewer(
            lambda q, attempt: replies[attempt],
            on_reject=lambda q, r: rejected.extend(r.errors),
        )
        controller = StageController(schema, interviewer)
        assert controller.ask(schema.question_by_id("project.name")) is True
        assert controller.answers["project.name"] == "Atlas"
        assert rejected == ["Answer must be at least 2 characters long"]

    def test_optional_question_skipped_after_max_attempts(self, schema) -> None:
        bus = EventBus()
        seen = _collect(bus)
        controller = StageController(schema, CallbackInterviewer(lambda q, a: "lots"), event_bus=bus)

        assert controller.ask(schema.question_by_id("team.size")) is False
        assert [e.attempt for e in seen if isinstance(e, AnswerRejected)] == [1, 2, 3]
        skipped = [e for e in seen if isinstance(e, QuestionSkipped)]
        assert skipped[0].reason == "max_attempts"

    def test_max_attempts_is_configurable(self, schema) -> None:
        calls: list[int] = []

        def reply(question, attempt):
            calls.append(attempt)
            return "lots"

        config = InterviewConfig(max_attempts=1)
        StageController(schema, CallbackInterviewer(reply), config=config).ask(
            schema.question_by_id("team.size")
        )
        assert calls == [1]

    def test_rejected_script_answer_leaves_required_unanswered(self, schema) -> None:
        interviewer = ScriptedInterviewer({"project.name": "A"})
        controller = StageController(schema, interviewer)
        assert controller.ask(schema.question_by_id("project.name")) is False
        assert interviewer.rejected == {"project.name": ["Answer must be at least 2 characters long"]}
        assert controller.skipped == ["project.name"]


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------


class TestLevels:
    def test_override_below_recommendation_warns(self, schema, caplog) -> None:
        config = InterviewConfig(level="standard")
        with caplog.at_level("WARNING"):
            outcome = StageController(schema, ScriptedInterviewer(SCRIPT), config=config).run()
        assert outcome.level is ComplexityLevel.STANDARD
        assert outcome.analysis.level is ComplexityLevel.COMPREHENSIVE
        assert outcome.overridden is True
        assert "below the recommended comprehensive" in caplog.text

    def test_override_above_recommendation_is_silent(self, schema, caplog) -> None:
        config = InterviewConfig(level="enterprise")
        with caplog.at_level("WARNING"):
            outcome = StageController(schema, ScriptedInterviewer(SCRIPT), config=config).run()
        assert outcome.level is ComplexityLevel.ENTERPRISE
        assert "below the recommended" not in caplog.text

    def test_weighted_scoring_uses_tag_metadata(self, schema, tag_metadata) -> None:
        plain = StageController(schema, ScriptedInterviewer(SCRIPT), tag_metadata).run()
        weighted = StageController(
            schema,
            ScriptedInterviewer(SCRIPT),
            tag_metadata,
            config=InterviewConfig(weighted_scoring=True),
        ).run()
        assert weighted.analysis.score > plain.analysis.score
        assert weighted.level is ComplexityLevel.ENTERPRISE


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:
    def test_lifecycle(self, schema) -> None:
        bus = EventBus()
        seen = _collect(bus)
        StageController(schema, ScriptedInterviewer(SCRIPT), event_bus=bus).run()

        assert isinstance(seen[0], InterviewStarted)
        assert seen[0].file_mode is True
        assert seen[0].question_count == 14
        assert isinstance(seen[-1], InterviewCompleted)
        assert seen[-1].answered == len(SCRIPT)
        assert [e.stage for e in seen if isinstance(e, StageStarted)] == ["core", "review", "deep_dive"]
        assert len([e for e in seen if isinstance(e, ComplexityAssessed)]) == 3

    def test_follow_up_event(self, schema) -> None:
        bus = EventBus()
        seen = _collect(bus)
        StageController(schema, ScriptedInterviewer(SCRIPT), event_bus=bus).run()
        triggered = {e.question_id: e.follow_up_ids for e in seen if isinstance(e, FollowUpsTriggered)}
        assert triggered["deployment.model"] == ("cloud.regions", "deployment.sites")
        assert triggered["features.list"] == ("security.idp", "security.mfa")

    def test_stage_counts(self, schema) -> None:
        bus = EventBus()
        seen = _collect(bus)
        StageController(schema, ScriptedInterviewer(SCRIPT), event_bus=bus).run()
        completed = {e.stage: e for e in seen if isinstance(e, StageCompleted)}
        assert completed["core"].answered == 6
        assert completed["review"].answered == 4
        assert completed["deep_dive"].answered == 2
        assert all(e.duration >= 0 for e in completed.values())

    def test_callback_interviewer_is_not_file_mode(self, schema) -> None:
        bus = EventBus()
        seen = _collect(bus)
        StageController(schema, CallbackInterviewer(lambda q, a: None), event_bus=bus).run()
        assert seen[0].file_mode is False

    @pytest.mark.parametrize("tags", [(), ("security", "privacy")])
    def test_started_event_carries_tags(self, schema, tags) -> None:
        bus = EventBus()
        seen = _collect(bus)
        config = InterviewConfig(tags=tags)
        StageController(schema, ScriptedInterviewer({}), config=config, event_bus=bus).run()
        assert seen[0].tags == tags
