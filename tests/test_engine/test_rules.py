"""Tests for skip evaluation, trigger expansion and question filtering."""

from dataclasses import replace

import pytest

from tddbuilder.engine.rules import (
    applied_triggers,
    evaluate_skip,
    expand_triggers,
    filter_questions,
    next_questions,
    trigger_key,
)


def _ids(questions):
    return [q.id for q in questions]


# ---------------------------------------------------------------------------
# evaluate_skip
# ---------------------------------------------------------------------------


class TestEvaluateSkip:
    @pytest.mark.parametrize(
        "answers",
        [{}, {"deployment.model": "cloud"}, {"privacy.pii": False, "anything": [1, 2]}],
    )
    def test_no_skip_if_never_skips(self, schema, answers):
        for question in schema:
            if question.skip_if is None:
                assert evaluate_skip(question, answers) is False

    def test_scenario_a_on_premise_hides_cloud_provider(self, schema):
        provider = schema.question_by_id("cloud.provider")
        answers = {"deployment.model": "on-premise"}
        assert evaluate_skip(provider, answers) is True
        assert "cloud.provider" not in _ids(filter_questions(schema, answers))

    def test_scenario_b_empty_answers_show_cloud_provider(self, schema):
        assert "cloud.provider" in _ids(filter_questions(schema, {}))

    def test_cloud_answer_shows_provider(self, schema):
        provider = schema.question_by_id("cloud.provider")
        assert evaluate_skip(provider, {"deployment.model": "cloud"}) is False

    def test_legacy_condition_on_boolean(self, schema):
        retention = schema.question_by_id("compliance.retention")
        assert evaluate_skip(retention, {"privacy.pii": False}) is True
        assert evaluate_skip(retention, {"privacy.pii": True}) is False
        assert evaluate_skip(retention, {}) is False


class TestFilterQuestions:
    def test_preserves_order(self, schema):
        answers = {"deployment.model": "hybrid"}
        expected = [q.id for q in schema if q.id != "cloud.provider"]
        assert _ids(filter_questions(schema, answers)) == expected

    def test_empty_input(self):
        assert filter_questions([], {}) == []


class TestNextQuestions:
    def test_stage_and_unanswered_only(self, schema):
        answers = {"project.name": "Atlas", "deployment.model": "on-premise"}
        assert _ids(next_questions(schema, answers, "core")) == [
            "cloud.regions",
            "privacy.pii",
            "team.size",
            "launch.date",
        ]


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


class TestTriggerKey:
    @pytest.mark.parametrize(
        "value, key",
        [(True, "true"), (False, "false"), (3, "3"), (3.0, "3"), (2.5, "2.5"), ("cloud", "cloud")],
    )
    def test_rendering(self, value, key):
        assert trigger_key(value) == key


class TestExpandTriggers:
    def test_scalar_answer(self, schema):
        model = schema.question_by_id("deployment.model")
        assert _ids(expand_triggers(model, "cloud", schema)) == ["cloud.regions"]

    def test_boolean_answer(self, schema):
        pii = schema.question_by_id("privacy.pii")
        assert _ids(expand_triggers(pii, True, schema)) == ["privacy.regulations"]
        assert expand_triggers(pii, False, schema) == []

    def test_scenario_e_multi_select_union_deduplicated(self, schema):
        features = schema.question_by_id("features.list")
        result = _ids(expand_triggers(features, ["sso", "audit-log"], schema))
        assert result == ["security.idp", "security.mfa", "compliance.retention"]

    def test_value_without_trigger(self, schema):
        model = schema.question_by_id("deployment.model")
        assert expand_triggers(model, "on-premise", schema) == []

    def test_none_answer(self, schema):
        model = schema.question_by_id("deployment.model")
        assert expand_triggers(model, None, schema) == []

    def test_unknown_target_is_skipped(self, schema, make_question):
        question = replace(
            make_question("x.q", "select", options=("a",)),
            triggers={"a": ("ghost.id", "team.size")},
        )
        assert _ids(expand_triggers(question, "a", schema)) == ["team.size"]


class TestAppliedTriggers:
    def test_collects_all_revealed(self, schema):
        answers = {"deployment.model": "hybrid", "privacy.pii": True, "features.list": ["sso"]}
        revealed, fired = applied_triggers(answers, schema)
        assert _ids(revealed) == [
            "cloud.regions",
            "deployment.sites",
            "privacy.regulations",
            "security.idp",
            "security.mfa",
        ]
        assert fired == ["deployment.model:hybrid", "privacy.pii:true", "features.list:sso"]

    def test_nothing_answered(self, schema):
        assert applied_triggers({}, schema) == ([], [])
