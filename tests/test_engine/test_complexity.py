"""Tests for risk detection, scoring and tier recommendation."""

import json

import pytest

from tddbuilder.engine.complexity import (
    BASE_SCORE,
    analyze,
    count_answered,
    describe_level,
    detect_risk_factors,
    is_level_sufficient,
    level_for_score,
    meets_minimum_fields,
    min_fields_for_level,
    recommend_level,
    risk_summary,
    score,
    sections_for_level,
    tags_for_level,
)
from tddbuilder.model.complexity import ComplexityLevel, RiskFactors

SCENARIO_C = {
    "privacy.pii": True,
    "privacy.regulations": ["hipaa", "gdpr"],
    "operations.sla": "99.99",
}


# ---------------------------------------------------------------------------
# Risk detection
# ---------------------------------------------------------------------------


class TestDetectRiskFactors:
    def test_empty_answers_have_no_risk(self):
        assert detect_risk_factors({}) == RiskFactors()

    def test_scenario_c_indicators(self):
        risk = detect_risk_factors(SCENARIO_C)
        assert risk.active() == [
            "handles_pii",
            "handles_phi",
            "requires_compliance",
            "high_availability",
            "regulated_industry",
        ]

    def test_pii_must_be_true_not_truthy(self):
        assert detect_risk_factors({"privacy.pii": "yes"}).handles_pii is False

    def test_none_regulation_is_not_compliance(self):
        assert detect_risk_factors({"privacy.regulations": ["none"]}).requires_compliance is False

    def test_payments(self):
        risk = detect_risk_factors({"privacy.regulations": ["PCI-DSS"]})
        assert risk.handles_payments is True
        assert risk.regulated_industry is True

    def test_gdpr_alone_is_not_regulated_industry(self):
        assert detect_risk_factors({"privacy.regulations": ["gdpr"]}).regulated_industry is False

    @pytest.mark.parametrize("industry", ["Healthcare", "retail banking", "FinTech"])
    def test_regulated_industry_by_name(self, industry):
        assert detect_risk_factors({"project.industry": industry}).regulated_industry is True

    @pytest.mark.parametrize(
        "regions, expected",
        [(["us-east"], False), (["us-east", "eu-west"], True), ("us-east, eu-west", False)],
    )
    def test_multi_region(self, regions, expected):
        assert detect_risk_factors({"cloud.regions": regions}).multi_region is expected

    @pytest.mark.parametrize("sla, expected", [("99.9", False), ("99.99%", True), (99.999, True), ("n/a", False), (True, False)])
    def test_high_availability(self, sla, expected):
        assert detect_risk_factors({"operations.sla": sla}).high_availability is expected

    def test_scale_and_tenancy(self):
        risk = detect_risk_factors({"architecture.scale": "Massive", "architecture.multitenancy": True})
        assert risk.large_scale is True
        assert risk.multi_tenant is True
        assert detect_risk_factors({"deployment.model": "hybrid"}).multi_tenant is True

    @pytest.mark.parametrize("value, count", [(3, 3), (-2, 0), ("crm, erp, ", 2), (["a", "b"], 2), (True, 0)])
    def test_integration_count(self, value, count):
        assert detect_risk_factors({"integrations.external": value}).external_integrations == count


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


class TestScore:
    def test_base_score(self):
        assert score(RiskFactors()) == BASE_SCORE == 4

    def test_scenario_c_reaches_comprehensive(self):
        analysis = analyze(SCENARIO_C)
        assert analysis.score >= 35
        assert analysis.score == 38
        assert analysis.level >= ComplexityLevel.COMPREHENSIVE

    def test_integrations_add_two_each(self):
        assert score(RiskFactors(external_integrations=5)) == 14

    def test_every_indicator(self):
        risk = RiskFactors(*([True] * 9), external_integrations=1)
        assert score(risk) == 4 + 6 + 8 + 8 + 5 + 7 + 5 + 6 + 5 + 7 + 2

    def test_answer_order_does_not_matter(self, fixtures_dir):
        answers = json.loads((fixtures_dir / "answers.json").read_text(encoding="utf-8"))
        reversed_answers = dict(reversed(list(answers.items())))
        assert analyze(answers) == analyze(reversed_answers)
        assert analyze(answers).score == 38


class TestLevels:
    @pytest.mark.parametrize(
        "value, level",
        [
            (0, "base"),
            (9, "base"),
            (10, "minimal"),
            (19, "minimal"),
            (20, "standard"),
            (34, "standard"),
            (35, "comprehensive"),
            (47, "comprehensive"),
            (48, "enterprise"),
            (120, "enterprise"),
        ],
    )
    def test_thresholds(self, value, level):
        assert level_for_score(value) is ComplexityLevel(level)
        assert recommend_level(value) is ComplexityLevel(level)

    def test_recommend_from_answers(self):
        assert recommend_level(SCENARIO_C) is ComplexityLevel.COMPREHENSIVE
        assert recommend_level({}) is ComplexityLevel.BASE

    def test_levels_are_ordered(self):
        assert ComplexityLevel.BASE < ComplexityLevel.MINIMAL < ComplexityLevel.ENTERPRISE
        assert max(ComplexityLevel) is ComplexityLevel.ENTERPRISE

    def test_description(self):
        assert "Enterprise-grade" in describe_level("enterprise")


# ---------------------------------------------------------------------------
# Progressive disclosure
# ---------------------------------------------------------------------------


class TestSections:
    def test_base(self):
        assert sections_for_level("base") == ["foundation", "summary"]

    def test_each_tier_extends_the_previous(self):
        levels = list(ComplexityLevel)
        for lower, higher in zip(levels, levels[1:]):
            lo, hi = sections_for_level(lower), sections_for_level(higher)
            assert hi[: len(lo)] == lo
            assert len(hi) > len(lo)

    def test_enterprise_superset_of_standard(self):
        standard = sections_for_level(ComplexityLevel.STANDARD)
        enterprise = sections_for_level(ComplexityLevel.ENTERPRISE)
        assert set(standard) < set(enterprise)
        assert enterprise[-2:] == ["risks", "compliance"]

    def test_tags_for_level(self):
        assert tags_for_level("minimal") == ["foundation", "architecture"]
        assert "compliance" in tags_for_level("enterprise")

    def test_analysis_carries_sections(self):
        analysis = analyze(SCENARIO_C)
        assert analysis.sections == tuple(sections_for_level("comprehensive"))
        assert analysis.min_fields == 25


class TestMinimumFields:
    @pytest.mark.parametrize(
        "level, minimum",
        [("base", 4), ("minimal", 8), ("standard", 15), ("comprehensive", 25), ("enterprise", 35)],
    )
    def test_minimums(self, level, minimum):
        assert min_fields_for_level(level) == minimum
        assert meets_minimum_fields(level, minimum) is True
        assert meets_minimum_fields(level, minimum - 1) is False

    def test_count_answered_ignores_blanks(self):
        assert count_answered({"a": "x", "b": "  ", "c": None, "d": False, "e": []}) == 3


class TestSufficiency:
    def test_override_below_recommendation(self):
        assert is_level_sufficient("standard", SCENARIO_C) is False
        assert is_level_sufficient("comprehensive", SCENARIO_C) is True
        assert is_level_sufficient(ComplexityLevel.ENTERPRISE, SCENARIO_C) is True


class TestWeightedMode:
    def test_answered_weights_are_added(self, tag_metadata):
        answers = {"project.name": "Atlas", "privacy.pii": True, "team.size": 4}
        plain = analyze(answers)
        weighted = analyze(answers, tag_metadata)
        # project.name 0, privacy.pii 5, team.size defaults to 1
        assert weighted.score == plain.score + 6

    def test_blank_answers_carry_no_weight(self, tag_metadata):
        assert analyze({"privacy.pii": None}, tag_metadata).score == BASE_SCORE

    def test_recommend_level_with_metadata(self, tag_metadata):
        answers = dict(SCENARIO_C, **{"deployment.model": "cloud"})
        assert recommend_level(answers, tag_metadata) is ComplexityLevel.ENTERPRISE


def test_risk_summary_is_plain_dict():
    summary = risk_summary(detect_risk_factors(SCENARIO_C))
    assert summary["handles_phi"] is True
    assert summary["external_integrations"] == 0
