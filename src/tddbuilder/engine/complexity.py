"""Complexity analyzer: risk detection, scoring and tier recommendation.

Every function here is a pure function of its arguments. Answer maps are read
by key only, so the insertion order of answers never influences a score.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from tddbuilder.engine.tag_router import answered_weight
from tddbuilder.model.complexity import ComplexityAnalysis, ComplexityLevel, RiskFactors
from tddbuilder.model.tags import TagMetadata

BASE_SCORE = 4

RISK_WEIGHTS: dict[str, int] = {
    "handles_pii": 6,
    "handles_phi": 8,
    "requires_compliance": 8,
    "multi_region": 5,
    "handles_payments": 7,
    "high_availability": 5,
    "large_scale": 6,
    "multi_tenant": 5,
    "regulated_industry": 7,
}
INTEGRATION_WEIGHT = 2

# Inclusive lower bounds, checked from the highest tier down.
LEVEL_THRESHOLDS: tuple[tuple[int, ComplexityLevel], ...] = (
    (48, ComplexityLevel.ENTERPRISE),
    (35, ComplexityLevel.COMPREHENSIVE),
    (20, ComplexityLevel.STANDARD),
    (10, ComplexityLevel.MINIMAL),
)

MIN_FIELDS: dict[ComplexityLevel, int] = {
    ComplexityLevel.BASE: 4,
    ComplexityLevel.MINIMAL: 8,
    ComplexityLevel.STANDARD: 15,
    ComplexityLevel.COMPREHENSIVE: 25,
    ComplexityLevel.ENTERPRISE: 35,
}

# Sections are appended tier by tier so every tier extends the one below it.
_SECTION_STEPS: tuple[tuple[ComplexityLevel, tuple[str, ...]], ...] = (
    (ComplexityLevel.BASE, ("foundation", "summary")),
    (ComplexityLevel.MINIMAL, ("architecture",)),
    (ComplexityLevel.STANDARD, ("operations", "security")),
    (ComplexityLevel.COMPREHENSIVE, ("privacy", "implementation")),
    (ComplexityLevel.ENTERPRISE, ("risks", "compliance")),
)

_TAG_STEPS: tuple[tuple[ComplexityLevel, tuple[str, ...]], ...] = (
    (ComplexityLevel.BASE, ("foundation",)),
    (ComplexityLevel.MINIMAL, ("architecture",)),
    (ComplexityLevel.STANDARD, ("operations",)),
    (ComplexityLevel.COMPREHENSIVE, ("security", "privacy")),
    (ComplexityLevel.ENTERPRISE, ("compliance", "risks")),
)

DESCRIPTIONS: dict[ComplexityLevel, str] = {
    ComplexityLevel.BASE: "Basic project with minimal requirements (~4 questions)",
    ComplexityLevel.MINIMAL: "Simple project with standard requirements (~10 questions)",
    ComplexityLevel.STANDARD: "Typical project with moderate complexity (~20 questions)",
    ComplexityLevel.COMPREHENSIVE: "Complex project with extensive requirements (~35 questions)",
    ComplexityLevel.ENTERPRISE: "Enterprise-grade project with full compliance and scale (~48+ questions)",
}

REGULATED_INDUSTRIES = ("healthcare", "finance", "fintech", "banking", "insurance", "government")
PHI_REGULATIONS = frozenset({"hipaa", "hitech"})
PAYMENT_REGULATIONS = frozenset({"pci-dss", "pci_dss", "pci"})
# Regimes that only apply inside a regulated sector.
SECTOR_REGULATIONS = PHI_REGULATIONS | PAYMENT_REGULATIONS | frozenset({"sox", "glba", "fedramp", "ferpa"})
HIGH_AVAILABILITY_SLA = 99.99
LARGE_SCALES = frozenset({"large", "massive"})


# ---------------------------------------------------------------------------
# Risk detection
# ---------------------------------------------------------------------------


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return []


def _normalized(values: list[Any]) -> set[str]:
    return {str(v).strip().lower() for v in values}


def _sla_percent(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(str(value).strip().rstrip("%"))
    except ValueError:
        return None


def _integration_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, str):
        return len([part for part in value.split(",") if part.strip()])
    return len(_as_list(value))


def detect_risk_factors(answers: Mapping[str, Any]) -> RiskFactors:
    """Inspect the well-known answer keys for risk indicators."""
    regulations = _normalized(_as_list(answers.get("privacy.regulations")))
    industry = answers.get("project.industry")
    in_regulated_industry = isinstance(industry, str) and any(
        name in industry.lower() for name in REGULATED_INDUSTRIES
    )
    sla = _sla_percent(answers.get("operations.sla"))
    scale = answers.get("architecture.scale")

    return RiskFactors(
        handles_pii=answers.get("privacy.pii") is True,
        handles_phi=bool(regulations & PHI_REGULATIONS) or answers.get("privacy.phi") is True,
        requires_compliance=bool(regulations) and "none" not in regulations,
        multi_region=len(_as_list(answers.get("cloud.regions"))) > 1,
        handles_payments=bool(regulations & PAYMENT_REGULATIONS),
        high_availability=sla is not None and sla >= HIGH_AVAILABILITY_SLA,
        large_scale=isinstance(scale, str) and scale.lower() in LARGE_SCALES,
        multi_tenant=(
            answers.get("deployment.model") == "hybrid"
            or answers.get("architecture.multitenancy") is True
        ),
        regulated_industry=in_regulated_industry or bool(regulations & SECTOR_REGULATIONS),
        external_integrations=_integration_count(answers.get("integrations.external")),
    )


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def score(risk_factors: RiskFactors) -> int:
    """Weighted complexity score: base plus a fixed weight per indicator."""
    total = BASE_SCORE
    for name, weight in RISK_WEIGHTS.items():
        if getattr(risk_factors, name):
            total += weight
    total += risk_factors.external_integrations * INTEGRATION_WEIGHT
    return total


def level_for_score(value: int) -> ComplexityLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if value >= threshold:
            return level
    return ComplexityLevel.BASE


def recommend_level(
    score_or_answers: int | Mapping[str, Any],
    tag_metadata: TagMetadata | None = None,
) -> ComplexityLevel:
    """Map a score, or an answer map, to its complexity tier."""
    if isinstance(score_or_answers, Mapping):
        return analyze(score_or_answers, tag_metadata).level
    return level_for_score(score_or_answers)


def analyze(
    answers: Mapping[str, Any], tag_metadata: TagMetadata | None = None
) -> ComplexityAnalysis:
    """Full complexity analysis of an answer map.

    With *tag_metadata* the weights of answered fields are added to the risk
    score (weighted mode).
    """
    risk = detect_risk_factors(answers)
    total = score(risk)
    if tag_metadata is not None:
        total += answered_weight(tag_metadata, answered_ids(answers))
    level = level_for_score(total)
    return ComplexityAnalysis(
        level=level,
        score=total,
        risk_factors=risk,
        min_fields=MIN_FIELDS[level],
        sections=tuple(sections_for_level(level)),
        description=DESCRIPTIONS[level],
    )


# ---------------------------------------------------------------------------
# Progressive disclosure
# ---------------------------------------------------------------------------


def _accumulate(
    steps: tuple[tuple[ComplexityLevel, tuple[str, ...]], ...], level: ComplexityLevel
) -> list[str]:
    collected: list[str] = []
    for step_level, names in steps:
        if step_level > level:
            break
        collected.extend(names)
    return collected


def sections_for_level(level: ComplexityLevel | str) -> list[str]:
    """Document sections unlocked at *level*, in document order."""
    return _accumulate(_SECTION_STEPS, ComplexityLevel(level))


def tags_for_level(level: ComplexityLevel | str) -> list[str]:
    """Question tags relevant at *level*."""
    return _accumulate(_TAG_STEPS, ComplexityLevel(level))


def min_fields_for_level(level: ComplexityLevel | str) -> int:
    return MIN_FIELDS[ComplexityLevel(level)]


def describe_level(level: ComplexityLevel | str) -> str:
    return DESCRIPTIONS[ComplexityLevel(level)]


def _is_provided(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def answered_ids(answers: Mapping[str, Any]) -> list[str]:
    """Keys whose value is neither ``None`` nor a blank string, sorted."""
    return sorted(key for key, value in answers.items() if _is_provided(value))


def count_answered(answers: Mapping[str, Any]) -> int:
    return len(answered_ids(answers))


def meets_minimum_fields(level: ComplexityLevel | str, answer_count: int) -> bool:
    return answer_count >= min_fields_for_level(level)


def is_level_sufficient(
    level: ComplexityLevel | str,
    answers: Mapping[str, Any],
    tag_metadata: TagMetadata | None = None,
) -> bool:
    """False when the answers call for a higher tier than *level*."""
    return ComplexityLevel(level) >= recommend_level(answers, tag_metadata)


def risk_summary(risk_factors: RiskFactors) -> dict[str, Any]:
    """Plain-dict view of the risk factors for display and export."""
    return dataclasses.asdict(risk_factors)
