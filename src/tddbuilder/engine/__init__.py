"""Adaptive questionnaire engine: rules, tag routing and complexity scoring."""

from tddbuilder.engine.complexity import (
    analyze,
    detect_risk_factors,
    meets_minimum_fields,
    recommend_level,
    score,
    sections_for_level,
)
from tddbuilder.engine.rules import (
    applied_triggers,
    evaluate_skip,
    expand_triggers,
    filter_questions,
    next_questions,
)
from tddbuilder.engine.tag_router import filter_by_tags

__all__ = [
    "analyze",
    "applied_triggers",
    "detect_risk_factors",
    "evaluate_skip",
    "expand_triggers",
    "filter_by_tags",
    "filter_questions",
    "meets_minimum_fields",
    "next_questions",
    "recommend_level",
    "score",
    "sections_for_level",
]
