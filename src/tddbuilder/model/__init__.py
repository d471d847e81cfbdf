"""TDD Builder model layer -- public type re-exports."""

from tddbuilder.model.catalog import Schema
from tddbuilder.model.complexity import ComplexityAnalysis, ComplexityLevel, RiskFactors
from tddbuilder.model.diagnostic import Diagnostic, Severity
from tddbuilder.model.expression import And, Eq, Expression, Has, Neq, Not, Or, Truthy
from tddbuilder.model.question import (
    FOUNDATION_TAG,
    Constraints,
    Help,
    Question,
    QuestionType,
    Stage,
)
from tddbuilder.model.result import ValidationResult
from tddbuilder.model.tags import FieldMetadata, TagInfo, TagMetadata

__all__ = [
    # question
    "FOUNDATION_TAG",
    "Stage",
    "QuestionType",
    "Constraints",
    "Help",
    "Question",
    # catalog
    "Schema",
    # tags
    "TagInfo",
    "FieldMetadata",
    "TagMetadata",
    # expression
    "Expression",
    "Eq",
    "Neq",
    "Has",
    "Truthy",
    "Not",
    "And",
    "Or",
    # complexity
    "ComplexityLevel",
    "RiskFactors",
    "ComplexityAnalysis",
    # diagnostic
    "Severity",
    "Diagnostic",
    # result
    "ValidationResult",
]
