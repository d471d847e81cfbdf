"""Condition parser: JSON expression trees and legacy condition strings."""

from tddbuilder.parser.errors import ExpressionError
from tddbuilder.parser.transformer import parse_condition, parse_expression

__all__ = ["ExpressionError", "parse_condition", "parse_expression"]
