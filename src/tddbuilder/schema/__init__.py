"""Catalog loading: the single gate between JSON sources and the engine."""

from tddbuilder.schema.loader import (
    DEFAULT_QUESTIONNAIRE_PATH,
    DEFAULT_TAGS_PATH,
    load_questionnaire,
    load_tag_metadata,
    parse_questionnaire,
    parse_tag_metadata,
)
from tddbuilder.validation import SchemaError

__all__ = [
    "DEFAULT_QUESTIONNAIRE_PATH",
    "DEFAULT_TAGS_PATH",
    "SchemaError",
    "load_questionnaire",
    "load_tag_metadata",
    "parse_questionnaire",
    "parse_tag_metadata",
]
