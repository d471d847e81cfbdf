"""Catalog validation: structural rules and the validator that runs them."""

from tddbuilder.validation.validator import (
    SchemaError,
    validate_catalog,
    validate_catalog_or_raise,
    validate_tag_document,
    validate_tag_document_or_raise,
)

__all__ = [
    "SchemaError",
    "validate_catalog",
    "validate_catalog_or_raise",
    "validate_tag_document",
    "validate_tag_document_or_raise",
]
