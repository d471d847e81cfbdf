"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click

from tddbuilder.answers.export import AnswerExport
from tddbuilder.model.catalog import Schema
from tddbuilder.model.complexity import ComplexityLevel
from tddbuilder.model.tags import TagMetadata
from tddbuilder.schema import SchemaError, load_questionnaire, load_tag_metadata

LEVEL_CHOICE = click.Choice([level.value for level in ComplexityLevel])


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def split_tags(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(t.strip() for t in value.split(",") if t.strip())


def echo_schema_error(exc: SchemaError) -> None:
    source = f" in {exc.source}" if exc.source else ""
    click.echo(f"Catalog error{source}:", err=True)
    for diagnostic in exc.diagnostics:
        click.echo(f"  {diagnostic}", err=True)


def load_catalogs(
    questionnaire: str | None, tag_schema: str | None
) -> tuple[Schema, TagMetadata]:
    """Load both catalogs or exit with status 1 after printing diagnostics."""
    try:
        schema = load_questionnaire(questionnaire)
        tag_metadata = load_tag_metadata(tag_schema, schema=schema)
    except SchemaError as exc:
        echo_schema_error(exc)
        sys.exit(1)
    return schema, tag_metadata


def load_answer_file(path: str) -> AnswerExport:
    """Read an exported answer file or exit with status 1."""
    try:
        return AnswerExport.load(Path(path))
    except (OSError, ValueError) as exc:
        click.echo(f"Cannot read answers from {path}: {exc}", err=True)
        sys.exit(1)


def echo_answers(title: str, rows: list[tuple[str, Any]]) -> None:
    click.echo(title)
    click.echo("-" * 70)
    for label, value in rows:
        click.echo(f"  {label}")
        click.echo(f"    -> {value}")
    click.echo()
