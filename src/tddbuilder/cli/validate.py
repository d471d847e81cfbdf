"""CLI command: tddbuilder validate -- check the questionnaire and tag catalogs."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from tddbuilder.cli.common import echo_schema_error
from tddbuilder.model.diagnostic import Severity
from tddbuilder.schema import DEFAULT_QUESTIONNAIRE_PATH, DEFAULT_TAGS_PATH, SchemaError
from tddbuilder.schema.loader import read_document
from tddbuilder.validation import validate_catalog, validate_tag_document


@click.command()
@click.option("--questionnaire", type=click.Path(exists=True), help="Questionnaire JSON file.")
@click.option("--tag-schema", type=click.Path(exists=True), help="Tag metadata JSON file.")
def validate(questionnaire: str | None, tag_schema: str | None) -> None:
    """Check both catalogs and print every diagnostic.

    Exits with code 0 if no errors are found, or code 1 if there are errors.
    """
    questionnaire_path = Path(questionnaire) if questionnaire else DEFAULT_QUESTIONNAIRE_PATH
    tags_path = Path(tag_schema) if tag_schema else DEFAULT_TAGS_PATH

    try:
        document = read_document(questionnaire_path)
        tag_document = read_document(tags_path)
    except SchemaError as exc:
        echo_schema_error(exc)
        sys.exit(1)

    diagnostics = validate_catalog(document)
    questions = document.get("questions")
    question_ids = (
        {q["id"] for q in questions if isinstance(q, dict) and isinstance(q.get("id"), str)}
        if isinstance(questions, list)
        else set()
    )
    diagnostics += validate_tag_document(tag_document, question_ids)

    if not diagnostics:
        click.echo(f"OK: {questionnaire_path.name} and {tags_path.name} are valid (0 diagnostics)")
        sys.exit(0)

    errors = [d for d in diagnostics if d.severity is Severity.ERROR]
    warnings = [d for d in diagnostics if d.severity is Severity.WARNING]
    infos = [d for d in diagnostics if d.severity is Severity.INFO]

    for diag in diagnostics:
        click.echo(str(diag))

    click.echo()
    click.echo(
        f"Summary: {len(errors)} error(s), {len(warnings)} warning(s), {len(infos)} info"
    )

    if errors:
        sys.exit(1)
    sys.exit(0)
