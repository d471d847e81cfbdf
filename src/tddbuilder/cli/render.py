"""CLI command: tddbuilder render -- build the document from an answer file."""

from __future__ import annotations

import click

from tddbuilder.cli.common import LEVEL_CHOICE, load_answer_file, load_catalogs
from tddbuilder.document.markdown import render_markdown, write_document
from tddbuilder.engine.complexity import recommend_level


@click.command()
@click.argument("answers_file", type=click.Path(exists=True))
@click.option("--output", "-o", default="docs", show_default=True, help="Output .md file or directory.")
@click.option("--level", type=LEVEL_CHOICE, help="Override the complexity level.")
@click.option("--questionnaire", type=click.Path(exists=True), help="Questionnaire JSON file.")
@click.option("--tag-schema", type=click.Path(exists=True), help="Tag metadata JSON file.")
def render(
    answers_file: str,
    output: str,
    level: str | None,
    questionnaire: str | None,
    tag_schema: str | None,
) -> None:
    """Render the technical design document from an exported answer file.

    The level comes from --level, else the level recorded in the file, else
    the recommendation for the answers.
    """
    schema, _ = load_catalogs(questionnaire, tag_schema)
    export = load_answer_file(answers_file)
    chosen = level or (export.level.value if export.level else recommend_level(export.answers).value)

    path = write_document(render_markdown(schema, export.answers, chosen), output, export.answers)
    click.echo(f"TDD saved to: {path} (level: {chosen})")
