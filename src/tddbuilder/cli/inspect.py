"""CLI command: tddbuilder inspect -- list catalog questions."""

from __future__ import annotations

import click

from tddbuilder.cli.common import load_catalogs, split_tags
from tddbuilder.engine.tag_router import questions_by_tags
from tddbuilder.model.question import Stage


@click.command()
@click.option("--stage", type=click.Choice([s.value for s in Stage]), help="Only this stage.")
@click.option("--tags", help="Comma-separated tag filter (any match).")
@click.option("--questionnaire", type=click.Path(exists=True), help="Questionnaire JSON file.")
@click.option("--tag-schema", type=click.Path(exists=True), help="Tag metadata JSON file.")
def inspect(
    stage: str | None, tags: str | None, questionnaire: str | None, tag_schema: str | None
) -> None:
    """Display the question catalog.

    Shows each question with its stage, type, tags, skip condition and triggers.
    """
    schema, tag_metadata = load_catalogs(questionnaire, tag_schema)

    questions = schema.questions_by_stage(stage) if stage else list(schema)
    selected = split_tags(tags)
    if selected:
        questions = questions_by_tags(questions, selected, tag_metadata)

    click.echo(f"Catalog version: {schema.version}")
    click.echo(f"Questions: {len(questions)} of {len(schema)}")
    click.echo(f"Tags: {', '.join(tag_metadata.available_tags())}")
    click.echo()

    for question in questions:
        parts = [f"  {question.id}", f"stage={question.stage.value}", f"type={question.type.value}"]
        parts.append(f"tags={','.join(tag_metadata.tags_for(question))}")
        if question.required:
            parts.append("required")
        click.echo("  ".join(parts))
        prompt = question.prompt[:60] + "..." if len(question.prompt) > 60 else question.prompt
        click.echo(f'      "{prompt}"')
        if question.skip_if is not None:
            click.echo(f"      skip_if: {question.skip_if}")
        for value, targets in question.triggers.items():
            click.echo(f"      on {value!r} -> {', '.join(targets)}")
