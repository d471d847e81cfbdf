"""CLI command: tddbuilder assess -- score an exported answer file."""

from __future__ import annotations

import click

from tddbuilder.cli.common import load_answer_file
from tddbuilder.engine.complexity import RISK_WEIGHTS, analyze, count_answered, meets_minimum_fields
from tddbuilder.schema import load_tag_metadata


@click.command()
@click.argument("answers_file", type=click.Path(exists=True))
@click.option("--weighted", is_flag=True, help="Add tag-metadata field weights to the score.")
def assess(answers_file: str, weighted: bool) -> None:
    """Print risk factors, score, recommended level and sections."""
    export = load_answer_file(answers_file)
    analysis = analyze(export.answers, load_tag_metadata() if weighted else None)
    risk = analysis.risk_factors

    click.echo("Risk factors:")
    for name in RISK_WEIGHTS:
        mark = "x" if getattr(risk, name) else " "
        click.echo(f"  [{mark}] {name} (+{RISK_WEIGHTS[name]})")
    click.echo(f"  external_integrations: {risk.external_integrations}")
    click.echo()
    click.echo(f"Score: {analysis.score}")
    click.echo(f"Recommended level: {analysis.level.value} - {analysis.description}")
    if export.level is not None and export.level is not analysis.level:
        click.echo(f"Level recorded in file: {export.level.value}")
    click.echo(f"Sections: {', '.join(analysis.sections)}")

    answered = count_answered(export.answers)
    status = "ok" if meets_minimum_fields(analysis.level, answered) else "below minimum"
    click.echo(f"Answered fields: {answered} (minimum {analysis.min_fields}, {status})")
