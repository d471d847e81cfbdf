"""CLI command: tddbuilder interview -- run the adaptive questionnaire."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from tddbuilder.answers.export import export_answers
from tddbuilder.cli.common import (
    LEVEL_CHOICE,
    configure_logging,
    echo_answers,
    load_answer_file,
    load_catalogs,
    split_tags,
)
from tddbuilder.config import InterviewConfig
from tddbuilder.document.markdown import render_markdown, write_document
from tddbuilder.document.sections import format_value, group_answers, preview
from tddbuilder.events.bus import EventBus
from tddbuilder.interviewer.console import ConsoleInterviewer
from tddbuilder.interviewer.scripted import ScriptedInterviewer
from tddbuilder.session.controller import InterviewOutcome, StageController
from tddbuilder.telemetry import TelemetrySession

_STATUS_ICONS = {"complete": "[x]", "partial": "[~]", "minimal": "[ ]"}


def _show_review(outcome: InterviewOutcome, controller: StageController) -> None:
    click.echo("=" * 70)
    click.echo("  REVIEW YOUR ANSWERS")
    click.echo("=" * 70)
    click.echo()
    for group in group_answers(outcome.answers, controller.schema):
        echo_answers(
            group.section.title,
            [(entry.prompt, format_value(entry.value)) for entry in group.entries],
        )

    analysis = outcome.analysis
    click.echo(f"Complexity: {outcome.level.value} (recommended {analysis.level.value}, score {analysis.score})")
    if outcome.overridden:
        click.echo("  Level override in effect.")
    click.echo("Sections to be generated:")
    for item in preview(outcome.answers, outcome.level):
        icon = _STATUS_ICONS[item.status]
        click.echo(f"  {icon} {item.title}: {item.completeness}% ({item.answered}/{item.total})")
    click.echo()


@click.command()
@click.option("--tags", help="Comma-separated topic tags to focus on.")
@click.option("--level", type=LEVEL_CHOICE, help="Override the recommended complexity level.")
@click.option("--answers", "answers_file", type=click.Path(exists=True), help="Pre-filled answers (file mode).")
@click.option("--output", "-o", help="Output directory or .md file for the document.")
@click.option("--export", "export_file", type=click.Path(), help="Write the answers to this JSON file.")
@click.option("--questionnaire", type=click.Path(exists=True), help="Questionnaire JSON file.")
@click.option("--tag-schema", type=click.Path(exists=True), help="Tag metadata JSON file.")
@click.option("--telemetry/--no-telemetry", default=None, help="Record anonymous session metrics.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def interview(
    tags: str | None,
    level: str | None,
    answers_file: str | None,
    output: str | None,
    export_file: str | None,
    questionnaire: str | None,
    tag_schema: str | None,
    telemetry: bool | None,
    verbose: bool,
) -> None:
    """Run the three-stage interview and write the technical design document.

    With --answers the interview runs non-interactively from an exported
    answer file and keeps the level it records unless --level is given.
    Questions the file does not cover are left unanswered.
    """
    configure_logging(verbose)
    recorded = load_answer_file(answers_file) if answers_file else None
    if level is None and recorded is not None and recorded.level is not None:
        level = recorded.level.value

    config = InterviewConfig.from_env(
        questionnaire_path=questionnaire,
        tags_path=tag_schema,
        output_dir=output,
        tags=split_tags(tags),
        level=level,
        telemetry=telemetry,
    )
    schema, tag_metadata = load_catalogs(config.questionnaire_path, config.tags_path)

    if recorded is not None:
        interviewer = ScriptedInterviewer(recorded.answers)
    else:
        interviewer = ConsoleInterviewer()

    bus = EventBus()
    session = TelemetrySession(bus) if config.telemetry else None
    controller = StageController(schema, interviewer, tag_metadata, config=config, event_bus=bus)

    try:
        outcome = controller.run()
    except KeyboardInterrupt:
        click.echo("\nInterview cancelled.", err=True)
        sys.exit(1)

    if isinstance(interviewer, ScriptedInterviewer):
        for question_id, errors in sorted(interviewer.rejected.items()):
            click.echo(f"Ignored answer for {question_id}: {'; '.join(errors)}", err=True)

    _show_review(outcome, controller)

    markdown = render_markdown(schema, outcome.answers, outcome.level)
    path = write_document(markdown, config.output_dir, outcome.answers)
    click.echo(f"TDD saved to: {path}")

    if export_file:
        export_answers(outcome.answers, outcome.level, Path(export_file))
        click.echo(f"Answers exported to: {export_file}")

    if session is not None:
        click.echo(f"Telemetry saved to: {session.save(config.telemetry_dir)}")
