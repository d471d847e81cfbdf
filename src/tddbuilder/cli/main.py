"""tddbuilder CLI entry point: Click group with subcommands."""

import click

from tddbuilder import __version__


@click.group()
@click.version_option(version=__version__, prog_name="tddbuilder")
def cli() -> None:
    """TDD Builder - adaptive questionnaire for technical design documents."""


# Import and register subcommands
from tddbuilder.cli.assess import assess  # noqa: E402
from tddbuilder.cli.inspect import inspect  # noqa: E402
from tddbuilder.cli.interview import interview  # noqa: E402
from tddbuilder.cli.render import render  # noqa: E402
from tddbuilder.cli.validate import validate  # noqa: E402

cli.add_command(interview)
cli.add_command(validate)
cli.add_command(inspect)
cli.add_command(assess)
cli.add_command(render)
