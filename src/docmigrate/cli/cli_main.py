"""CLI entry point for docmigrate."""

from __future__ import annotations

import click

from docmigrate import __version__
from docmigrate.cli.commands import plan_group
from docmigrate.utils.config import load_config
from docmigrate.utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to config.yml file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
@click.pass_context
def cli(ctx, config, log_level):
    """docmigrate - plan relational to document schema migrations.

    \b
    Examples:
        # Inspect the foreign key graph
        docmigrate plan analyze schema.yaml

        # Suggest and save a mapping
        docmigrate plan design schema.yaml -o mapping.yaml

        # Check document sizes and infer indexes
        docmigrate plan estimate schema.yaml mapping.yaml
        docmigrate plan indexes schema.yaml mapping.yaml -o indexes.yaml
    """
    ctx.ensure_object(dict)

    setup_logging(level=log_level)

    if config:
        ctx.obj["config"] = load_config(config)


cli.add_command(plan_group.plan_group)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
