"""Output formatting utilities for CLI."""

from __future__ import annotations

from typing import Any, Dict, List

import click


class OutputFormatter:
    """Format output for CLI display.

    Example:
        >>> out = OutputFormatter()
        >>> out.success("Mapping written")
        >>> out.stats({"collections": 3, "indexes": 7})
    """

    @staticmethod
    def success(message: str) -> None:
        click.echo(f"✓ {message}")

    @staticmethod
    def error(message: str) -> None:
        click.echo(f"❌ {message}", err=True)

    @staticmethod
    def warning(message: str) -> None:
        click.echo(f"⚠️  {message}")

    @staticmethod
    def section(title: str) -> None:
        click.echo(f"\n{title}")

    @staticmethod
    def stats(stats_dict: Dict[str, Any], indent: str = "   ") -> None:
        """Display statistics dictionary in key: value format."""
        for key, value in stats_dict.items():
            click.echo(f"{indent}{key}: {value}")

    @staticmethod
    def list_items(items: List[str], indent: str = "   ", bullet: str = "-") -> None:
        for item in items:
            click.echo(f"{indent}{bullet} {item}")

    @staticmethod
    def lines(lines: List[str], indent: str = "   ") -> None:
        """Display pre-rendered lines (e.g. a mapping preview) verbatim."""
        for line in lines:
            click.echo(f"{indent}{line}")

    @staticmethod
    def next_steps(title: str, steps: List[str]) -> None:
        click.echo(f"\n{title}")
        for step in steps:
            click.echo(f"   - {step}")
