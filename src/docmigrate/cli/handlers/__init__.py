"""Business logic behind CLI commands."""

from docmigrate.cli.handlers.plan_handler import PlanHandler

__all__ = ["PlanHandler"]
