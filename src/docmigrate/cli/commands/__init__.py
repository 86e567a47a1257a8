"""CLI command modules."""

from . import plan_group

__all__ = ["plan_group"]
