"""Shared utilities: configuration, logging and timing."""
