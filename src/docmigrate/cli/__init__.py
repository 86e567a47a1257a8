"""Command line interface for docmigrate."""
