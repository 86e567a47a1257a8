"""Planning commands - analyze, design, estimate, indexes."""

from __future__ import annotations

import click

from docmigrate.cli.decorators import handle_errors, with_output_file, with_tables
from docmigrate.cli.handlers import PlanHandler
from docmigrate.cli.output import OutputFormatter
from docmigrate.cli.utils import CLIDataLoader
from docmigrate.core.schema import format_bytes
from docmigrate.utils.config import get_config
from docmigrate.utils.logging import get_logger
from docmigrate.utils.timing import get_latency_tracker

logger = get_logger(__name__)
out = OutputFormatter()


@click.group(name="plan")
@click.option(
    "--timings",
    is_flag=True,
    help="Print per-operation timings when the command finishes",
)
@click.pass_context
def plan_group(ctx, timings):
    """Plan a relational to document migration.

    These commands read a schema document (YAML or JSON) produced by schema
    discovery and never connect to a database.
    """
    if timings:
        get_latency_tracker().reset()
        ctx.call_on_close(_print_timings)


def _print_timings():
    stats = get_latency_tracker().get_stats()
    if not stats:
        return

    out.section("⏱️  Timings")
    out.stats(
        {
            op: f"{s['count']} call(s), mean {s['mean_ms']}ms, max {s['max_ms']}ms"
            for op, s in sorted(stats.items())
        }
    )


@plan_group.command(name="analyze")
@click.argument("schema_file", type=click.Path(exists=True))
@with_tables
@handle_errors
def analyze_cmd(schema_file, tables):
    """Show self-references, FK cycles and many-to-many join tables.

    \b
    Example:
        docmigrate plan analyze schema.yaml
    """
    loader = CLIDataLoader()
    schema = loader.load_schema(schema_file)
    selected = loader.select_tables(schema, tables)
    facts = PlanHandler(get_config()).analyze(selected)

    out.section("📋 Schema")
    out.lines(schema.summary().splitlines())

    out.section(f"📊 Relationships ({len(facts['relationships'])})")
    for info in facts["relationships"]:
        edge = info.edge
        label = ""
        if info.is_self_reference:
            label = " (self-ref)"
        elif info.is_join_table:
            label = " (M2M join)"
        click.echo(
            f"   {edge.child_table}.{edge.join_column} → "
            f"{edge.parent_table}.{edge.parent_column}{label}"
        )

    out.section("Self-references")
    out.list_items([repr(e) for e in facts["self_references"]] or ["none"])

    out.section("Cycles")
    out.list_items([" → ".join(c) for c in facts["cycles"]] or ["none"])

    out.section("Join tables")
    out.list_items(
        [
            f"{jt.join_table}: {jt.left_table} ↔ {jt.right_table}"
            for jt in facts["join_tables"]
        ]
        or ["none"]
    )


@plan_group.command(name="design")
@click.argument("schema_file", type=click.Path(exists=True))
@click.option(
    "--root",
    "roots",
    multiple=True,
    help="Explicit root collection table (repeatable)",
)
@with_tables
@with_output_file
@handle_errors
def design_cmd(schema_file, roots, tables, output):
    """Suggest a document mapping from the FK graph.

    \b
    Example:
        docmigrate plan design schema.yaml --root customers -o mapping.yaml
    """
    selected = CLIDataLoader().load_tables(schema_file, tables)
    handler = PlanHandler(get_config())
    result = handler.design(selected, list(roots))

    out.section("📄 Mapping preview")
    out.lines(handler.preview(result.mapping))

    for warning in result.warnings:
        out.warning(warning)

    if output:
        result.mapping.save(output)
        out.success(f"Mapping saved to {output}")
    else:
        out.next_steps(
            "Next steps:",
            ["Re-run with --output mapping.yaml to save the mapping"],
        )


@plan_group.command(name="estimate")
@click.argument("schema_file", type=click.Path(exists=True))
@click.argument("mapping_file", type=click.Path(exists=True))
@handle_errors
def estimate_cmd(schema_file, mapping_file):
    """Estimate document sizes and flag collections over the size limit.

    \b
    Example:
        docmigrate plan estimate schema.yaml mapping.yaml
    """
    loader = CLIDataLoader()
    schema = loader.load_schema(schema_file)
    mapping = loader.load_mapping(mapping_file)
    estimates = PlanHandler(get_config()).estimate(schema.tables, mapping)

    out.section("📏 Document size estimates")
    for est in estimates:
        click.echo(
            f"   {est.collection}: avg {format_bytes(est.avg_doc_size_bytes)}, "
            f"max {format_bytes(est.max_doc_size_bytes)}"
        )
        if est.warning:
            out.warning(f"{est.collection}: {est.warning}")

    oversized = sum(1 for e in estimates if e.exceeds_limit)
    if oversized:
        out.error(f"{oversized} collection(s) may exceed the document size limit")
    else:
        out.success("All collections fit within the document size limit")


@plan_group.command(name="indexes")
@click.argument("schema_file", type=click.Path(exists=True))
@click.argument("mapping_file", type=click.Path(exists=True))
@with_output_file
@handle_errors
def indexes_cmd(schema_file, mapping_file, output):
    """Infer target indexes from the source schema and a mapping.

    \b
    Example:
        docmigrate plan indexes schema.yaml mapping.yaml -o indexes.yaml
    """
    loader = CLIDataLoader()
    schema = loader.load_schema(schema_file)
    mapping = loader.load_mapping(mapping_file)
    plan = PlanHandler(get_config()).indexes(schema.tables, mapping)

    out.section(f"🔑 Index plan ({len(plan.indexes)} indexes)")
    out.list_items(plan.explanations)

    if output:
        plan.save(output)
        out.success(f"Index plan saved to {output}")
