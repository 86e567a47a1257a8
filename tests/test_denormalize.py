"""Tests for relationship choices and the denormalization engine."""

from collections import Counter

import pytest

from docmigrate.core.mapping import (
    RELATIONSHIP_SINGLE,
    DenormalizationEngine,
    RelationshipChoice,
    RelationshipGraph,
    classify_relationship,
    enforce_cycle_constraints,
    relationship_edges,
    suggest_choices,
)


def assert_embedding_acyclic(mapping):
    """The Embedded-only relation of a mapping must order bottom-up."""
    embeds = {child: parent for child, parent in mapping.embed_edges()}
    _, error = RelationshipGraph.topological_sort(embeds)
    assert error is None


def assert_single_owner(mapping):
    counts = Counter(mapping.placed_tables())
    assert all(n == 1 for n in counts.values()), counts


def test_classify_relationship():
    assert classify_relationship(100, 100) == RelationshipChoice.EMBED_SINGLE
    assert classify_relationship(50, 100) == RelationshipChoice.EMBED_SINGLE
    assert classify_relationship(150, 100) == RelationshipChoice.EMBED_ARRAY
    # missing statistics default to array
    assert classify_relationship(0, 100) == RelationshipChoice.EMBED_ARRAY
    assert classify_relationship(100, 0) == RelationshipChoice.EMBED_ARRAY


def test_relationship_choice_parse():
    assert RelationshipChoice.parse("embed array") == RelationshipChoice.EMBED_ARRAY
    assert RelationshipChoice.parse("embed_single") == RelationshipChoice.EMBED_SINGLE
    assert RelationshipChoice.parse("Reference") == RelationshipChoice.REFERENCE
    with pytest.raises(ValueError):
        RelationshipChoice.parse("flatten")


def test_relationship_edges_labels(school_tables, make_table):
    tables = school_tables + [
        make_table("staff", ["id", "boss_id"], fks=[("boss_id", "staff", "id")])
    ]

    infos = relationship_edges(RelationshipGraph(tables))

    assert [(i.edge.parent_table, i.edge.child_table) for i in infos] == [
        ("courses", "enrollments"),
        ("staff", "staff"),
        ("students", "enrollments"),
    ]
    assert [i.is_join_table for i in infos] == [True, False, True]
    assert [i.is_self_reference for i in infos] == [False, True, False]


def test_suggest_nests_multiple_levels(shop_tables):
    """customers -> orders -> order_items becomes a two-level nested tree."""
    result = DenormalizationEngine().suggest(shop_tables)
    mapping = result.mapping

    assert [c.name for c in mapping.collections] == ["customers", "products"]
    customers = mapping.collection("customers")
    assert [e.source_table for e in customers.embedded] == ["orders"]
    orders = customers.embedded[0]
    assert orders.relationship == "array"
    assert orders.join_column == "customer_id"
    assert orders.parent_column == "id"
    assert [e.source_table for e in orders.embedded] == ["order_items"]
    assert result.warnings == []

    assert RelationshipGraph.nesting_depth(dict(mapping.embed_edges())) == 2
    assert_single_owner(mapping)
    assert set(mapping.placed_tables()) == {t.name for t in shop_tables}


def test_suggest_one_to_one_embeds_single(make_table):
    tables = [
        make_table("users", ["id"], rows=100),
        make_table("profiles", ["id", "user_id"], fks=[("user_id", "users", "id")], rows=100),
    ]

    mapping = DenormalizationEngine().suggest(tables).mapping

    assert len(mapping.collections) == 1
    assert mapping.collections[0].embedded[0].relationship == RELATIONSHIP_SINGLE


def test_reference_choice_is_not_descended(shop_tables):
    choices = {
        ("orders", "customers"): RelationshipChoice.REFERENCE,
        ("order_items", "orders"): RelationshipChoice.EMBED_ARRAY,
        ("order_items", "products"): RelationshipChoice.REFERENCE,
    }

    mapping = DenormalizationEngine().build(shop_tables, choices).mapping

    assert [c.name for c in mapping.collections] == ["customers", "products", "orders"]
    customers = mapping.collection("customers")
    assert customers.embedded == []
    assert [(r.source_table, r.field_name, r.join_column) for r in customers.references] == [
        ("orders", "orders", "customer_id")
    ]
    orders = mapping.collection("orders")
    assert [e.source_table for e in orders.embedded] == ["order_items"]
    # order_items lives inside orders, products still links to it
    assert [
        (r.source_table, r.field_name, r.join_column)
        for r in mapping.collection("products").references
    ] == [("order_items", "order_items", "product_id")]
    assert_single_owner(mapping)


def test_missing_choices_default_to_reference(shop_tables):
    mapping = DenormalizationEngine().build(shop_tables, {}).mapping

    assert mapping.embed_edges() == []
    assert sorted(c.name for c in mapping.collections) == sorted(
        t.name for t in shop_tables
    )


def test_choices_keyed_by_edge(shop_tables):
    graph = RelationshipGraph(shop_tables)
    edge = graph.edge_between("orders", "customers")

    mapping = DenormalizationEngine().build(
        shop_tables, {edge: RelationshipChoice.EMBED_SINGLE}
    ).mapping

    embedded = mapping.collection("customers").embedded
    assert [(e.source_table, e.relationship) for e in embedded] == [("orders", "single")]


def test_caller_choices_not_mutated(cyclic_tables):
    choices = {
        ("a", "b"): RelationshipChoice.EMBED_ARRAY,
        ("b", "c"): RelationshipChoice.EMBED_ARRAY,
        ("c", "a"): RelationshipChoice.EMBED_ARRAY,
    }
    snapshot = dict(choices)

    result = DenormalizationEngine().build(cyclic_tables, choices)

    assert choices == snapshot
    assert list(result.choices.values()).count(RelationshipChoice.REFERENCE) == 1


def test_unrecognized_choice_falls_back_to_reference(shop_tables, caplog):
    choices = {
        ("orders", "customers"): "bogus",
        ("order_items", "orders"): "embed array",
    }

    with caplog.at_level("WARNING", logger="docmigrate"):
        result = DenormalizationEngine().build(shop_tables, choices)

    edge = RelationshipGraph(shop_tables).edge_between("orders", "customers")
    assert result.choices[edge] == RelationshipChoice.REFERENCE
    assert sorted(result.mapping.placed_tables()) == sorted(t.name for t in shop_tables)
    assert sorted(c.name for c in result.mapping.collections) == [
        "customers",
        "orders",
        "products",
    ]
    assert "bogus" in caplog.text


def test_three_node_embed_cycle_is_broken(cyclic_tables):
    choices = {
        ("a", "b"): RelationshipChoice.EMBED_ARRAY,
        ("b", "c"): RelationshipChoice.EMBED_ARRAY,
        ("c", "a"): RelationshipChoice.EMBED_ARRAY,
    }

    result = DenormalizationEngine().build(cyclic_tables, choices)

    assert result.warnings == ["Cycle detected: c→a forced to reference"]
    assert_embedding_acyclic(result.mapping)
    assert_single_owner(result.mapping)


def test_two_node_embed_cycle_is_broken(make_table):
    tables = [
        make_table("a", ["id", "b_id"], fks=[("b_id", "b", "id")]),
        make_table("b", ["id", "a_id"], fks=[("a_id", "a", "id")]),
    ]
    choices = {
        ("a", "b"): RelationshipChoice.EMBED_SINGLE,
        ("b", "a"): RelationshipChoice.EMBED_SINGLE,
    }

    result = DenormalizationEngine().build(tables, choices)

    assert len(result.warnings) == 1
    assert_embedding_acyclic(result.mapping)
    assert_single_owner(result.mapping)


def test_explicit_root_builds_chain_through_broken_cycle(cyclic_tables):
    choices = {
        ("a", "b"): RelationshipChoice.EMBED_ARRAY,
        ("b", "c"): RelationshipChoice.EMBED_ARRAY,
        ("c", "a"): RelationshipChoice.EMBED_ARRAY,
    }

    mapping = DenormalizationEngine().build(cyclic_tables, choices, root_tables=["c"]).mapping

    assert [c.name for c in mapping.collections] == ["c"]
    c = mapping.collections[0]
    assert c.embedded[0].source_table == "b"
    assert c.embedded[0].embedded[0].source_table == "a"
    assert_embedding_acyclic(mapping)


def test_enforce_cycle_constraints_leaves_acyclic_choices(shop_tables):
    choices = suggest_choices(RelationshipGraph(shop_tables))

    result, warnings = enforce_cycle_constraints(choices)

    assert result == choices
    assert warnings == []


def test_self_reference_never_embedded(make_table):
    tables = [
        make_table("departments", ["id"], rows=10),
        make_table(
            "employees",
            ["id", "manager_id", "department_id"],
            fks=[("manager_id", "employees", "id"), ("department_id", "departments", "id")],
            rows=100,
        ),
    ]
    choices = {
        ("employees", "employees"): RelationshipChoice.EMBED_ARRAY,
        ("employees", "departments"): RelationshipChoice.EMBED_ARRAY,
    }

    result = DenormalizationEngine().build(tables, choices)
    mapping = result.mapping

    assert "employees" not in [child for child, _ in mapping.embed_edges()]
    assert [c.name for c in mapping.collections] == ["departments", "employees"]
    employees = mapping.collection("employees")
    assert [(r.field_name, r.join_column) for r in employees.references] == [
        ("employees_ref", "manager_id")
    ]
    departments = mapping.collection("departments")
    assert [(r.field_name, r.join_column) for r in departments.references] == [
        ("employees_ref", "department_id")
    ]
    self_edge = RelationshipGraph(tables).edge_between("employees", "employees")
    assert result.choices[self_edge] == RelationshipChoice.REFERENCE
    # the applied choices agree with the mapping for edges out of employees too
    department_edge = RelationshipGraph(tables).edge_between("employees", "departments")
    assert result.choices[department_edge] == RelationshipChoice.REFERENCE


def test_explicit_roots_leave_unplaced_tables_out(shop_tables):
    mapping = DenormalizationEngine().suggest(shop_tables, root_tables=["customers"]).mapping

    assert [c.name for c in mapping.collections] == ["customers"]
    assert "products" not in mapping.placed_tables()


def test_all_tables_have_foreign_keys_falls_back_to_every_root(cyclic_tables):
    mapping = DenormalizationEngine().build(cyclic_tables, {}).mapping

    assert [c.name for c in mapping.collections] == ["a", "b", "c"]


def test_reference_suffix_from_config(make_table):
    tables = [make_table("nodes", ["id", "parent_id"], fks=[("parent_id", "nodes", "id")])]

    mapping = DenormalizationEngine({"reference_suffix": "_link"}).suggest(tables).mapping

    assert mapping.collections[0].references[0].field_name == "nodes_link"


def test_preview(shop_tables):
    engine = DenormalizationEngine()
    mapping = engine.suggest(shop_tables).mapping

    assert engine.preview(mapping) == [
        "customers (collection)",
        "└─ orders[] (embedded array)",
        "   └─ order_items[] (embedded array)",
        "products (collection)",
    ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
