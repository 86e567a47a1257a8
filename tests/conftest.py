"""Shared fixtures for docmigrate tests."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pytest

from docmigrate.core.schema import Column, ForeignKey, Index, PrimaryKey, Table
from docmigrate.utils.config import set_config


def build_table(
    name: str,
    columns: Sequence[str] = ("id",),
    pk: Optional[Sequence[str]] = ("id",),
    fks: Sequence[Tuple[str, str, str]] = (),
    indexes: Sequence[Tuple[Sequence[str], bool]] = (),
    rows: int = 0,
    size: int = 0,
    data_type: str = "integer",
) -> Table:
    """Build a table. ``fks`` holds (column, referenced_table, referenced_column)."""
    return Table(
        name=name,
        columns=[Column(name=c, data_type=data_type) for c in columns],
        primary_key=PrimaryKey(columns=list(pk), name=f"pk_{name}") if pk else None,
        foreign_keys=[
            ForeignKey(
                columns=[col],
                referenced_table=ref_table,
                referenced_columns=[ref_col],
                name=f"fk_{name}_{col}",
            )
            for col, ref_table, ref_col in fks
        ],
        indexes=[
            Index(columns=list(cols), name=f"idx_{name}_{'_'.join(cols)}", unique=unique)
            for cols, unique in indexes
        ],
        row_count=rows,
        size_bytes=size,
    )


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path):
    """Isolate every test from config.yml / env overrides."""
    monkeypatch.delenv("DOCMIGRATE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def make_table():
    return build_table


@pytest.fixture
def shop_tables() -> List[Table]:
    """customers <- orders <- order_items -> products."""
    return [
        build_table("customers", ["id", "name"], rows=100, size=10_000),
        build_table(
            "orders",
            ["id", "customer_id", "created_at"],
            fks=[("customer_id", "customers", "id")],
            indexes=[(["created_at"], False)],
            rows=1_000,
            size=64_000,
        ),
        build_table(
            "order_items",
            ["id", "order_id", "product_id", "quantity"],
            fks=[("order_id", "orders", "id"), ("product_id", "products", "id")],
            indexes=[(["product_id"], False)],
            rows=5_000,
            size=200_000,
        ),
        build_table("products", ["id", "name"], rows=50, size=5_000),
    ]


@pytest.fixture
def cyclic_tables() -> List[Table]:
    """a -> b -> c -> a, each through a single-column FK."""
    return [
        build_table("a", ["id", "b_id"], fks=[("b_id", "b", "id")], rows=10),
        build_table("b", ["id", "c_id"], fks=[("c_id", "c", "id")], rows=10),
        build_table("c", ["id", "a_id"], fks=[("a_id", "a", "id")], rows=10),
    ]


@pytest.fixture
def school_tables() -> List[Table]:
    """students / courses with an enrollments join table."""
    return [
        build_table("students", ["id", "name"], rows=200),
        build_table("courses", ["id", "title"], rows=20),
        build_table(
            "enrollments",
            ["id", "student_id", "course_id", "enrolled_at"],
            fks=[("student_id", "students", "id"), ("course_id", "courses", "id")],
            rows=1_000,
        ),
    ]
