"""Tests for schema, mapping and index plan files."""

import json

import pytest
import yaml

from docmigrate.core.indexes import IndexInferenceEngine, IndexPlan
from docmigrate.core.mapping import DenormalizationEngine, Mapping
from docmigrate.core.schema import SourceSchema, format_bytes
from docmigrate.utils.files import read_document


def test_schema_roundtrip_yaml(shop_tables, tmp_path):
    schema = SourceSchema(tables=shop_tables, database_type="postgres", database="shop")
    path = tmp_path / "out" / "schema.yaml"

    schema.save(path)
    loaded = SourceSchema.load(path)

    assert loaded == schema
    assert loaded.table("orders").foreign_keys[0].referenced_table == "customers"
    assert loaded.table("missing") is None


def test_schema_from_handwritten_yaml(tmp_path):
    path = tmp_path / "schema.yml"
    path.write_text(
        """
tables:
  - name: users
    columns:
      - {name: id, data_type: integer}
      - {name: email, data_type: varchar}
    primary_key: {columns: [id]}
    row_count: 10
  - name: posts
    columns:
      - {name: id, data_type: integer}
      - {name: user_id, data_type: integer}
    foreign_keys:
      - {columns: [user_id], referenced_table: users, referenced_columns: [id]}
"""
    )

    schema = SourceSchema.load(path)

    assert schema.table_names == ["users", "posts"]
    assert schema.table("users").primary_key.columns == ["id"]
    assert schema.table("users").columns[1].nullable
    assert schema.table("posts").primary_key is None
    assert schema.table("posts").row_count == 0
    assert [t.name for t in schema.select(["posts", "users"])] == ["users", "posts"]


def test_schema_without_tables_rejected(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text("database: shop\n")

    with pytest.raises(ValueError):
        SourceSchema.load(path)


def test_mapping_and_plan_roundtrip_json(shop_tables, tmp_path):
    mapping = DenormalizationEngine().suggest(shop_tables).mapping
    plan = IndexInferenceEngine().infer(shop_tables, mapping)

    mapping.save(tmp_path / "mapping.json")
    plan.save(tmp_path / "indexes.json")

    assert Mapping.load(tmp_path / "mapping.json") == mapping
    assert IndexPlan.load(tmp_path / "indexes.json") == plan

    raw = json.loads((tmp_path / "mapping.json").read_text())
    customers = raw["collections"][0]
    assert customers["embedded"][0]["relationship"] == "array"
    assert "references" not in customers


def test_mapping_yaml_is_plain_data(shop_tables, tmp_path):
    mapping = DenormalizationEngine().suggest(shop_tables).mapping
    path = tmp_path / "mapping.yaml"

    mapping.save(path)

    data = yaml.safe_load(path.read_text())
    assert [c["name"] for c in data["collections"]] == ["customers", "products"]


def test_unsupported_suffix(tmp_path):
    with pytest.raises(ValueError, match="Unsupported file type"):
        Mapping().save(tmp_path / "mapping.txt")


def test_read_document_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_document(tmp_path / "nope.yaml")

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        read_document(listing)

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert read_document(empty) == {}


def test_format_bytes():
    assert format_bytes(512) == "512 B"
    assert format_bytes(2048) == "2.0 KB"
    assert format_bytes(16 * 1024 * 1024) == "16.0 MB"
    assert format_bytes(3 * 1024**3) == "3.0 GB"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
