"""Source schema data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Column:
    """A source table column."""

    name: str
    data_type: str
    nullable: bool = True
    is_sequence: bool = False  # sequence / auto-increment backed
    default_value: Optional[str] = None
    max_length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "data_type": self.data_type,
            "nullable": self.nullable,
        }
        if self.is_sequence:
            data["is_sequence"] = True
        if self.default_value is not None:
            data["default_value"] = self.default_value
        if self.max_length is not None:
            data["max_length"] = self.max_length
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Column:
        return cls(
            name=data["name"],
            data_type=data.get("data_type", ""),
            nullable=data.get("nullable", True),
            is_sequence=data.get("is_sequence", False),
            default_value=data.get("default_value"),
            max_length=data.get("max_length"),
        )


@dataclass
class PrimaryKey:
    """Primary key: ordered column names."""

    columns: List[str]
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PrimaryKey:
        return cls(columns=list(data.get("columns", [])), name=data.get("name", ""))


@dataclass
class ForeignKey:
    """Foreign key from the owning table's columns to a referenced table."""

    columns: List[str]
    referenced_table: str
    referenced_columns: List[str]
    name: str = ""

    def __repr__(self) -> str:
        return (
            f"FK({self.name or '?'}: ({', '.join(self.columns)}) -> "
            f"{self.referenced_table}({', '.join(self.referenced_columns)}))"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": list(self.columns),
            "referenced_table": self.referenced_table,
            "referenced_columns": list(self.referenced_columns),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ForeignKey:
        return cls(
            columns=list(data.get("columns", [])),
            referenced_table=data["referenced_table"],
            referenced_columns=list(data.get("referenced_columns", [])),
            name=data.get("name", ""),
        )


@dataclass
class Index:
    """A source index."""

    columns: List[str]
    name: str = ""
    unique: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns), "unique": self.unique}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Index:
        return cls(
            columns=list(data.get("columns", [])),
            name=data.get("name", ""),
            unique=data.get("unique", False),
        )


@dataclass
class Table:
    """A source relational table with its row/byte statistics."""

    name: str
    columns: List[Column] = field(default_factory=list)
    primary_key: Optional[PrimaryKey] = None
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    row_count: int = 0
    size_bytes: int = 0

    def __repr__(self) -> str:
        return (
            f"Table({self.name}, columns={len(self.columns)}, "
            f"fks={len(self.foreign_keys)}, rows={self.row_count})"
        )

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
        }
        if self.primary_key is not None:
            data["primary_key"] = self.primary_key.to_dict()
        if self.foreign_keys:
            data["foreign_keys"] = [fk.to_dict() for fk in self.foreign_keys]
        if self.indexes:
            data["indexes"] = [idx.to_dict() for idx in self.indexes]
        data["row_count"] = self.row_count
        data["size_bytes"] = self.size_bytes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Table:
        pk = data.get("primary_key")
        return cls(
            name=data["name"],
            columns=[Column.from_dict(c) for c in data.get("columns") or []],
            primary_key=PrimaryKey.from_dict(pk) if pk else None,
            foreign_keys=[
                ForeignKey.from_dict(fk) for fk in data.get("foreign_keys") or []
            ],
            indexes=[Index.from_dict(idx) for idx in data.get("indexes") or []],
            row_count=data.get("row_count", 0) or 0,
            size_bytes=data.get("size_bytes", 0) or 0,
        )
