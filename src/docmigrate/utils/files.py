"""Reading and writing YAML / JSON documents chosen by file suffix."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")
JSON_SUFFIXES = (".json",)


def _check_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise ValueError(
            f"Unsupported file type '{suffix}' for {path}; expected .yaml, .yml or .json"
        )
    return suffix


def write_document(path: str | Path, data: Dict[str, Any]) -> Path:
    """Write a dict to YAML or JSON, creating parent directories.

    Args:
        path: Destination file (.yaml, .yml or .json)
        data: Plain-data document

    Returns:
        The written path
    """
    path = Path(path)
    suffix = _check_suffix(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        if suffix in JSON_SUFFIXES:
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    logger.debug(f"Wrote {path}")
    return path


def read_document(path: str | Path) -> Dict[str, Any]:
    """Read a YAML or JSON file that must contain a mapping at the top level.

    Args:
        path: Source file

    Returns:
        Parsed document
    """
    path = Path(path)
    suffix = _check_suffix(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r") as f:
        if suffix in JSON_SUFFIXES:
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data
