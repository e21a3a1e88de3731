"""
JSON document adapter.

A document is a JSON array of records. Reading a missing document creates it
with an empty array; writing always replaces the whole file.
"""

from __future__ import annotations

from pathlib import Path
import json

from coursedb.core.errors import PersistenceError


def ensure_document(path: Path) -> None:
    """Create the document (and its folder) holding ``[]`` when absent."""
    if path.exists():
        return
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("[]\n", encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Failed to create {path}: {exc}") from exc


def load_records(path: Path) -> list:
    ensure_document(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise PersistenceError(f"Failed to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PersistenceError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise PersistenceError(f"{path} must hold a JSON array, got {type(data).__name__}")
    return data


def save_records(path: Path, records: list) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc
