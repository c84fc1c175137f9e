"""
Snapshot Codec - build and validate versioned snapshot documents.

A snapshot document is the portable artifact produced by export and
consumed by import:

    {
      "version": 1,
      "app": "zenpire-inventory",
      "exported_at": "2026-01-01T12:00:00+00:00",
      "plain": true,                 # only for the image-stripped variant
      "tables": {"unit": [...], "ingredient": [...], ...}
    }

Validation short-circuits at the first violation, checked in this order:
body shape, version, app, then each registered table in registry order
(present, a list, and holding only objects).

Usage:
    from zenpire_inventory.services.snapshot_codec import encode, decode_and_validate

    document = encode({"unit": [...], ...})
    document = decode_and_validate(json.loads(payload))
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from zenpire_inventory.services.exceptions import (
    AppMismatch,
    MalformedBody,
    MissingTable,
    VersionMismatch,
)
from zenpire_inventory.services.snapshot_schema import DEFAULT_REGISTRY, Record, SchemaRegistry
from zenpire_inventory.utils.constants import SNAPSHOT_APP_ID, SNAPSHOT_VERSION
from zenpire_inventory.utils.datetime_utils import utc_now

RecordTransform = Callable[[str, Record], Record]


# ============================================================================
# Data Classes
# ============================================================================


@dataclass(frozen=True)
class SnapshotDocument:
    """A validated snapshot document."""

    exported_at: str
    tables: Dict[str, List[Record]]
    version: int = SNAPSHOT_VERSION
    app: str = SNAPSHOT_APP_ID
    plain: bool = False
    table_order: Sequence[str] = field(default=(), compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format for JSON serialization."""
        data: Dict[str, Any] = {
            "version": self.version,
            "app": self.app,
            "exported_at": self.exported_at,
        }
        if self.plain:
            data["plain"] = True
        order = list(self.table_order) or list(self.tables)
        data["tables"] = {name: self.tables[name] for name in order}
        return data

    def record_counts(self) -> Dict[str, int]:
        """Number of records per table."""
        return {name: len(rows) for name, rows in self.tables.items()}


# ============================================================================
# Encoding
# ============================================================================


def encode(
    tables: Mapping[str, Sequence[Mapping[str, Any]]],
    registry: SchemaRegistry = DEFAULT_REGISTRY,
    transform: Optional[RecordTransform] = None,
    plain: bool = False,
    exported_at: Optional[datetime] = None,
) -> SnapshotDocument:
    """
    Build a snapshot document from table contents.

    Args:
        tables: Mapping of table name to records; must cover every registered table
        registry: Schema registry naming the tables to include
        transform: Optional per-record transform (table, record) -> record
        plain: Mark the document as the image-stripped variant
        exported_at: Export timestamp (default: now, UTC)

    Returns:
        SnapshotDocument with records copied in source order

    Raises:
        KeyError: If a registered table is missing from tables
    """
    stamp = (exported_at or utc_now()).isoformat()
    encoded: Dict[str, List[Record]] = {}

    for name in registry.table_names:
        rows = tables[name]
        if transform is None:
            encoded[name] = [dict(row) for row in rows]
        else:
            encoded[name] = [transform(name, dict(row)) for row in rows]

    return SnapshotDocument(
        exported_at=stamp,
        tables=encoded,
        plain=plain,
        table_order=tuple(registry.table_names),
    )


# ============================================================================
# Decoding / Validation
# ============================================================================


def decode_and_validate(
    value: Any, registry: SchemaRegistry = DEFAULT_REGISTRY
) -> SnapshotDocument:
    """
    Validate an arbitrary decoded value as a snapshot document.

    Args:
        value: Decoded JSON value (or an existing SnapshotDocument)
        registry: Schema registry naming the required tables

    Returns:
        SnapshotDocument holding only the registered tables

    Raises:
        MalformedBody: If value is not an object
        VersionMismatch: If version is not SNAPSHOT_VERSION
        AppMismatch: If app is not SNAPSHOT_APP_ID
        MissingTable: For the first registered table absent or not a list
        MalformedBody: If a record of a registered table is not an object
    """
    if isinstance(value, SnapshotDocument):
        value = value.to_dict()

    if not isinstance(value, Mapping):
        raise MalformedBody()

    version = value.get("version")
    # bool is an int subclass; True must not pass for version 1
    if isinstance(version, bool) or version != SNAPSHOT_VERSION:
        raise VersionMismatch(SNAPSHOT_VERSION, version)

    app = value.get("app")
    if app != SNAPSHOT_APP_ID:
        raise AppMismatch(SNAPSHOT_APP_ID, app)

    raw_tables = value.get("tables")
    if not isinstance(raw_tables, Mapping):
        raw_tables = {}

    tables: Dict[str, List[Record]] = {}
    for name in registry.table_names:
        rows = raw_tables.get(name)
        if not isinstance(rows, list):
            raise MissingTable(name)
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise MalformedBody(f"record {index} of table {name} is not an object", table=name)
        tables[name] = rows

    return SnapshotDocument(
        exported_at=value.get("exported_at", ""),
        tables=tables,
        plain=bool(value.get("plain", False)),
        table_order=tuple(registry.table_names),
    )


# ============================================================================
# File Helpers
# ============================================================================


def dump_snapshot(document: SnapshotDocument, file_path: Union[str, Path]) -> Path:
    """
    Write a snapshot document to a JSON file.

    Args:
        document: Document to write
        file_path: Destination path

    Returns:
        Path written
    """
    path = Path(file_path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)
    return path


def load_snapshot(
    file_path: Union[str, Path], registry: SchemaRegistry = DEFAULT_REGISTRY
) -> SnapshotDocument:
    """
    Read and validate a snapshot document from a JSON file.

    Raises:
        MalformedBody: If the file is not valid JSON
        SnapshotValidationError: If the decoded document is invalid
        OSError: If the file cannot be read
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedBody(f"not valid JSON ({e})") from e
    return decode_and_validate(data, registry)
