"""
Snapshot Export Service - read every business table into a snapshot document.

Export only records state, so tables may be read in any order and, when
the store allows it, concurrently. A failure on any table aborts the whole
export; no partial document is ever returned.

Two variants exist:
- full export: every column verbatim
- plain export: image payload columns of ingredient and recipe set to None,
  producing a much smaller file; all other tables are untouched

Usage:
    from zenpire_inventory.services.snapshot_export_service import export_snapshot

    document = export_snapshot(store)
    document = export_snapshot(store, plain=True)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Union

from zenpire_inventory.services.exceptions import SourceReadFailed
from zenpire_inventory.services.logging_utils import get_service_logger, log_operation
from zenpire_inventory.services.record_store import RecordStore
from zenpire_inventory.services.snapshot_codec import SnapshotDocument, dump_snapshot, encode
from zenpire_inventory.services.snapshot_schema import DEFAULT_REGISTRY, Record, SchemaRegistry
from zenpire_inventory.utils.config import get_config

logger = get_service_logger(__name__)


# ============================================================================
# Result Classes
# ============================================================================


class ExportResult:
    """Result of exporting a snapshot to a file."""

    def __init__(self, file_path: str, document: SnapshotDocument):
        self.file_path = file_path
        self.document = document
        self.entity_counts: Dict[str, int] = document.record_counts()
        self.record_count = sum(self.entity_counts.values())

    def get_summary(self) -> str:
        """Get a summary string of the export results."""
        variant = "plain " if self.document.plain else ""
        lines = [f"Exported {self.record_count} records ({variant}snapshot) to {self.file_path}"]
        lines.append("")
        for entity, count in self.entity_counts.items():
            lines.append(f"  {entity}: {count}")
        return "\n".join(lines)


# ============================================================================
# Export Functions
# ============================================================================


def _read_table(store: RecordStore, table: str) -> List[Record]:
    try:
        rows = store.select_all(table)
    except Exception as e:
        log_operation(
            logger,
            operation="export_snapshot",
            outcome="source_read_failed",
            level=logging.ERROR,
            table=table,
            error=str(e),
        )
        raise SourceReadFailed(table, e) from e
    log_operation(logger, "read_table", "success", level=logging.DEBUG, table=table, rows=len(rows))
    return rows


def _read_all_tables(
    store: RecordStore, registry: SchemaRegistry, max_workers: int
) -> Dict[str, List[Record]]:
    names = registry.table_names

    if max_workers <= 1 or not store.concurrent_reads:
        return {name: _read_table(store, name) for name in names}

    with ThreadPoolExecutor(max_workers=min(max_workers, len(names))) as pool:
        futures = {name: pool.submit(_read_table, store, name) for name in names}
        # Collect in registry order so the first failing table is reported
        return {name: futures[name].result() for name in names}


def export_snapshot(
    store: RecordStore,
    plain: bool = False,
    registry: SchemaRegistry = DEFAULT_REGISTRY,
    max_workers: Optional[int] = None,
) -> SnapshotDocument:
    """
    Export every registered table into a snapshot document.

    Args:
        store: Source record store
        plain: If True, strip image payload fields from ingredient and recipe
        registry: Tables to export
        max_workers: Concurrent table reads (default: config export_max_workers)

    Returns:
        SnapshotDocument with every registered table

    Raises:
        SourceReadFailed: If any table cannot be read
    """
    if max_workers is None:
        max_workers = get_config().export_max_workers

    tables = _read_all_tables(store, registry, max_workers)

    transform = registry.strip_binary if plain else None
    document = encode(tables, registry=registry, transform=transform, plain=plain)

    log_operation(
        logger,
        operation="export_snapshot",
        outcome="success",
        plain=plain,
        records=sum(document.record_counts().values()),
    )
    return document


def export_snapshot_to_file(
    store: RecordStore,
    file_path: Union[str, Path],
    plain: bool = False,
    registry: SchemaRegistry = DEFAULT_REGISTRY,
) -> ExportResult:
    """
    Export a snapshot and write it as JSON.

    Args:
        store: Source record store
        file_path: Output JSON file
        plain: If True, write the image-stripped variant
        registry: Tables to export

    Returns:
        ExportResult with per-table counts

    Raises:
        SourceReadFailed: If any table cannot be read
    """
    document = export_snapshot(store, plain=plain, registry=registry)
    dump_snapshot(document, file_path)
    return ExportResult(str(file_path), document)
