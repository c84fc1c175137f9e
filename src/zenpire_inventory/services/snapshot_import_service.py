"""
Snapshot Import Service - replace all business data with a snapshot.

Import always fully replaces the destination. Each step is a hard sequence
point; step N+1 never starts before step N's writes returned:

    1. Validate the document (no store call on failure)
    2. Purge every registered table
    3. Pass 1: independent tables (unit, allergen)
    4. Pass 2: ingredient, with produced_by_recipe_id forced to None;
       the original non-null values are queued as patches
    5. Pass 3: recipe
    6. Pass 4: join/child tables, in registry order
    7. Patch pass: restore every queued deferred field

Atomicity:
    With atomic=True (the configured default) and a store that supports
    transactions, steps 2-7 run inside store.transaction(), so any failure
    restores the destination to its pre-import contents before the error
    propagates. With atomic=False, or a store without transactions, a
    failure after the purge leaves the destination partially loaded.

Concurrent imports against the same store are not serialized here; the
caller must not run them.

Usage:
    from zenpire_inventory.services.snapshot_import_service import import_snapshot

    report = import_snapshot(store, json.loads(payload))
    print(report.get_summary())
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from zenpire_inventory.services.exceptions import (
    InsertFailed,
    PatchFailed,
    PurgeFailed,
    SnapshotValidationError,
    TransferError,
)
from zenpire_inventory.services.logging_utils import get_service_logger, log_operation
from zenpire_inventory.services.record_store import RecordStore
from zenpire_inventory.services.snapshot_codec import (
    SnapshotDocument,
    decode_and_validate,
    load_snapshot,
)
from zenpire_inventory.services.snapshot_schema import (
    DEFAULT_REGISTRY,
    PASS_DEFERRED,
    PASS_DEPENDENT,
    PASS_INDEPENDENT,
    PASS_REFERENCED,
    PendingPatch,
    Record,
    SchemaRegistry,
)
from zenpire_inventory.utils.config import get_config

logger = get_service_logger(__name__)


# ============================================================================
# Result Classes
# ============================================================================


class ImportReport:
    """Result of a successful import."""

    def __init__(self, counts: Dict[str, int], patched: int = 0, atomic: bool = False):
        self.counts = counts
        self.patched = patched
        self.atomic = atomic

    @property
    def total_records(self) -> int:
        """Records written across all tables."""
        return sum(self.counts.values())

    def to_dict(self) -> Dict[str, Any]:
        """Structured form, matching the import endpoint response."""
        return {"imported": dict(self.counts), "patched": self.patched}

    def get_summary(self) -> str:
        """Get a user-friendly summary string of the import results."""
        lines = [
            "=" * 60,
            "Import Summary",
            "=" * 60,
        ]
        for table, count in self.counts.items():
            lines.append(f"  {table}: {count}")
        lines.extend(
            [
                "",
                f"Total Records: {self.total_records}",
                f"Patched:       {self.patched}",
                f"Atomic:        {'yes' if self.atomic else 'no'}",
                "=" * 60,
            ]
        )
        return "\n".join(lines)


# ============================================================================
# Import Steps
# ============================================================================


def _purge(store: RecordStore) -> None:
    try:
        store.purge_all()
    except Exception as e:
        raise PurgeFailed(e) from e
    log_operation(logger, "purge", "success", level=logging.DEBUG)


def _insert(store: RecordStore, table: str, rows: List[Record]) -> None:
    if not rows:
        return
    try:
        store.insert_many(table, rows)
    except Exception as e:
        raise InsertFailed(table, e) from e
    log_operation(logger, "insert", "success", level=logging.DEBUG, table=table, rows=len(rows))


def _apply_patches(store: RecordStore, patches: List[PendingPatch]) -> None:
    for patch in patches:
        try:
            store.update_field(patch.table, patch.record_id, patch.field, patch.value)
        except Exception as e:
            raise PatchFailed(patch.table, patch.record_id, e) from e
    log_operation(logger, "patch", "success", level=logging.DEBUG, rows=len(patches))


def _write_passes(
    store: RecordStore, document: SnapshotDocument, registry: SchemaRegistry
) -> int:
    """Purge, write passes 1-4 and apply patches. Returns the patch count."""
    tables = document.tables
    patch_queue: List[PendingPatch] = []

    _purge(store)

    for table in registry.tables_for_pass(PASS_INDEPENDENT):
        _insert(store, table, tables[table])

    for table in registry.tables_for_pass(PASS_DEFERRED):
        rows, patches = registry.defer_rows(table, tables[table])
        _insert(store, table, rows)
        patch_queue.extend(patches)

    for table in registry.tables_for_pass(PASS_REFERENCED):
        _insert(store, table, tables[table])

    for table in registry.tables_for_pass(PASS_DEPENDENT):
        _insert(store, table, tables[table])

    _apply_patches(store, patch_queue)
    return len(patch_queue)


# ============================================================================
# Public API
# ============================================================================


def import_snapshot(
    store: RecordStore,
    document: Union[SnapshotDocument, Mapping[str, Any], Any],
    registry: SchemaRegistry = DEFAULT_REGISTRY,
    atomic: Optional[bool] = None,
) -> ImportReport:
    """
    Replace the store's contents with a snapshot document.

    Args:
        store: Destination record store
        document: Decoded document (dict) or SnapshotDocument
        registry: Tables and deferred edges to honor
        atomic: Run purge + passes + patches in one store transaction
            (default: config atomic_import). Ignored if the store does not
            support transactions.

    Returns:
        ImportReport with per-table record counts

    Raises:
        SnapshotValidationError: Document invalid; the store was not touched
        PurgeFailed: Purge step failed
        InsertFailed: A table insert failed
        PatchFailed: Restoring a deferred field failed
    """
    try:
        validated = decode_and_validate(document, registry)
    except SnapshotValidationError as e:
        log_operation(
            logger,
            operation="import_snapshot",
            outcome="validation_failed",
            level=logging.WARNING,
            kind=e.kind.value,
            table=e.table,
            error=str(e),
        )
        raise

    if atomic is None:
        atomic = get_config().atomic_import
    use_transaction = atomic and store.supports_transactions

    try:
        if use_transaction:
            with store.transaction():
                patched = _write_passes(store, validated, registry)
        else:
            patched = _write_passes(store, validated, registry)
    except TransferError as e:
        log_operation(
            logger,
            operation="import_snapshot",
            outcome=e.kind.value,
            level=logging.ERROR,
            kind=e.kind.value,
            table=e.table,
            record_id=e.record_id,
            rolled_back=use_transaction,
            error=str(e),
        )
        raise

    report = ImportReport(
        counts={name: len(validated.tables[name]) for name in registry.table_names},
        patched=patched,
        atomic=use_transaction,
    )
    log_operation(
        logger,
        operation="import_snapshot",
        outcome="success",
        records=report.total_records,
        patched=patched,
        atomic=use_transaction,
    )
    return report


def import_snapshot_from_file(
    store: RecordStore,
    file_path: Union[str, Path],
    registry: SchemaRegistry = DEFAULT_REGISTRY,
    atomic: Optional[bool] = None,
) -> ImportReport:
    """
    Load a snapshot JSON file and import it.

    Raises:
        MalformedBody: If the file is not valid JSON
        TransferError: As for import_snapshot
        OSError: If the file cannot be read
    """
    document = load_snapshot(file_path, registry)
    return import_snapshot(store, document, registry=registry, atomic=atomic)
