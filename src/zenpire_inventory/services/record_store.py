"""
Record Store interface and in-memory implementation.

The snapshot services never talk to a database directly. They read and
write plain record dictionaries through a RecordStore:

- select_all(table): every record of a table, in storage order
- insert_many(table, rows): append records
- purge_all(): remove every record of every registered table
- update_field(table, record_id, field, value): set one column of one record
- transaction(): context manager grouping calls into one unit of work

InMemoryRecordStore is the reference implementation used by tests and by
callers that stage data in memory. SqlAlchemyRecordStore
(sql_record_store.py) backs the same interface with the application
database.
"""

import copy
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from zenpire_inventory.services.snapshot_schema import DEFAULT_REGISTRY, Record, SchemaRegistry


class StoreError(Exception):
    """Raised by a record store when an operation is rejected."""

    pass


class RecordStore(ABC):
    """
    Table-oriented store used by snapshot export and import.

    Attributes:
        supports_transactions: True if transaction() can roll back every
            change made inside it
        concurrent_reads: True if select_all may be called from several
            threads at once
    """

    supports_transactions = False
    concurrent_reads = False

    @abstractmethod
    def select_all(self, table: str) -> List[Record]:
        """Return every record of table, in storage order."""

    @abstractmethod
    def insert_many(self, table: str, rows: Sequence[Mapping[str, Any]]) -> None:
        """Insert rows into table, preserving their order."""

    @abstractmethod
    def purge_all(self) -> None:
        """Delete every record of every registered table."""

    @abstractmethod
    def update_field(self, table: str, record_id: Any, field: str, value: Any) -> None:
        """Set field on the record identified by record_id."""

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """Group calls into one unit of work (no rollback unless overridden)."""
        yield self


class InMemoryRecordStore(RecordStore):
    """
    Dictionary-backed record store.

    Records are copied on the way in and out, so callers never share
    mutable state with the store. Identifiers must be unique per table.

    Args:
        tables: Optional initial contents, table name -> records
        registry: Tables the store knows about
        references: Optional foreign keys to enforce, as
            {table: {field: referenced_table}}; a non-null value must match
            an existing id in the referenced table on insert and update
    """

    supports_transactions = True
    concurrent_reads = True

    def __init__(
        self,
        tables: Optional[Mapping[str, Sequence[Mapping[str, Any]]]] = None,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
        references: Optional[Mapping[str, Mapping[str, str]]] = None,
    ):
        self._registry = registry
        self._references = {t: dict(fields) for t, fields in (references or {}).items()}
        self._tables: Dict[str, List[Record]] = {name: [] for name in registry.table_names}
        self._lock = threading.RLock()

        # Initial contents are trusted: circular references may already be set
        for name, rows in (tables or {}).items():
            self._append(name, rows, check_references=False)

    def _rows(self, table: str) -> List[Record]:
        try:
            return self._tables[table]
        except KeyError:
            raise StoreError(f"Unknown table '{table}'") from None

    def _check_references(self, table: str, row: Mapping[str, Any]) -> None:
        for field, target in self._references.get(table, {}).items():
            value = row.get(field)
            if value is None:
                continue
            if not any(r.get("id") == value for r in self._rows(target)):
                raise StoreError(
                    f"{table}.{field}={value!r} references missing {target} record"
                )

    def select_all(self, table: str) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._rows(table))

    def insert_many(self, table: str, rows: Sequence[Mapping[str, Any]]) -> None:
        self._append(table, rows, check_references=True)

    def _append(
        self, table: str, rows: Sequence[Mapping[str, Any]], check_references: bool
    ) -> None:
        with self._lock:
            existing = self._rows(table)
            seen = {r.get("id") for r in existing}
            staged = []
            for row in rows:
                record_id = row.get("id")
                if record_id is None:
                    raise StoreError(f"Record in {table} has no id")
                if record_id in seen:
                    raise StoreError(f"Duplicate id {record_id!r} in {table}")
                seen.add(record_id)
                if check_references:
                    self._check_references(table, row)
                staged.append(copy.deepcopy(dict(row)))
            existing.extend(staged)

    def purge_all(self) -> None:
        with self._lock:
            for rows in self._tables.values():
                rows.clear()

    def update_field(self, table: str, record_id: Any, field: str, value: Any) -> None:
        with self._lock:
            for row in self._rows(table):
                if row.get("id") == record_id:
                    candidate = dict(row)
                    candidate[field] = value
                    self._check_references(table, candidate)
                    row[field] = value
                    return
            raise StoreError(f"No {table} record with id {record_id!r}")

    @contextmanager
    def transaction(self) -> Iterator["InMemoryRecordStore"]:
        """
        Snapshot all tables; restore them if the block raises.

        The lock is only held while copying, so reads from other threads
        (concurrent export) can run inside the block.
        """
        with self._lock:
            saved = copy.deepcopy(self._tables)
        try:
            yield self
        except BaseException:
            with self._lock:
                self._tables = saved
            raise

    def dump(self) -> Dict[str, List[Record]]:
        """Copy of every table's contents."""
        with self._lock:
            return copy.deepcopy(self._tables)
