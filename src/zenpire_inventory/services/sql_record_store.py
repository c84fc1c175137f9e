"""
SQLAlchemy Record Store - RecordStore backed by the application database.

Reads and writes go through SQLAlchemy Core statements against the tables
registered on Base.metadata, so records stay plain dictionaries and every
column travels verbatim. DateTime columns are the only values converted:
ISO-8601 strings on the way out, datetime objects on the way in.

Usage:
    from zenpire_inventory.services.sql_record_store import SqlAlchemyRecordStore

    store = SqlAlchemyRecordStore()
    rows = store.select_all("ingredient")
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from sqlalchemy import DateTime, Table, delete, select, update
from sqlalchemy.orm import Session

from zenpire_inventory import models  # noqa: F401  (registers tables on Base.metadata)
from zenpire_inventory.models.base import Base
from zenpire_inventory.services import database
from zenpire_inventory.services.logging_utils import get_service_logger
from zenpire_inventory.services.record_store import RecordStore, StoreError
from zenpire_inventory.services.snapshot_schema import DEFAULT_REGISTRY, Record, SchemaRegistry
from zenpire_inventory.utils.datetime_utils import parse_iso

logger = get_service_logger(__name__)


class SqlAlchemyRecordStore(RecordStore):
    """
    Record store over the SQLAlchemy session factory.

    Outside transaction() every call runs in its own session and commits
    on return. Inside transaction() all calls share one session that
    commits when the block exits and rolls back if it raises.

    Args:
        session_factory: Callable returning a Session. Defaults to the
            application's global session factory.
        registry: Tables the store may read, write and purge
    """

    supports_transactions = True

    def __init__(
        self,
        session_factory: Optional[Callable[[], Session]] = None,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
    ):
        self._session_factory = session_factory
        self._registry = registry
        self._active_session: Optional[Session] = None

    @property
    def concurrent_reads(self) -> bool:
        """Separate connections are only possible for file or server databases."""
        if self._session_factory is not None:
            return False
        url = str(database.get_engine().url)
        return ":memory:" not in url and "mode=memory" not in url

    # ------------------------------------------------------------------
    # Session handling
    # ------------------------------------------------------------------

    def _new_session(self) -> Session:
        if self._session_factory is not None:
            return self._session_factory()
        return database.get_session_factory()()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._active_session is not None:
            yield self._active_session
            return

        session = self._new_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator["SqlAlchemyRecordStore"]:
        """Run every store call in the block inside one database transaction."""
        if self._active_session is not None:
            yield self
            return

        session = self._new_session()
        self._active_session = session
        try:
            yield self
            session.commit()
        except Exception:
            logger.warning("Rolling back snapshot store transaction")
            session.rollback()
            raise
        finally:
            self._active_session = None
            session.close()

    # ------------------------------------------------------------------
    # Table helpers
    # ------------------------------------------------------------------

    def _table(self, name: str) -> Table:
        if name not in self._registry.table_names:
            raise StoreError(f"Table '{name}' is not registered for transfer")
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise StoreError(f"Table '{name}' has no database model") from None

    @staticmethod
    def _datetime_columns(table: Table) -> List[str]:
        return [c.name for c in table.columns if isinstance(c.type, DateTime)]

    @staticmethod
    def _to_record(row: Mapping[str, Any]) -> Record:
        record = {}
        for key, value in row.items():
            if isinstance(value, datetime):
                value = value.isoformat()
            record[key] = value
        return record

    @staticmethod
    def _to_params(row: Mapping[str, Any], datetime_columns: Sequence[str]) -> Dict[str, Any]:
        params = dict(row)
        for name in datetime_columns:
            value = params.get(name)
            if isinstance(value, str):
                params[name] = parse_iso(value)
        return params

    # ------------------------------------------------------------------
    # RecordStore interface
    # ------------------------------------------------------------------

    def select_all(self, table: str) -> List[Record]:
        sql_table = self._table(table)
        with self._session() as session:
            result = session.execute(select(sql_table))
            return [self._to_record(row) for row in result.mappings()]

    def insert_many(self, table: str, rows: Sequence[Mapping[str, Any]]) -> None:
        if not rows:
            return

        sql_table = self._table(table)
        datetime_columns = self._datetime_columns(sql_table)
        params = [self._to_params(row, datetime_columns) for row in rows]

        with self._session() as session:
            # executemany needs a uniform key set; split into consecutive
            # runs so storage order still matches document order
            for batch in _runs_by_keys(params):
                session.execute(sql_table.insert(), batch)
            session.flush()

    def purge_all(self) -> None:
        with self._session() as session:
            # Break circular references first, then delete children before parents
            for edge in self._registry.deferred_edges:
                sql_table = self._table(edge.table)
                session.execute(update(sql_table).values({edge.field: None}))
            for name in reversed(self._registry.table_names):
                session.execute(delete(self._table(name)))
            session.flush()

    def update_field(self, table: str, record_id: Any, field: str, value: Any) -> None:
        sql_table = self._table(table)
        if field not in sql_table.c:
            raise StoreError(f"Table '{table}' has no column '{field}'")

        if field in self._datetime_columns(sql_table) and isinstance(value, str):
            value = parse_iso(value)

        # Keep onupdate columns (updated_at) as they are; a patch restores
        # state, it is not an edit
        values: Dict[str, Any] = {
            c.name: c for c in sql_table.columns if c.onupdate is not None and c.name != field
        }
        values[field] = value

        with self._session() as session:
            result = session.execute(
                update(sql_table).where(sql_table.c.id == record_id).values(values)
            )
            if result.rowcount == 0:
                raise StoreError(f"No {table} record with id {record_id!r}")


def _runs_by_keys(params: Sequence[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
    runs: List[List[Dict[str, Any]]] = []
    current_keys = None
    for item in params:
        keys = frozenset(item)
        if keys != current_keys:
            runs.append([])
            current_keys = keys
        runs[-1].append(item)
    return runs
