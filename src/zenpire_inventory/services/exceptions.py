"""Service layer exception classes for Zenpire Inventory.

Every failure of a snapshot export or import is raised as a TransferError
carrying a machine-readable kind plus the table and record involved, so a
caller can report "which table/row" without inspecting internals.

Exception Hierarchy:
    ServiceError (base)
    └── TransferError
        ├── SnapshotValidationError
        │   ├── MalformedBody
        │   ├── VersionMismatch
        │   ├── AppMismatch
        │   └── MissingTable
        ├── SourceReadFailed
        ├── PurgeFailed
        ├── InsertFailed
        └── PatchFailed
"""

from enum import Enum
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors."""

    pass


class TransferErrorKind(str, Enum):
    """
    Classification of snapshot transfer failures.

    Values:
        MALFORMED_BODY: Incoming document is not an object
        VERSION_MISMATCH: Document version differs from the supported one
        APP_MISMATCH: Document was produced by a different application
        MISSING_TABLE: A registered table is absent or not a list
        SOURCE_READ_FAILED: Export could not read a table
        PURGE_FAILED: Import could not clear the destination
        INSERT_FAILED: Import could not write a table
        PATCH_FAILED: Import could not restore a deferred field
    """

    MALFORMED_BODY = "MalformedBody"
    VERSION_MISMATCH = "VersionMismatch"
    APP_MISMATCH = "AppMismatch"
    MISSING_TABLE = "MissingTable"
    SOURCE_READ_FAILED = "SourceReadFailed"
    PURGE_FAILED = "PurgeFailed"
    INSERT_FAILED = "InsertFailed"
    PATCH_FAILED = "PatchFailed"


class TransferError(ServiceError):
    """Base class for snapshot export/import failures.

    Args:
        kind: TransferErrorKind of the failure
        message: Human-readable description
        table: Table involved, if any
        record_id: Record involved, if any
        cause: Underlying exception, if any

    Example:
        >>> err = InsertFailed("recipe", ValueError("duplicate id"))
        >>> err.to_dict()["kind"]
        'InsertFailed'
    """

    kind: TransferErrorKind

    def __init__(
        self,
        kind: TransferErrorKind,
        message: str,
        table: Optional[str] = None,
        record_id: Optional[Any] = None,
        cause: Optional[BaseException] = None,
    ):
        self.kind = kind
        self.table = table
        self.record_id = record_id
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form of the error for API responses and logs."""
        return {
            "kind": self.kind.value,
            "message": str(self),
            "table": self.table,
            "record_id": self.record_id,
            "cause": str(self.cause) if self.cause is not None else None,
        }


class SnapshotValidationError(TransferError):
    """Raised when an incoming snapshot document fails validation.

    Validation errors are always raised before the destination is touched.
    """

    pass


class MalformedBody(SnapshotValidationError):
    """Raised when the document, or a record inside it, is not a JSON object."""

    def __init__(self, detail: str = "expected JSON object", table: Optional[str] = None):
        super().__init__(TransferErrorKind.MALFORMED_BODY, f"Invalid body: {detail}", table=table)


class VersionMismatch(SnapshotValidationError):
    """Raised when the document version is not the supported one."""

    def __init__(self, expected: int, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(
            TransferErrorKind.VERSION_MISMATCH,
            f"Invalid version: expected {expected}, got {actual!r}",
        )


class AppMismatch(SnapshotValidationError):
    """Raised when the document was exported by a different application."""

    def __init__(self, expected: str, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(
            TransferErrorKind.APP_MISMATCH,
            f"Invalid app: expected {expected}, got {actual!r}",
        )


class MissingTable(SnapshotValidationError):
    """Raised for the first registered table that is absent or not a list."""

    def __init__(self, table: str):
        super().__init__(
            TransferErrorKind.MISSING_TABLE,
            f"Missing or invalid table: {table}",
            table=table,
        )


class SourceReadFailed(TransferError):
    """Raised when export cannot read a table from the store."""

    def __init__(self, table: str, cause: BaseException):
        super().__init__(
            TransferErrorKind.SOURCE_READ_FAILED,
            f"Export failed on table {table}: {cause}",
            table=table,
            cause=cause,
        )


class PurgeFailed(TransferError):
    """Raised when import cannot purge the destination store."""

    def __init__(self, cause: BaseException):
        super().__init__(
            TransferErrorKind.PURGE_FAILED,
            f"Purge failed: {cause}",
            cause=cause,
        )


class InsertFailed(TransferError):
    """Raised when import cannot insert the records of a table."""

    def __init__(self, table: str, cause: BaseException):
        super().__init__(
            TransferErrorKind.INSERT_FAILED,
            f"Import failed on table {table}: {cause}",
            table=table,
            cause=cause,
        )


class PatchFailed(TransferError):
    """Raised when import cannot restore a deferred field on a record."""

    def __init__(self, table: str, record_id: Any, cause: BaseException):
        super().__init__(
            TransferErrorKind.PATCH_FAILED,
            f"Import failed patching {table} {record_id}: {cause}",
            table=table,
            record_id=record_id,
            cause=cause,
        )
