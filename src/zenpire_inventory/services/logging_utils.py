"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across export and import.

Usage:
    from zenpire_inventory.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="import_snapshot",
        outcome="success",
        tables=11,
        patched=3,
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger with the 'zenpire_inventory.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'zenpire_inventory.services.snapshot_import_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"zenpire_inventory.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "export_snapshot", "import_snapshot")
        outcome: Outcome description (e.g., "success", "insert_failed")
        level: Log level (default: INFO). Use DEBUG for per-table progress.
        **context: Additional context fields. Common fields:
            - table: Table being read or written
            - record_id: Record being patched
            - rows: Number of records involved
            - error: Error message if the outcome is a failure
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
