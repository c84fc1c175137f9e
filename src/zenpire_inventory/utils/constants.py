"""
Constants for the Zenpire Inventory snapshot transfer engine.

This module defines system-wide constants including:
- Application metadata
- Snapshot document format identifiers
- Configuration environment variable names
"""

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Zenpire Inventory"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "zenpire_inventory.db"

# ============================================================================
# Snapshot Document Format
# ============================================================================

# Only this exact version is accepted on import (no format migration)
SNAPSHOT_VERSION = 1

# Identifier stamped into every document; foreign documents are rejected
SNAPSHOT_APP_ID = "zenpire-inventory"

# Columns carrying large image payloads, stripped by the plain export
BINARY_PAYLOAD_FIELDS = ("image_data", "image_mime")

# ============================================================================
# Environment Variables
# ============================================================================

ENV_ENVIRONMENT = "ZENPIRE_INVENTORY_ENV"
ENV_DATABASE_URL = "ZENPIRE_INVENTORY_DATABASE_URL"
ENV_EXPORT_WORKERS = "ZENPIRE_INVENTORY_EXPORT_WORKERS"
ENV_ATOMIC_IMPORT = "ZENPIRE_INVENTORY_ATOMIC_IMPORT"

DEFAULT_EXPORT_WORKERS = 4
