"""Services package - snapshot transfer engine for Zenpire Inventory.

Architecture:
- Schema registry: which tables transfer, in which pass, which fields defer
- Codec: versioned snapshot documents and their validation
- Export/import services: stateless functions over an injected RecordStore
- Record stores: in-memory and SQLAlchemy-backed implementations
- Exceptions: structured TransferError hierarchy

Service Modules:
- snapshot_schema: Schema registry and deferred edges
- snapshot_codec: Encode/validate snapshot documents, JSON file helpers
- snapshot_export_service: Full and plain exports
- snapshot_import_service: Multi-pass replace-all import
- record_store: RecordStore interface and in-memory store
- sql_record_store: RecordStore over the application database
- database: Engine and session management
"""
