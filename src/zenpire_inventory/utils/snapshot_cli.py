"""
Snapshot Import/Export CLI Utility

Command-line interface for exporting, importing and validating business
data snapshots against the application database.

Usage Examples:
    # Export all business data
    zenpire-transfer export snapshot.json

    # Export without ingredient/recipe images (much smaller file)
    zenpire-transfer export snapshot_plain.json --plain

    # Replace all business data with a snapshot
    zenpire-transfer import snapshot.json

    # Import without wrapping the whole import in one transaction
    zenpire-transfer import snapshot.json --no-atomic

    # Check a snapshot file without touching the database
    zenpire-transfer validate snapshot.json

    # Use a specific database
    zenpire-transfer --database-url sqlite:///other.db export snapshot.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from zenpire_inventory.services.database import configure_database, init_database, initialize_app_database
from zenpire_inventory.services.exceptions import TransferError
from zenpire_inventory.services.snapshot_codec import load_snapshot
from zenpire_inventory.services.snapshot_export_service import export_snapshot_to_file
from zenpire_inventory.services.snapshot_import_service import import_snapshot_from_file
from zenpire_inventory.services.sql_record_store import SqlAlchemyRecordStore


def export_snapshot_file(output_file: str, plain: bool = False) -> int:
    """Export all business tables to output_file."""
    variant = "plain snapshot" if plain else "snapshot"
    print(f"Exporting {variant} to {output_file}...")
    try:
        result = export_snapshot_to_file(SqlAlchemyRecordStore(), output_file, plain=plain)
    except TransferError as e:
        print(f"ERROR: {e}")
        return 1
    except OSError as e:
        print(f"ERROR: Cannot write {output_file}: {e}")
        return 1

    print(result.get_summary())
    return 0


def import_snapshot_file(input_file: str, atomic: Optional[bool] = None) -> int:
    """Replace all business data with the contents of input_file."""
    print(f"Importing snapshot from {input_file} (existing data will be replaced)...")
    try:
        report = import_snapshot_from_file(SqlAlchemyRecordStore(), input_file, atomic=atomic)
    except TransferError as e:
        print(f"ERROR: {e}")
        if e.table:
            print(f"  table: {e.table}")
        if e.record_id is not None:
            print(f"  record: {e.record_id}")
        return 1
    except OSError as e:
        print(f"ERROR: Cannot read {input_file}: {e}")
        return 1

    print(report.get_summary())
    return 0


def validate_snapshot_file(input_file: str) -> int:
    """Validate input_file without touching the database."""
    print(f"Validating {input_file}...")
    try:
        document = load_snapshot(input_file)
    except TransferError as e:
        print(f"INVALID: {e}")
        return 1
    except OSError as e:
        print(f"ERROR: Cannot read {input_file}: {e}")
        return 1

    counts = document.record_counts()
    print(f"Valid snapshot exported at {document.exported_at or 'unknown time'}")
    if document.plain:
        print("  (plain export: images not included)")
    for table, count in counts.items():
        print(f"  {table}: {count}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zenpire-transfer",
        description="Export, import and validate Zenpire Inventory data snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--database-url", help="SQLAlchemy database URL (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    export_parser = subparsers.add_parser("export", help="Export all business data")
    export_parser.add_argument("file", help="Output JSON file path")
    export_parser.add_argument(
        "--plain", action="store_true", help="Strip ingredient and recipe images"
    )

    import_parser = subparsers.add_parser("import", help="Replace all business data")
    import_parser.add_argument("file", help="Input JSON file path")
    import_parser.add_argument(
        "--no-atomic",
        dest="atomic",
        action="store_false",
        default=None,
        help="Do not wrap the import in a single transaction",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a snapshot file")
    validate_parser.add_argument("file", help="Input JSON file path")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate":
        return validate_snapshot_file(args.file)

    if args.database_url:
        init_database(configure_database(args.database_url))
    else:
        initialize_app_database()

    if args.command == "export":
        return export_snapshot_file(args.file, plain=args.plain)
    if args.command == "import":
        return import_snapshot_file(args.file, atomic=args.atomic)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
