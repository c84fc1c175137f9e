"""
Tests for the zenpire-transfer command line interface.

Tests cover:
- validate: valid and invalid files, no database access
- import then export through a SQLite file database
- plain export
- exit codes for usage and I/O errors
"""

import json

import pytest

from zenpire_inventory.services import database
from zenpire_inventory.utils.snapshot_cli import build_parser, main

from ...fixtures.transfer_fixtures import build_sample_tables, build_snapshot_dict


@pytest.fixture
def snapshot_file(tmp_path):
    """Valid snapshot of the sample dataset on disk."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(build_snapshot_dict()), encoding="utf-8")
    return path


@pytest.fixture
def database_url(tmp_path):
    """SQLite file database URL; global connections closed afterwards."""
    yield f"sqlite:///{tmp_path / 'cli.db'}"
    database.close_connections()


class TestParser:
    """Tests for argument parsing."""

    def test_no_atomic_flag(self):
        args = build_parser().parse_args(["import", "in.json", "--no-atomic"])

        assert args.atomic is False

    def test_atomic_defaults_to_config(self):
        args = build_parser().parse_args(["import", "in.json"])

        assert args.atomic is None

    def test_plain_flag(self):
        args = build_parser().parse_args(["export", "out.json", "--plain"])

        assert args.plain is True


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_file(self, snapshot_file, capsys):
        assert main(["validate", str(snapshot_file)]) == 0

        out = capsys.readouterr().out
        assert "Valid snapshot exported at 2026-03-03T12:00:00+00:00" in out
        assert "recipe_component: 4" in out

    def test_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "foreign.json"
        data = build_snapshot_dict()
        data["app"] = "other-app"
        path.write_text(json.dumps(data), encoding="utf-8")

        assert main(["validate", str(path)]) == 1
        assert "INVALID: Invalid app" in capsys.readouterr().out

    def test_null_record_is_invalid(self, tmp_path, capsys):
        path = tmp_path / "null-record.json"
        data = build_snapshot_dict()
        data["tables"]["ingredient"] = [None]
        path.write_text(json.dumps(data), encoding="utf-8")

        assert main(["validate", str(path)]) == 1
        assert "record 0 of table ingredient is not an object" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["validate", str(tmp_path / "absent.json")]) == 1
        assert "Cannot read" in capsys.readouterr().out


class TestImportExportCommands:
    """Tests for import and export against a SQLite file."""

    def test_import_then_export(self, snapshot_file, database_url, tmp_path, capsys):
        out_path = tmp_path / "out.json"

        assert main(["--database-url", database_url, "import", str(snapshot_file)]) == 0
        assert main(["--database-url", database_url, "export", str(out_path)]) == 0

        with open(out_path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["tables"] == build_sample_tables()
        assert "Import Summary" in capsys.readouterr().out

    def test_plain_export(self, snapshot_file, database_url, tmp_path):
        out_path = tmp_path / "plain.json"
        main(["--database-url", database_url, "import", str(snapshot_file)])

        assert main(["--database-url", database_url, "export", str(out_path), "--plain"]) == 0

        with open(out_path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["plain"] is True
        assert all(r["image_data"] is None for r in data["tables"]["recipe"])

    def test_import_invalid_snapshot_fails(self, tmp_path, database_url, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"version": 2}), encoding="utf-8")

        assert main(["--database-url", database_url, "import", str(path)]) == 1
        assert "Invalid version" in capsys.readouterr().out

    def test_non_atomic_import(self, snapshot_file, database_url, capsys):
        assert main(["--database-url", database_url, "import", str(snapshot_file), "--no-atomic"]) == 0
        assert "Atomic:        no" in capsys.readouterr().out


class TestUsage:
    """Tests for usage errors."""

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out
