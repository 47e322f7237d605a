"""
Unit tests for the 'import', 'export' and 'reset' commands.
"""

import json

from flatc4.cli.commands.reset import reset
from flatc4.cli.commands.transfer import export_model, import_model
from flatc4.core.storage import SQLiteStorage


class TestImportExport:
    def test_import_then_export(self, runner, tmp_path, model):
        source = tmp_path / "in.json"
        source.write_text(json.dumps(model.to_wire()))
        db = str(tmp_path / "t.db")

        result = runner.invoke(import_model, [str(source), "--db", db, "--key", "team"])
        assert result.exit_code == 0
        assert "Imported 11 blocks into 'team'" in result.output

        target = tmp_path / "out.json"
        result = runner.invoke(export_model, [str(target), "--db", db, "--key", "team"])
        assert result.exit_code == 0
        assert json.loads(target.read_text()) == model.to_wire()

    def test_import_invalid_file(self, runner, tmp_path):
        source = tmp_path / "bad.json"
        source.write_text('{"systems": 3}')

        result = runner.invoke(import_model, [str(source), "--db", str(tmp_path / "t.db")])

        assert result.exit_code == 1
        assert "Invalid model" in result.output

    def test_export_nothing_stored(self, runner, tmp_path):
        result = runner.invoke(export_model, [str(tmp_path / "out.json"), "--db", str(tmp_path / "t.db")])

        assert result.exit_code == 1
        assert "Nothing stored" in result.output


class TestResetCommand:
    def test_reset_with_yes(self, runner, seeded_db):
        result = runner.invoke(reset, ["--yes", "--db", seeded_db])

        assert result.exit_code == 0
        assert SQLiteStorage(seeded_db).load_model() is None

    def test_reset_aborts_without_confirmation(self, runner, seeded_db):
        result = runner.invoke(reset, ["--db", seeded_db], input="n\n")

        assert result.exit_code == 1
        assert SQLiteStorage(seeded_db).load_model() is not None
