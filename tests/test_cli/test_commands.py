"""Tests for the Click CLI, run in-process with CliRunner."""

import pytest
from click.testing import CliRunner

from artpivot.cli import cli
from artpivot.storage.database import Database


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")


@pytest.fixture
def runner():
    return CliRunner()


class TestCatalogueCommands:
    def test_seed_then_stats(self, runner, db_path):
        result = runner.invoke(cli, ["--db", db_path, "seed"])
        assert result.exit_code == 0
        assert "new artworks" in result.output

        result = runner.invoke(cli, ["--db", db_path, "stats"])
        assert result.exit_code == 0
        assert "Artworks" in result.output

    def test_list_artworks_empty(self, runner, db_path):
        result = runner.invoke(cli, ["--db", db_path, "list-artworks"])
        assert result.exit_code == 0
        assert "No artworks found" in result.output

    def test_list_periods_after_seed(self, runner, db_path):
        runner.invoke(cli, ["--db", db_path, "seed"])
        result = runner.invoke(cli, ["--db", db_path, "list-periods"])
        assert "Renaissance" in result.output

    def test_migrate_fresh_database(self, runner, db_path):
        result = runner.invoke(cli, ["--db", db_path, "migrate"])
        assert result.exit_code == 0
        assert "up to date" in result.output


class TestExtractCommand:
    def test_local_extract_and_save(self, runner, db_path, tmp_path, handout_text):
        doc = tmp_path / "week3.txt"
        doc.write_text(handout_text, encoding="utf-8")

        result = runner.invoke(cli, ["--db", db_path, "extract", str(doc), "--save"])
        assert result.exit_code == 0, result.output
        assert "Saved" in result.output

        db = Database(db_path)
        assert len(db.list_artworks()) == 8
        assert [h.filename for h in db.list_history()] == ["week3.txt"]

    def test_no_images_without_key_fails(self, runner, db_path, tmp_path, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        doc = tmp_path / "notes.md"
        doc.write_text("READING:\nPollitt, ch. 2\n", encoding="utf-8")
        result = runner.invoke(cli, ["--db", db_path, "extract", str(doc)])
        assert result.exit_code == 1
        assert "--api-key" in result.output

    def test_unsupported_file_fails(self, runner, db_path, tmp_path):
        doc = tmp_path / "notes.pdf"
        doc.write_bytes(b"%PDF-1.4")
        result = runner.invoke(cli, ["--db", db_path, "extract", str(doc)])
        assert result.exit_code == 1
