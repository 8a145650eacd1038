"""Unit tests for CLI interface."""

from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from taxonomy_importer.cli import app
from taxonomy_importer.models.results import ImportResult
from taxonomy_importer.models.terms import TaxonomyKind
from taxonomy_importer.store.sqlite import SQLiteTermStore

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "terms.db"


@pytest.fixture
def categories_csv(tmp_path):
    path = tmp_path / "categories.csv"
    path.write_text(
        "name,slug,description,parent\n"
        "Technology,tech,Tech related posts,\n"
        "Web Development,web-dev,,Technology\n",
        encoding="utf-8",
    )
    return path


class TestCLI:
    """Test CLI interface."""

    def test_cli_app_structure(self):
        assert isinstance(app, typer.Typer)

    @pytest.mark.parametrize("command", ["import", "validate", "terms"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])

        assert result.exit_code == 0
        assert "Usage" in result.stdout


class TestImportCommand:
    def test_import_success(self, categories_csv, db_path):
        result = runner.invoke(app, ["import", str(categories_csv), "--db", str(db_path)])

        assert result.exit_code == 0
        assert "Import completed successfully!" in result.stdout
        assert "Created: 2 | Skipped: 0 | Errors: 0" in result.stdout

        with SQLiteTermStore(db_path) as store:
            technology = store.exists("Technology", TaxonomyKind.CATEGORY)
            web_dev = store.exists("Web Development", TaxonomyKind.CATEGORY)
        assert web_dev.parent_id == technology.term_id

    def test_reimport_skips_everything(self, categories_csv, db_path):
        runner.invoke(app, ["import", str(categories_csv), "--db", str(db_path)])

        result = runner.invoke(app, ["import", str(categories_csv), "--db", str(db_path)])

        assert result.exit_code == 0
        assert "Created: 0 | Skipped: 2 | Errors: 0" in result.stdout

    def test_import_as_tags(self, categories_csv, db_path):
        result = runner.invoke(
            app, ["import", str(categories_csv), "--db", str(db_path), "--taxonomy", "tag"]
        )

        assert result.exit_code == 0
        with SQLiteTermStore(db_path) as store:
            assert all(r.parent_id == 0 for r in store.list_terms(TaxonomyKind.TAG))

    def test_missing_name_column(self, tmp_path, db_path):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("title,slug\nTechnology,tech\n")

        result = runner.invoke(app, ["import", str(csv_path), "--db", str(db_path)])

        assert result.exit_code == 1
        assert "Import failed" in result.stdout
        assert "missing required name column" in result.stdout

    def test_unknown_taxonomy(self, categories_csv, db_path):
        result = runner.invoke(
            app, ["import", str(categories_csv), "--db", str(db_path), "-t", "genre"]
        )

        assert result.exit_code == 1
        assert "invalid taxonomy type" in result.stdout

    @patch("taxonomy_importer.cli.new_session_id", return_value="cafe1234")
    @patch("taxonomy_importer.cli.TaxonomyImporter")
    def test_session_id_shown_and_passed(
        self, mock_importer_class, mock_session_id, categories_csv, db_path
    ):
        mock_importer_class.return_value.import_file.return_value = ImportResult(
            success=True, created=2
        )

        result = runner.invoke(app, ["import", str(categories_csv), "--db", str(db_path)])

        assert result.exit_code == 0
        assert "cafe1234" in result.stdout
        _, kwargs = mock_importer_class.return_value.import_file.call_args
        assert kwargs["session_id"] == "cafe1234"

    @patch("taxonomy_importer.cli.TaxonomyImporter")
    def test_stopped_read_is_reported(self, mock_importer_class, categories_csv, db_path):
        mock_importer_class.return_value.import_file.return_value = ImportResult(
            success=True, created=1, message="stopped reading after line 2"
        )

        result = runner.invoke(app, ["import", str(categories_csv), "--db", str(db_path)])

        assert result.exit_code == 0
        assert "stopped reading after line 2" in result.stdout

    def test_missing_file(self, tmp_path, db_path):
        result = runner.invoke(app, ["import", str(tmp_path / "nope.csv"), "--db", str(db_path)])

        assert result.exit_code == 2

    def test_missing_config_file(self, categories_csv, tmp_path):
        result = runner.invoke(
            app, ["import", str(categories_csv), "--config", str(tmp_path / "none.yaml")]
        )

        assert result.exit_code == 1
        assert "Could not load configuration" in result.stdout

    def test_config_file_selects_store(self, categories_csv, tmp_path):
        config_path = tmp_path / "config.yaml"
        store_path = tmp_path / "configured.db"
        config_path.write_text(f"store:\n  path: {store_path}\n")

        result = runner.invoke(app, ["import", str(categories_csv), "-c", str(config_path)])

        assert result.exit_code == 0
        assert store_path.exists()


class TestValidateCommand:
    def test_validate_success(self, tmp_path):
        csv_path = tmp_path / "tags.csv"
        csv_path.write_text("Name,Slug\nPython,python\n\n,orphan\n")

        result = runner.invoke(app, ["validate", str(csv_path)])

        assert result.exit_code == 0
        assert "PASS: Header is valid" in result.stdout
        assert "Data rows: 2" in result.stdout
        assert "Blank rows: 1" in result.stdout
        assert "Rows without a name" in result.stdout

    def test_validate_empty_file(self, tmp_path):
        csv_path = tmp_path / "empty.csv"
        csv_path.write_text("")

        result = runner.invoke(app, ["validate", str(csv_path)])

        assert result.exit_code == 1
        assert "Validation failed" in result.stdout
        assert "file is empty or invalid" in result.stdout


class TestTermsCommand:
    def test_terms_tree(self, categories_csv, db_path):
        runner.invoke(app, ["import", str(categories_csv), "--db", str(db_path)])

        result = runner.invoke(app, ["terms", "--db", str(db_path)])

        assert result.exit_code == 0
        assert "category (2)" in result.stdout
        assert "Web Development (web-dev)" in result.stdout
        assert "tag (0)" in result.stdout
        assert "no terms" in result.stdout

    def test_terms_unknown_taxonomy(self, db_path):
        result = runner.invoke(app, ["terms", "--db", str(db_path), "-t", "genre"])

        assert result.exit_code == 1
        assert "invalid taxonomy type" in result.stdout
