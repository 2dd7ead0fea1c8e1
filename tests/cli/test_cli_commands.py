"""Tests for the admin CLI."""

import pytest
from typer.testing import CliRunner

from grammar_practice.cli.commands import app
from grammar_practice.config.app_config import WORKBOOK_ENV, load_app_config
from grammar_practice.db.sheets_repository import load_roster
from grammar_practice.db.workbook import SqliteWorkbook

runner = CliRunner()


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(WORKBOOK_ENV, raising=False)
    return tmp_path


@pytest.fixture
def workbook_path(project_dir):
    path = project_dir / "workbook.db"
    result = runner.invoke(app, ["init-workbook", str(path), "-t", "Jane Doe", "-t", "John Smith"])
    assert result.exit_code == 0, result.output
    return path


class TestInitWorkbook:
    """Tests for `grammar init-workbook`."""

    def test_creates_standard_sheets(self, workbook_path):
        assert SqliteWorkbook(workbook_path).sheet_names() == [
            "Teacher Emails",
            "Student Roster",
            "Grammar Questions",
            "Student Proficiency Jane Doe",
            "Student Proficiency John Smith",
        ]

    def test_rerun_keeps_data(self, workbook_path):
        SqliteWorkbook(workbook_path).append_row("Teacher Emails", ["t@orono.k12.mn.us"])
        result = runner.invoke(app, ["init-workbook", str(workbook_path)])
        assert result.exit_code == 0
        assert len(SqliteWorkbook(workbook_path).read_rows("Teacher Emails")) == 2


class TestImportRows:
    """Tests for `grammar import-rows`."""

    def test_imports_csv_without_header(self, workbook_path, project_dir):
        csv_file = project_dir / "roster.csv"
        csv_file.write_text(
            "Email,Last Name,First Name,Teacher,Period\n"
            "a@orono.k12.mn.us,Adams,Amy,Jane Doe,3\n"
            "b@orono.k12.mn.us,Brown,Ben,Jane Doe,5\n"
        )
        result = runner.invoke(
            app, ["import-rows", "Student Roster", str(csv_file), "-w", str(workbook_path)]
        )
        assert result.exit_code == 0, result.output
        assert "Imported 2 rows" in result.output
        roster = load_roster(SqliteWorkbook(workbook_path))
        assert [s.first_name for s in roster] == ["Amy", "Ben"]

    def test_unknown_sheet(self, workbook_path, project_dir):
        csv_file = project_dir / "x.csv"
        csv_file.write_text("h\nv\n")
        result = runner.invoke(app, ["import-rows", "Nope", str(csv_file), "-w", str(workbook_path)])
        assert result.exit_code == 1
        assert "Sheet not found" in result.output


class TestConfigure:
    """Tests for `grammar configure`."""

    def test_saves_location(self, workbook_path):
        result = runner.invoke(app, ["configure", str(workbook_path)])
        assert result.exit_code == 0, result.output
        assert load_app_config(force_reload=True).store.workbook_path == str(workbook_path.resolve())

    def test_missing_workbook(self, project_dir):
        result = runner.invoke(app, ["configure", str(project_dir / "missing.db")])
        assert result.exit_code == 1


class TestSheets:
    """Tests for `grammar sheets`."""

    def test_lists_configured_workbook(self, workbook_path):
        runner.invoke(app, ["configure", str(workbook_path)])
        result = runner.invoke(app, ["sheets"])
        assert result.exit_code == 0, result.output
        assert "Student Roster" in result.output

    def test_unconfigured(self, project_dir):
        result = runner.invoke(app, ["sheets"])
        assert result.exit_code == 1
        assert "not configured" in result.output
