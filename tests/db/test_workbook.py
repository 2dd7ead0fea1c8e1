"""Tests for the tabular store adapters."""

import pytest

from grammar_practice.core.errors import NotFoundError, NotFoundReason, StoreError
from grammar_practice.db.workbook import MemoryWorkbook, SqliteWorkbook


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each adapter behind the same protocol."""
    if request.param == "memory":
        return MemoryWorkbook()
    return SqliteWorkbook(tmp_path / "workbook.db", create=True)


class TestTabularStore:
    """Behaviour shared by every adapter."""

    def test_create_sheet_writes_header(self, store):
        store.create_sheet("Teacher Emails", ["Email"])
        assert store.read_rows("Teacher Emails") == [["Email"]]

    def test_create_sheet_is_idempotent(self, store):
        store.create_sheet("Teacher Emails", ["Email"])
        store.append_row("Teacher Emails", ["t@x"])
        store.create_sheet("Teacher Emails", ["Other"])
        assert store.read_rows("Teacher Emails") == [["Email"], ["t@x"]]

    def test_sheet_names_in_creation_order(self, store):
        for name in ["B", "A", "C"]:
            store.create_sheet(name, ["h"])
        assert store.sheet_names() == ["B", "A", "C"]

    def test_append_keeps_order_and_types(self, store):
        store.create_sheet("Log", ["Timestamp", "Score"])
        store.append_row("Log", ["2026-10-19T08:00:00+00:00", 7])
        store.append_row("Log", ["2026-10-19T09:00:00+00:00", 8.5])
        rows = store.read_rows("Log")
        assert rows[1] == ["2026-10-19T08:00:00+00:00", 7]
        assert rows[2] == ["2026-10-19T09:00:00+00:00", 8.5]
        assert isinstance(rows[1][1], int)

    def test_read_missing_sheet(self, store):
        with pytest.raises(NotFoundError) as exc:
            store.read_rows("Nope")
        assert exc.value.reason == NotFoundReason.TABLE_NOT_FOUND

    def test_append_missing_sheet(self, store):
        with pytest.raises(NotFoundError):
            store.append_row("Nope", ["x"])

    def test_read_returns_copies(self, store):
        store.create_sheet("S", ["h"])
        rows = store.read_rows("S")
        rows.append(["mutated"])
        assert store.read_rows("S") == [["h"]]


class TestSqliteWorkbook:
    """SQLite-specific behaviour."""

    def test_missing_file_raises_store_error(self, tmp_path):
        with pytest.raises(StoreError):
            SqliteWorkbook(tmp_path / "missing.db")

    def test_data_survives_reopen(self, tmp_path):
        path = tmp_path / "workbook.db"
        first = SqliteWorkbook(path, create=True)
        first.create_sheet("Student Roster", ["Email"])
        first.append_row("Student Roster", ["s@x"])

        reopened = SqliteWorkbook(path)
        assert reopened.sheet_names() == ["Student Roster"]
        assert reopened.read_rows("Student Roster") == [["Email"], ["s@x"]]

    def test_create_flag_makes_parent_dirs(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "workbook.db"
        SqliteWorkbook(path, create=True)
        assert path.exists()

    def test_deleted_file_not_recreated(self, tmp_path):
        path = tmp_path / "workbook.db"
        wb = SqliteWorkbook(path, create=True)
        path.unlink()

        with pytest.raises(StoreError):
            wb.sheet_names()
        assert not path.exists()

    def test_path_with_uri_characters(self, tmp_path):
        path = tmp_path / "class #3?.db"
        SqliteWorkbook(path, create=True).create_sheet("S", ["h"])
        assert SqliteWorkbook(path).read_rows("S") == [["h"]]
