"""Tabular store adapters.

A workbook is an ordered set of named sheets; each sheet is a list of rows
(header at index 0). Operations consume the store only through the
TabularStore protocol.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import structlog

from grammar_practice.core.errors import NotFoundError, NotFoundReason, StoreError
from grammar_practice.db.database import get_db, init_db

logger = structlog.get_logger(__name__)

Row = list[Any]


class TabularStore(Protocol):
    """Generic tabular data access."""

    def sheet_names(self) -> list[str]:
        """Names of all sheets, in workbook order."""
        ...

    def read_rows(self, sheet_name: str) -> list[Row]:
        """All rows of a sheet including the header row.

        Raises:
            NotFoundError: If the sheet does not exist.
        """
        ...

    def append_row(self, sheet_name: str, row: Row) -> None:
        """Append one row to the end of a sheet."""
        ...

    def create_sheet(self, sheet_name: str, header: Row) -> None:
        """Create a sheet with a header row. No-op if it already exists."""
        ...


def _sheet_not_found(sheet_name: str) -> NotFoundError:
    return NotFoundError(NotFoundReason.TABLE_NOT_FOUND, f"Sheet not found: {sheet_name}")


class MemoryWorkbook:
    """In-process workbook.

    Args:
        sheets: Initial sheets as ``{name: rows}``; rows include the header.
    """

    def __init__(self, sheets: dict[str, list[Row]] | None = None):
        self._sheets: dict[str, list[Row]] = {
            name: [list(r) for r in rows] for name, rows in (sheets or {}).items()
        }

    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def read_rows(self, sheet_name: str) -> list[Row]:
        if sheet_name not in self._sheets:
            raise _sheet_not_found(sheet_name)
        return [list(r) for r in self._sheets[sheet_name]]

    def append_row(self, sheet_name: str, row: Row) -> None:
        if sheet_name not in self._sheets:
            raise _sheet_not_found(sheet_name)
        self._sheets[sheet_name].append(list(row))

    def create_sheet(self, sheet_name: str, header: Row) -> None:
        if sheet_name not in self._sheets:
            self._sheets[sheet_name] = [list(header)]


class SqliteWorkbook:
    """Workbook persisted in a single SQLite file.

    Args:
        path: Workbook file. Must already exist unless ``create`` is True.
        create: Initialize the schema (and file) when missing.
    """

    def __init__(self, path: Path, create: bool = False):
        self.path = Path(path)
        if create:
            init_db(self.path)
        elif not self.path.is_file():
            raise StoreError(f"Workbook file not found: {self.path}")

    def sheet_names(self) -> list[str]:
        with get_db(self.path) as conn:
            rows = conn.execute("SELECT name FROM sheets ORDER BY position").fetchall()
        return [r["name"] for r in rows]

    def read_rows(self, sheet_name: str) -> list[Row]:
        with get_db(self.path) as conn:
            exists = conn.execute(
                "SELECT 1 FROM sheets WHERE name = ?", (sheet_name,)
            ).fetchone()
            if exists is None:
                raise _sheet_not_found(sheet_name)
            rows = conn.execute(
                "SELECT cells FROM sheet_rows WHERE sheet_name = ? ORDER BY row_index",
                (sheet_name,),
            ).fetchall()
        return [_decode_cells(r["cells"]) for r in rows]

    def append_row(self, sheet_name: str, row: Row) -> None:
        with get_db(self.path) as conn:
            exists = conn.execute(
                "SELECT 1 FROM sheets WHERE name = ?", (sheet_name,)
            ).fetchone()
            if exists is None:
                raise _sheet_not_found(sheet_name)
            # Single INSERT: the row lands whole or not at all
            conn.execute(
                """
                INSERT INTO sheet_rows (sheet_name, row_index, cells)
                SELECT ?, COALESCE(MAX(row_index) + 1, 0), ?
                FROM sheet_rows WHERE sheet_name = ?
                """,
                (sheet_name, json.dumps(list(row)), sheet_name),
            )

        logger.debug("workbook.row_appended", sheet=sheet_name)

    def create_sheet(self, sheet_name: str, header: Row) -> None:
        with get_db(self.path) as conn:
            exists = conn.execute(
                "SELECT 1 FROM sheets WHERE name = ?", (sheet_name,)
            ).fetchone()
            if exists is not None:
                return
            conn.execute(
                """
                INSERT INTO sheets (name, position)
                SELECT ?, COALESCE(MAX(position) + 1, 0) FROM sheets
                """,
                (sheet_name,),
            )
            conn.execute(
                "INSERT INTO sheet_rows (sheet_name, row_index, cells) VALUES (?, 0, ?)",
                (sheet_name, json.dumps(list(header))),
            )

        logger.info("workbook.sheet_created", sheet=sheet_name, path=str(self.path))


def _decode_cells(raw: str) -> Row:
    try:
        cells = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StoreError(f"Corrupt row in workbook: {e}") from e
    if not isinstance(cells, list):
        raise StoreError("Corrupt row in workbook: expected a list of cells")
    return cells
