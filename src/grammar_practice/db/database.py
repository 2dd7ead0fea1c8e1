"""SQLite connection and schema management for workbook files.

A workbook file holds every sheet of the store: one row in ``sheets`` per
sheet and one row in ``sheet_rows`` per sheet row, with the cells kept as a
JSON array so numbers and strings keep their types.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from grammar_practice.core.errors import StoreError

logger = structlog.get_logger(__name__)


def init_db(db_path: Path) -> None:
    """Initialize a workbook file with schema.

    Creates the file and all required tables if they don't exist.

    Args:
        db_path: Path to the workbook file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db(db_path, create=True) as conn:
        _create_schema(conn)

    logger.info("workbook.initialized", path=str(db_path))


@contextmanager
def get_db(db_path: Path, create: bool = False) -> Generator[sqlite3.Connection, None, None]:
    """Get workbook connection as context manager.

    Commits on success and rolls back on error. SQLite failures are
    re-raised as StoreError. The file must already exist unless ``create``
    is True.

    Example:
        with get_db(path) as conn:
            rows = conn.execute("SELECT name FROM sheets").fetchall()
    """
    try:
        if create:
            conn = sqlite3.connect(db_path)
        else:
            conn = sqlite3.connect(f"{Path(db_path).resolve().as_uri()}?mode=rw", uri=True)
    except sqlite3.Error as e:
        raise StoreError(f"Cannot open workbook {db_path}: {e}") from e

    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreError(f"Workbook error: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create workbook schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- Sheets in creation order
        CREATE TABLE IF NOT EXISTS sheets (
            name TEXT PRIMARY KEY,
            position INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        -- Rows per sheet; row_index 0 is the header
        CREATE TABLE IF NOT EXISTS sheet_rows (
            sheet_name TEXT NOT NULL REFERENCES sheets(name) ON DELETE CASCADE,
            row_index INTEGER NOT NULL,
            cells TEXT NOT NULL,
            PRIMARY KEY (sheet_name, row_index)
        );
        """
    )
