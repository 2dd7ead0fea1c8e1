"""Workbook persistence.

Provides:
- Tabular store adapters (SQLite file, in-memory)
- Typed record schema per sheet
- Repository functions for reading sheets and appending attempts
"""

from grammar_practice.db.database import get_db, init_db
from grammar_practice.db.workbook import MemoryWorkbook, SqliteWorkbook, TabularStore

__all__ = ["get_db", "init_db", "MemoryWorkbook", "SqliteWorkbook", "TabularStore"]
