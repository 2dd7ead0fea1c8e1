"""CLI commands for grammar practice administration.

Commands:
- configure: Store the workbook location in the config file
- init-workbook: Create the standard sheets and per-teacher proficiency sheets
- import-rows: Append CSV rows to a sheet
- sheets: List sheets with row counts
- serve: Run the Web API
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from grammar_practice.config.app_config import load_app_config, save_workbook_location
from grammar_practice.core.errors import GrammarPracticeError
from grammar_practice.db.records import (
    FIRST_DATA_ROW,
    PROFICIENCY_HEADER,
    QUESTION_HEADER,
    ROSTER_HEADER,
    SHEET_GRAMMAR_QUESTIONS,
    SHEET_STUDENT_ROSTER,
    SHEET_TEACHER_EMAILS,
    TEACHER_HEADER,
    proficiency_sheet_name,
)
from grammar_practice.db.workbook import SqliteWorkbook

app = typer.Typer(
    name="grammar",
    help="Administration for the grammar practice web application.",
    no_args_is_help=True,
)

console = Console()


def _open_workbook_or_exit(workbook: Path | None) -> SqliteWorkbook:
    """Open the given or configured workbook, or exit with a helpful error."""
    try:
        path = workbook or load_app_config().store.require_workbook_path()
        return SqliteWorkbook(path)
    except GrammarPracticeError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1)


@app.command()
def configure(
    workbook: Path = typer.Argument(..., help="Path to the workbook file"),
) -> None:
    """Verify a workbook opens and save its location."""
    wb = _open_workbook_or_exit(workbook)
    try:
        names = wb.sheet_names()
    except GrammarPracticeError as e:
        console.print(f"[red]✗ Invalid workbook or access denied: {e.message}[/red]")
        raise typer.Exit(code=1)

    config_file = save_workbook_location(workbook.resolve())
    console.print(f"[green]✓ Workbook configured[/green] ({len(names)} sheets)")
    console.print(f"  [dim]config:[/dim] {config_file}")


@app.command(name="init-workbook")
def init_workbook(
    workbook: Path = typer.Argument(..., help="Workbook file to create or extend"),
    teacher: list[str] = typer.Option(
        [], "--teacher", "-t", help="Teacher name for a proficiency sheet (repeatable)"
    ),
) -> None:
    """Create the standard sheets with headers."""
    wb = SqliteWorkbook(workbook, create=True)

    wb.create_sheet(SHEET_TEACHER_EMAILS, TEACHER_HEADER)
    wb.create_sheet(SHEET_STUDENT_ROSTER, ROSTER_HEADER)
    wb.create_sheet(SHEET_GRAMMAR_QUESTIONS, QUESTION_HEADER)
    for name in teacher:
        wb.create_sheet(proficiency_sheet_name(name), PROFICIENCY_HEADER)

    console.print(f"[green]✓ Workbook ready:[/green] {workbook}")
    for name in wb.sheet_names():
        console.print(f"  - {name}")


@app.command(name="import-rows")
def import_rows(
    sheet: str = typer.Argument(..., help="Target sheet name"),
    csv_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV with a header row"),
    workbook: Optional[Path] = typer.Option(None, "--workbook", "-w", help="Workbook file"),
) -> None:
    """Append the data rows of a CSV file to a sheet."""
    wb = _open_workbook_or_exit(workbook)

    with open(csv_file, newline="", encoding="utf-8-sig") as f:
        rows = list(csv.reader(f))[FIRST_DATA_ROW:]

    try:
        for row in rows:
            wb.append_row(sheet, row)
    except GrammarPracticeError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Imported {len(rows)} rows into '{sheet}'[/green]")


@app.command()
def sheets(
    workbook: Optional[Path] = typer.Argument(None, help="Workbook file (default: configured)"),
) -> None:
    """List sheets with their data row counts."""
    wb = _open_workbook_or_exit(workbook)

    names = wb.sheet_names()
    if not names:
        console.print("[yellow]Workbook has no sheets[/yellow]")
        console.print("  Use: grammar init-workbook <workbook>")
        return

    table = Table(title=str(wb.path))
    table.add_column("Sheet")
    table.add_column("Rows", justify="right")
    for name in names:
        table.add_row(name, str(max(len(wb.read_rows(name)) - FIRST_DATA_ROW, 0)))
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    uvicorn.run("grammar_practice.web.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
