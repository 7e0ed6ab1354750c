"""
Command-line interface for Invoice Insights.

Uploads PDF/Word documents or ZIP bundles, extracts invoice entries through
the configured AI provider one document at a time, and writes CSV, Excel
and ZIP exports.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from invoice_insights.config.settings import Settings
from invoice_insights.export.rows import EXPORT_COLUMNS, to_rows
from invoice_insights.ingestion.exceptions import IngestionError
from invoice_insights.logging.logger import Log
from invoice_insights.processor.events import LoggingListener
from invoice_insights.processor.models import DocumentUnit, ExtractedRecord, UnitStatus
from invoice_insights.processor.session import InvoiceSession, build_session

app = typer.Typer(
    name="invoice-insights",
    help="Extract invoice data from PDF, Word and ZIP uploads",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

_STATUS_STYLES = {
    UnitStatus.PENDING: "dim",
    UnitStatus.IN_FLIGHT: "yellow",
    UnitStatus.DONE: "green",
    UnitStatus.FAILED: "red",
}


class ConsoleListener(LoggingListener):
    """Prints a one-line notification for each ingestion and extraction outcome."""

    def on_ingested(self, upload_name: str, units: list[DocumentUnit]) -> None:
        super().on_ingested(upload_name, units)
        console.print(f"[cyan]Queued[/cyan] {upload_name}: {len(units)} document(s)")

    def on_ingestion_rejected(self, upload_name: str, message: str) -> None:
        super().on_ingestion_rejected(upload_name, message)
        console.print(f"[red]Rejected[/red] {upload_name}: {message}")

    def on_unit_completed(self, unit: DocumentUnit, records: list[ExtractedRecord]) -> None:
        super().on_unit_completed(unit, records)
        console.print(f"[green]Extraction complete[/green] {unit.name}: {len(records)} entries")

    def on_unit_failed(self, unit: DocumentUnit, message: str) -> None:
        super().on_unit_failed(unit, message)
        console.print(f"[red]Extraction failed[/red] {unit.name}: {message}")


async def _ingest_and_drain(session: InvoiceSession, paths: List[Path]) -> int:
    rejected = 0
    for path in paths:
        try:
            await session.add_path(path)
        except IngestionError:
            rejected += 1
    await session.wait_idle()
    return rejected


def _units_table(units: List[DocumentUnit]) -> Table:
    table = Table(title="Documents")
    table.add_column("#", justify="right")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Error")
    for position, unit in enumerate(units, start=1):
        style = _STATUS_STYLES[unit.status]
        table.add_row(
            str(position),
            unit.name,
            f"[{style}]{unit.status.value}[/{style}]",
            unit.error_message or "",
        )
    return table


def _records_table(records: List[ExtractedRecord]) -> Table:
    table = Table(title="Extracted Data")
    for header in EXPORT_COLUMNS:
        table.add_column(header, overflow="fold")
    for row in to_rows(records):
        table.add_row(*("" if row[h] is None else str(row[h]) for h in EXPORT_COLUMNS))
    return table


@app.command()
def process(
    paths: List[Path] = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="PDF, Word (.doc/.docx) or ZIP files to ingest",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Directory for exports (defaults to EXPORT_DIR)",
    ),
    csv: bool = typer.Option(True, "--csv/--no-csv", help="Write a CSV export"),
    xlsx: bool = typer.Option(True, "--xlsx/--no-xlsx", help="Write an Excel export"),
    archive: bool = typer.Option(
        False,
        "--zip/--no-zip",
        help="Write a ZIP with the workbook and the processed source documents",
    ),
):
    """Ingest documents, extract invoice entries and write exports."""
    settings = Settings()
    Log.configure(settings.log_level, console=err_console)
    session = build_session(settings, listener=ConsoleListener())

    rejected = asyncio.run(_ingest_and_drain(session, paths))

    console.print(_units_table(session.units))
    if session.records:
        console.print(_records_table(session.records))

    if not session.records:
        console.print("[yellow]No invoice entries extracted; nothing exported[/yellow]")
    elif not (csv or xlsx or archive):
        console.print("[yellow]All export formats disabled; nothing written[/yellow]")
    else:
        out_dir = out if out is not None else Path(settings.export_dir)
        for written in session.write_exports(out_dir, csv=csv, xlsx=xlsx, archive=archive):
            console.print(f"[bold]Wrote[/bold] {written}")

    failed = sum(1 for unit in session.units if unit.status is UnitStatus.FAILED)
    if rejected or failed:
        raise typer.Exit(code=1)


@app.command("show-config")
def show_config():
    """Print the effective settings (API key masked)."""
    settings = Settings()
    table = Table(title="Settings")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        if key == "extraction_api_key" and value:
            value = f"{value[:4]}…"
        table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    app()
