import io
import zipfile
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from invoice_insights.export.exceptions import ExportError
from invoice_insights.export.excel_exporter import ExcelExporter
from invoice_insights.logging.logger import Log
from invoice_insights.processor.models import ExtractedRecord

WORKBOOK_ENTRY = "invoice_data.xlsx"

SourceDocument = tuple[str, bytes]


class ArchiveExporter:
    """ZIP bundle of the invoice workbook plus the original source documents."""

    extension = "zip"

    def __init__(self, excel_exporter: ExcelExporter | None = None) -> None:
        self._excel = excel_exporter if excel_exporter is not None else ExcelExporter()

    def render(
        self,
        records: Sequence[ExtractedRecord],
        sources: Sequence[SourceDocument],
    ) -> bytes:
        buffer = io.BytesIO()
        used_names = {WORKBOOK_ENTRY}
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(WORKBOOK_ENTRY, self._excel.render(records))
            for name, raw_bytes in sources:
                entry_name = _unique_name(name, used_names)
                used_names.add(entry_name)
                archive.writestr(entry_name, raw_bytes)
        return buffer.getvalue()

    def export(
        self,
        records: Sequence[ExtractedRecord],
        sources: Sequence[SourceDocument],
        destination: Path,
    ) -> Path:
        payload = self.render(records, sources)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(payload)
        except OSError as exc:
            raise ExportError(f"Could not write {destination}: {exc}") from exc
        Log.info(
            f"Exported archive with {len(records)} records and {len(sources)} documents "
            f"to {destination}"
        )
        return destination


def _unique_name(name: str, used: set[str]) -> str:
    """Suffix duplicate entry names: a.pdf, a (2).pdf, a (3).pdf, ..."""
    if name not in used:
        return name
    path = PurePosixPath(name)
    counter = 2
    while True:
        candidate = str(path.with_name(f"{path.stem} ({counter}){path.suffix}"))
        if candidate not in used:
            return candidate
        counter += 1
