from collections.abc import Mapping
from pathlib import Path

from invoice_insights.config.settings import Settings
from invoice_insights.export.archive_exporter import ArchiveExporter, SourceDocument
from invoice_insights.export.csv_exporter import CsvExporter
from invoice_insights.export.excel_exporter import ExcelExporter
from invoice_insights.export.rows import export_file_name
from invoice_insights.extraction.base import BaseExtractor
from invoice_insights.extraction.factory import ExtractorFactory
from invoice_insights.extraction.models import FieldValue
from invoice_insights.ingestion.document_decoder import DocumentDecoder
from invoice_insights.ingestion.exceptions import IngestionError
from invoice_insights.logging.logger import Log
from invoice_insights.processor.dispatcher import Dispatcher
from invoice_insights.processor.events import LoggingListener, ProcessingListener
from invoice_insights.processor.ingestor import Ingestor
from invoice_insights.processor.models import DocumentUnit, ExtractedRecord
from invoice_insights.processor.state import SystemState


class InvoiceSession:
    """User-facing actions over one in-memory ingestion session.

    Uploads are queued and dispatched automatically; failed units wait for an
    explicit ``retry``. Methods that schedule extraction must be called from
    a running event loop.
    """

    def __init__(
        self,
        extractor: BaseExtractor,
        *,
        listener: ProcessingListener | None = None,
        ingestor: Ingestor | None = None,
        treat_empty_as_failure: bool = True,
    ) -> None:
        self.state = SystemState()
        self._listener = listener if listener is not None else LoggingListener()
        self._ingestor = ingestor if ingestor is not None else Ingestor()
        self._decoder = DocumentDecoder()
        self.dispatcher = Dispatcher(
            self.state,
            extractor,
            listener=self._listener,
            treat_empty_as_failure=treat_empty_as_failure,
        )
        self._csv = CsvExporter()
        self._excel = ExcelExporter()
        self._archive = ArchiveExporter(self._excel)

    @property
    def units(self) -> list[DocumentUnit]:
        return list(self.state.queue)

    @property
    def records(self) -> list[ExtractedRecord]:
        return self.state.results.records

    async def add_path(self, path: Path) -> list[DocumentUnit]:
        try:
            units = await self._ingestor.ingest_path(path)
        except IngestionError as exc:
            self._listener.on_ingestion_rejected(path.name, str(exc))
            raise
        return self._enqueue(path.name, units)

    async def add_upload(self, name: str, raw_bytes: bytes, media_type: str) -> list[DocumentUnit]:
        try:
            units = await self._ingestor.ingest_bytes(name, raw_bytes, media_type)
        except IngestionError as exc:
            self._listener.on_ingestion_rejected(name, str(exc))
            raise
        return self._enqueue(name, units)

    def _enqueue(self, upload_name: str, units: list[DocumentUnit]) -> list[DocumentUnit]:
        for unit in units:
            self.state.queue.enqueue(unit)
        self._listener.on_ingested(upload_name, units)
        if units:
            self.dispatcher.trigger()
        return units

    def retry(self, unit_id: str) -> DocumentUnit:
        """Send a failed unit back to pending and wake the dispatcher."""
        unit = self.state.queue.retry(unit_id)
        Log.info(f"Retrying {unit.name}", unit=unit.id)
        self.dispatcher.trigger()
        return unit

    async def wait_idle(self) -> None:
        await self.dispatcher.wait_idle()

    def clear_queue(self) -> None:
        """Forget every queued document; an outstanding extraction result is discarded."""
        removed = self.state.queue.clear()
        Log.info(f"Cleared {removed} queued document(s)")

    def clear_all(self) -> None:
        self.clear_queue()
        removed = self.state.results.clear()
        Log.info(f"Cleared {removed} extracted record(s)")

    def update_record(self, record_id: str, fields: Mapping[str, FieldValue]) -> ExtractedRecord:
        return self.state.results.update(record_id, fields)

    def remove_record(self, record_id: str) -> ExtractedRecord:
        return self.state.results.remove(record_id)

    def source_documents(self) -> list[SourceDocument]:
        """Original bytes of every successfully processed unit, in queue order."""
        return [
            (unit.name, self._decoder.decode(unit.content)[0])
            for unit in self.state.queue.done_units()
        ]

    def export_csv(self) -> bytes:
        return self._csv.render(self.records)

    def export_xlsx(self) -> bytes:
        return self._excel.render(self.records)

    def export_archive(self) -> bytes:
        return self._archive.render(self.records, self.source_documents())

    def write_exports(
        self,
        out_dir: Path,
        *,
        csv: bool = True,
        xlsx: bool = True,
        archive: bool = False,
    ) -> list[Path]:
        written: list[Path] = []
        if csv:
            written.append(
                self._csv.export(self.records, out_dir / export_file_name("export", "csv"))
            )
        if xlsx:
            written.append(
                self._excel.export(self.records, out_dir / export_file_name("export", "xlsx"))
            )
        if archive:
            written.append(
                self._archive.export(
                    self.records,
                    self.source_documents(),
                    out_dir / export_file_name("archive", "zip"),
                )
            )
        return written


def build_session(
    settings: Settings,
    listener: ProcessingListener | None = None,
) -> InvoiceSession:
    """Build a session with the extractor configured in settings."""
    return InvoiceSession(
        ExtractorFactory.create(settings),
        listener=listener,
        treat_empty_as_failure=settings.treat_empty_extraction_as_failure,
    )
