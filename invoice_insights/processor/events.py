from invoice_insights.logging.logger import Log
from invoice_insights.processor.models import DocumentUnit, ExtractedRecord


class ProcessingListener:
    """Receives ingestion and dispatch notifications.

    Every hook is a no-op; front ends override the ones they display.
    """

    def on_ingested(self, upload_name: str, units: list[DocumentUnit]) -> None:
        pass

    def on_ingestion_rejected(self, upload_name: str, message: str) -> None:
        pass

    def on_unit_started(self, unit: DocumentUnit) -> None:
        pass

    def on_unit_completed(self, unit: DocumentUnit, records: list[ExtractedRecord]) -> None:
        pass

    def on_unit_failed(self, unit: DocumentUnit, message: str) -> None:
        pass


class LoggingListener(ProcessingListener):
    def on_ingested(self, upload_name: str, units: list[DocumentUnit]) -> None:
        Log.info(f"Ingested {upload_name}: {len(units)} document(s) queued")

    def on_ingestion_rejected(self, upload_name: str, message: str) -> None:
        Log.warning(f"Rejected {upload_name}: {message}")

    def on_unit_started(self, unit: DocumentUnit) -> None:
        Log.info(f"Extracting {unit.name}", unit=unit.id, attempt=unit.attempts)

    def on_unit_completed(self, unit: DocumentUnit, records: list[ExtractedRecord]) -> None:
        Log.info(f"Extracted {len(records)} record(s) from {unit.name}", unit=unit.id)

    def on_unit_failed(self, unit: DocumentUnit, message: str) -> None:
        Log.error(f"Extraction failed for {unit.name}: {message}", unit=unit.id)
