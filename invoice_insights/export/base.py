from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from invoice_insights.export.exceptions import ExportError
from invoice_insights.logging.logger import Log
from invoice_insights.processor.models import ExtractedRecord


class DataExporter(ABC):
    """Renders extracted records into a downloadable artifact."""

    extension: str = ""

    @abstractmethod
    def render(self, records: Sequence[ExtractedRecord]) -> bytes:
        """Return the artifact bytes for the records, in collection order."""

    def export(self, records: Sequence[ExtractedRecord], destination: Path) -> Path:
        """Render the records and write them to ``destination``.

        Raises:
            ExportError: if the file cannot be written.
        """
        payload = self.render(records)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(payload)
        except OSError as exc:
            raise ExportError(f"Could not write {destination}: {exc}") from exc
        Log.info(f"Exported {len(records)} records to {destination}")
        return destination
