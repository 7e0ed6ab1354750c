from collections.abc import Iterable, Iterator, Mapping

from invoice_insights.extraction.models import FieldValue
from invoice_insights.processor.exceptions import RecordNotFoundError
from invoice_insights.processor.models import ExtractedRecord


class ResultAggregator:
    """Ordered store of extracted records across all processed documents.

    Records are only reordered or dropped by an explicit ``remove`` (or
    ``clear``).
    """

    def __init__(self) -> None:
        self._records: list[ExtractedRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExtractedRecord]:
        return iter(list(self._records))

    @property
    def records(self) -> list[ExtractedRecord]:
        return list(self._records)

    def append(
        self,
        source_file_name: str,
        entries: Iterable[Mapping[str, FieldValue]],
    ) -> list[ExtractedRecord]:
        """Wrap each field mapping in a record with a fresh id and append it."""
        added = [
            ExtractedRecord(source_file_name=source_file_name, fields=dict(entry))
            for entry in entries
        ]
        self._records.extend(added)
        return added

    def get(self, record_id: str) -> ExtractedRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise RecordNotFoundError(f"Record {record_id} not found")

    def update(self, record_id: str, fields: Mapping[str, FieldValue]) -> ExtractedRecord:
        """Replace the fields of one record, keeping its id and position."""
        record = self.get(record_id)
        record.fields = dict(fields)
        return record

    def remove(self, record_id: str) -> ExtractedRecord:
        record = self.get(record_id)
        self._records.remove(record)
        return record

    def clear(self) -> int:
        removed = len(self._records)
        self._records.clear()
        return removed
