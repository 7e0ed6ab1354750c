from collections.abc import Iterable
from datetime import date

from invoice_insights.extraction.columns import EXPORT_COLUMNS, FIELD_COLUMNS, FILE_NAME, SL_NO
from invoice_insights.processor.models import ExtractedRecord


def to_rows(records: Iterable[ExtractedRecord]) -> list[dict[str, object]]:
    """Flatten records into column-keyed rows in export column order.

    SL No. is the 1-based position in the collection, not a stored field.
    """
    rows: list[dict[str, object]] = []
    for position, record in enumerate(records, start=1):
        row: dict[str, object] = {SL_NO: position}
        for header, key in FIELD_COLUMNS:
            row[header] = record.fields.get(key)
        row[FILE_NAME] = record.source_file_name
        rows.append(row)
    return rows


def export_file_name(kind: str, extension: str, today: date | None = None) -> str:
    """Dated artifact name such as ``invoice_insights_export_2024-05-01.csv``."""
    stamp = (today or date.today()).isoformat()
    return f"invoice_insights_{kind}_{stamp}.{extension}"


__all__ = ["EXPORT_COLUMNS", "export_file_name", "to_rows"]
