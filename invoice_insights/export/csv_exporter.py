from collections.abc import Sequence

import pandas as pd

from invoice_insights.export.base import DataExporter
from invoice_insights.export.rows import EXPORT_COLUMNS, to_rows
from invoice_insights.processor.models import ExtractedRecord


class CsvExporter(DataExporter):
    """Comma separated UTF-8 table with the fixed invoice columns."""

    extension = "csv"

    def render(self, records: Sequence[ExtractedRecord]) -> bytes:
        df = pd.DataFrame(to_rows(records), columns=list(EXPORT_COLUMNS))
        return df.to_csv(index=False, lineterminator="\n").encode("utf-8")
