"""Excel workbook export for extracted invoice records."""

import io
from collections.abc import Sequence
from decimal import Decimal

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from invoice_insights.export.base import DataExporter
from invoice_insights.export.rows import EXPORT_COLUMNS, to_rows
from invoice_insights.processor.models import ExtractedRecord

SHEET_TITLE = "Invoices"

_CURRENCY_COLUMNS = frozenset({"Amount (excl. GST)", "Total incl. GST"})

COLUMN_WIDTHS: dict[str, int] = {
    "SL No.": 8,
    "Client Name": 28,
    "Client ID": 14,
    "Invoice No": 16,
    "Invoice Date": 14,
    "Period": 16,
    "Purpose": 24,
    "Amount (excl. GST)": 18,
    "GST % Used": 11,
    "Total incl. GST": 18,
    "Status": 14,
    "Link": 30,
    "File Name": 32,
}


class ExcelExporter(DataExporter):
    """Single-sheet workbook with a styled, frozen header row."""

    extension = "xlsx"
    currency_format = "#,##0.00"

    def __init__(self) -> None:
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        thin = Side(style="thin", color="CCCCCC")
        self.cell_border = Border(left=thin, right=thin, top=thin, bottom=thin)

    def render(self, records: Sequence[ExtractedRecord]) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE
        self._write_headers(ws)
        for row_num, row in enumerate(to_rows(records), start=2):
            self._write_row(ws, row_num, row)
        for col, header in enumerate(EXPORT_COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(col)].width = COLUMN_WIDTHS[header]

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def _write_headers(self, ws: Worksheet) -> None:
        for col, header in enumerate(EXPORT_COLUMNS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.cell_border
        ws.freeze_panes = "A2"

    def _write_row(self, ws: Worksheet, row_num: int, row: dict[str, object]) -> None:
        for col, header in enumerate(EXPORT_COLUMNS, start=1):
            value = row.get(header)
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = self.cell_border
            if header in _CURRENCY_COLUMNS and isinstance(value, Decimal):
                cell.number_format = self.currency_format
