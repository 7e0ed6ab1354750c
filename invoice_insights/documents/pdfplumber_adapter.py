import io

import pdfplumber

from invoice_insights.documents.base import BaseTextReader
from invoice_insights.documents.exceptions import DocumentTextError


class PdfPlumberReader(BaseTextReader):
    """Reads PDF text page by page with pdfplumber."""

    def read(self, document_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(document_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise DocumentTextError(f"pdfplumber could not read PDF: {exc}") from exc
        return "\n".join(pages).strip()
