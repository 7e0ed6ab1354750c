import pymupdf

from invoice_insights.documents.base import BaseTextReader
from invoice_insights.documents.exceptions import DocumentTextError


class PyMuPdfReader(BaseTextReader):
    """Reads PDF text with PyMuPDF."""

    def read(self, document_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=document_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise DocumentTextError(f"pymupdf could not read PDF: {exc}") from exc
        return "\n".join(pages).strip()
