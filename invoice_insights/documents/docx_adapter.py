import io

from docx import Document

from invoice_insights.documents.base import BaseTextReader
from invoice_insights.documents.exceptions import DocumentTextError


class DocxReader(BaseTextReader):
    """Reads Word (.docx) paragraphs, then table rows joined with ' | '."""

    def read(self, document_bytes: bytes) -> str:
        try:
            document = Document(io.BytesIO(document_bytes))
        except Exception as exc:
            raise DocumentTextError(f"python-docx could not open document: {exc}") from exc

        lines = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return "\n".join(lines).strip()
