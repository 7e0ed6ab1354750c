from invoice_insights.config.settings import Settings
from invoice_insights.documents.base import BaseTextReader
from invoice_insights.documents.docx_adapter import DocxReader
from invoice_insights.documents.pdfplumber_adapter import PdfPlumberReader
from invoice_insights.documents.pymupdf_adapter import PyMuPdfReader
from invoice_insights.ingestion.media_types import DOCX, PDF


class TextReaderFactory:
    """Builds the media type -> text reader map from settings.

    Legacy .doc has no reader; those documents are attached to the AI request.
    """

    PDF_ENGINES: dict[str, type[BaseTextReader]] = {
        "pdfplumber": PdfPlumberReader,
        "pymupdf": PyMuPdfReader,
    }

    @classmethod
    def create(cls, settings: Settings) -> dict[str, BaseTextReader]:
        engine = settings.document_engine.lower()
        pdf_reader_cls = cls.PDF_ENGINES.get(engine)
        if pdf_reader_cls is None:
            raise ValueError(
                f"Unknown document engine '{engine}'. Choose from: {list(cls.PDF_ENGINES)}"
            )
        return {
            PDF: pdf_reader_cls(),
            DOCX: DocxReader(),
        }
