from invoice_insights.extraction.base import BaseExtractor
from invoice_insights.extraction.extractor import InvoiceExtractor
from invoice_insights.extraction.factory import ExtractorFactory

__all__ = ["BaseExtractor", "ExtractorFactory", "InvoiceExtractor"]
