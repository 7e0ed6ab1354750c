from abc import ABC, abstractmethod
from collections.abc import Sequence

from invoice_insights.extraction.models import FieldValue


class BaseExtractor(ABC):
    """Contract for the extraction collaborator called by the dispatcher."""

    @abstractmethod
    async def extract(
        self,
        encoded_document: str,
        columns: Sequence[str],
    ) -> list[dict[str, FieldValue]]:
        """Extract invoice entries from one document.

        Args:
            encoded_document: ``data:<media type>;base64,...`` document.
            columns: Ordered column headers the entries should fill.

        Returns:
            Zero or more field mappings, one per invoice entry found.

        Raises:
            ExtractionError: on any failure.
        """
