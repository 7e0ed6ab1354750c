from abc import ABC, abstractmethod


class BaseTextReader(ABC):
    """Contract for all document text reading adapters."""

    @abstractmethod
    def read(self, document_bytes: bytes) -> str:
        """Read plain text from a document.

        Args:
            document_bytes: Raw file content.

        Returns:
            Extracted text as a single stripped string ('' when the
            document has no text layer).

        Raises:
            DocumentTextError: if reading fails for any reason.
        """
