class IngestionError(Exception):
    """Base exception for errors raised before a document enters the queue."""


class InvalidInputError(IngestionError):
    """Raised when an upload is not a PDF, Word document or ZIP archive."""


class ArchiveCorruptError(IngestionError):
    """Raised when a ZIP container cannot be opened or read."""


class UnsupportedMediaTypeError(IngestionError):
    """Raised when a media type is outside the encoding allow-list."""


class DecodeFailedError(IngestionError):
    """Raised when document bytes cannot be read or decoded."""
