class DocumentTextError(Exception):
    """Raised when text cannot be read from a document."""
