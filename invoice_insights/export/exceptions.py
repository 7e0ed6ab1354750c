class ExportError(Exception):
    """Raised when an export artifact cannot be produced or written."""
