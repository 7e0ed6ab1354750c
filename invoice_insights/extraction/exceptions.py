class ExtractionError(Exception):
    """Raised when invoice extraction fails."""


class ExtractionValidationError(ExtractionError):
    """Raised when the model response does not match the invoice schema."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
