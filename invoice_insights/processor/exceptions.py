class ProcessorError(Exception):
    """Base exception for queue, dispatcher and result-store errors."""


class UnitNotFoundError(ProcessorError):
    """Raised when a document unit id is not present in the queue."""


class RecordNotFoundError(ProcessorError):
    """Raised when an extracted record id is not present in the result store."""


class QueueStateError(ProcessorError):
    """Raised when a status change would break the queue's invariants."""
