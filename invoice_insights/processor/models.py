import uuid
from dataclasses import dataclass, field
from enum import Enum

from invoice_insights.extraction.models import FieldValue


def new_id() -> str:
    return str(uuid.uuid4())


class UnitStatus(str, Enum):
    """Lifecycle of a queued document."""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DocumentUnit:
    """One document queued for extraction.

    ``content`` is the data URI produced by the document decoder; ``name`` is
    the original file name or the archive entry path.
    """

    name: str
    content: str
    id: str = field(default_factory=new_id)
    status: UnitStatus = UnitStatus.PENDING
    error_message: str | None = None
    attempts: int = 0


@dataclass
class ExtractedRecord:
    """One invoice entry extracted from a document, linked to it by name only."""

    source_file_name: str
    fields: dict[str, FieldValue] = field(default_factory=dict)
    id: str = field(default_factory=new_id)
