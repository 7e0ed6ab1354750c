from dataclasses import dataclass, field

from invoice_insights.processor.ingestion_queue import IngestionQueue
from invoice_insights.processor.results import ResultAggregator


@dataclass
class SystemState:
    """Everything one session holds in memory: the queue and the extracted records."""

    queue: IngestionQueue = field(default_factory=IngestionQueue)
    results: ResultAggregator = field(default_factory=ResultAggregator)
