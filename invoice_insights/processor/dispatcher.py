import asyncio
from collections.abc import Sequence

from invoice_insights.extraction.base import BaseExtractor
from invoice_insights.extraction.columns import EXTRACTION_COLUMNS
from invoice_insights.extraction.models import FieldValue
from invoice_insights.logging.logger import Log
from invoice_insights.processor.events import ProcessingListener
from invoice_insights.processor.models import DocumentUnit, UnitStatus
from invoice_insights.processor.state import SystemState

EMPTY_EXTRACTION_MESSAGE = "No invoice entries were found in the document"


class Dispatcher:
    """Drains the ingestion queue one unit at a time.

    A single drain loop runs at most once per dispatcher; triggers that
    arrive while it is running are absorbed by it, since the loop re-reads
    ``next_pending()`` after every unit. No timeout is applied to the
    extraction call: a hanging provider stalls the queue.
    """

    def __init__(
        self,
        state: SystemState,
        extractor: BaseExtractor,
        *,
        listener: ProcessingListener | None = None,
        columns: Sequence[str] = EXTRACTION_COLUMNS,
        treat_empty_as_failure: bool = True,
    ) -> None:
        self._state = state
        self._extractor = extractor
        self._listener = listener if listener is not None else ProcessingListener()
        self._columns = tuple(columns)
        self._treat_empty_as_failure = treat_empty_as_failure
        self._running = False
        self._task: asyncio.Task[int] | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    def trigger(self) -> asyncio.Task[int]:
        """Schedule a drain on the running event loop unless one is already scheduled."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.drain())
            self._task.add_done_callback(_log_drain_failure)
        return self._task

    async def wait_idle(self) -> None:
        """Wait until no drain is scheduled or running."""
        while self._task is not None and not self._task.done():
            await self._task

    async def drain(self) -> int:
        """Process pending units in FIFO order until none remain.

        Returns the number of units this call processed; 0 when another
        drain was already running.
        """
        if self._running:
            Log.debug("Dispatcher already running, trigger absorbed")
            return 0
        self._running = True
        processed = 0
        try:
            while True:
                queue = self._state.queue
                if queue.in_flight() is not None:
                    break
                unit = queue.next_pending()
                if unit is None:
                    break
                await self._process(unit)
                processed += 1
        finally:
            self._running = False
        if processed:
            Log.info(f"Queue drained: {processed} unit(s) processed")
        return processed

    async def _process(self, unit: DocumentUnit) -> None:
        self._state.queue.set_status(unit.id, UnitStatus.IN_FLIGHT)
        self._notify("on_unit_started", unit)
        try:
            entries = await self._extractor.extract(unit.content, self._columns)
        except asyncio.CancelledError:
            if self._is_current(unit):
                self._state.queue.set_status(unit.id, UnitStatus.PENDING)
            raise
        except Exception as exc:
            self._fail(unit, str(exc) or type(exc).__name__)
            return

        if not self._is_current(unit):
            Log.warning(f"Discarding result for {unit.name}: unit no longer queued", unit=unit.id)
            return
        if not entries and self._treat_empty_as_failure:
            self._fail(unit, EMPTY_EXTRACTION_MESSAGE)
            return
        self._complete(unit, entries)

    def _complete(self, unit: DocumentUnit, entries: list[dict[str, FieldValue]]) -> None:
        records = self._state.results.append(unit.name, entries)
        self._state.queue.set_status(unit.id, UnitStatus.DONE)
        self._notify("on_unit_completed", unit, records)

    def _fail(self, unit: DocumentUnit, message: str) -> None:
        if not self._is_current(unit):
            Log.warning(f"Discarding failure for {unit.name}: unit no longer queued", unit=unit.id)
            return
        self._state.queue.set_status(unit.id, UnitStatus.FAILED, error_message=message)
        self._notify("on_unit_failed", unit, message)

    def _notify(self, hook: str, unit: DocumentUnit, *args: object) -> None:
        # Listener errors never leave a unit stuck in flight.
        try:
            getattr(self._listener, hook)(unit, *args)
        except Exception as exc:
            Log.error(f"Listener {hook} failed for {unit.name}: {exc!r}", unit=unit.id)

    def _is_current(self, unit: DocumentUnit) -> bool:
        # A clear() while the call was outstanding makes its result stale.
        return self._state.queue.find(unit.id) is unit


def _log_drain_failure(task: asyncio.Task[int]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        Log.error(f"Dispatcher drain stopped: {exc!r}")
