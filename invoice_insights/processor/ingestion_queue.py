from collections.abc import Iterator

from invoice_insights.logging.logger import Log
from invoice_insights.processor.exceptions import QueueStateError, UnitNotFoundError
from invoice_insights.processor.models import DocumentUnit, UnitStatus


class IngestionQueue:
    """Ordered collection of document units and their lifecycle status.

    Units keep their arrival order for their whole lifetime and are only
    removed by ``clear``. At most one unit may be ``IN_FLIGHT`` at a time.
    """

    def __init__(self) -> None:
        self._units: dict[str, DocumentUnit] = {}

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[DocumentUnit]:
        return iter(list(self._units.values()))

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._units

    def enqueue(self, unit: DocumentUnit) -> DocumentUnit:
        """Append a unit at the tail of the queue."""
        if unit.id in self._units:
            raise QueueStateError(f"Unit {unit.id} is already queued")
        self._units[unit.id] = unit
        Log.debug(f"Enqueued {unit.name}", unit=unit.id)
        return unit

    def get(self, unit_id: str) -> DocumentUnit:
        """Return the unit with the given id.

        Raises:
            UnitNotFoundError: if no such unit is queued.
        """
        unit = self._units.get(unit_id)
        if unit is None:
            raise UnitNotFoundError(f"Unit {unit_id} not found")
        return unit

    def find(self, unit_id: str) -> DocumentUnit | None:
        return self._units.get(unit_id)

    def next_pending(self) -> DocumentUnit | None:
        """Oldest unit still waiting to be processed."""
        for unit in self._units.values():
            if unit.status is UnitStatus.PENDING:
                return unit
        return None

    def in_flight(self) -> DocumentUnit | None:
        for unit in self._units.values():
            if unit.status is UnitStatus.IN_FLIGHT:
                return unit
        return None

    def has_pending(self) -> bool:
        return self.next_pending() is not None

    def set_status(
        self,
        unit_id: str,
        status: UnitStatus,
        error_message: str | None = None,
    ) -> DocumentUnit:
        """Move a unit to ``status``; setting the current status again is a no-op.

        Raises:
            UnitNotFoundError: if no such unit is queued.
            QueueStateError: if another unit is already in flight.
        """
        unit = self.get(unit_id)
        if unit.status is status:
            return unit
        if status is UnitStatus.IN_FLIGHT:
            current = self.in_flight()
            if current is not None:
                raise QueueStateError(
                    f"Unit {current.id} is already in flight; cannot start {unit_id}"
                )
            unit.attempts += 1
        unit.status = status
        unit.error_message = error_message if status is UnitStatus.FAILED else None
        Log.debug(f"{unit.name} -> {status.value}", unit=unit_id)
        return unit

    def retry(self, unit_id: str) -> DocumentUnit:
        """Reset a failed unit to pending so the dispatcher picks it up again.

        Raises:
            QueueStateError: if the unit has not failed.
        """
        unit = self.get(unit_id)
        if unit.status is not UnitStatus.FAILED:
            raise QueueStateError(
                f"Only failed units can be retried; {unit.name} is {unit.status.value}"
            )
        return self.set_status(unit_id, UnitStatus.PENDING)

    def done_units(self) -> list[DocumentUnit]:
        return [unit for unit in self._units.values() if unit.status is UnitStatus.DONE]

    def statuses(self) -> list[UnitStatus]:
        return [unit.status for unit in self._units.values()]

    def clear(self) -> int:
        """Drop every unit. Returns how many were removed."""
        removed = len(self._units)
        self._units.clear()
        return removed
