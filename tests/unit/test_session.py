import asyncio
import io
import zipfile
from collections.abc import Callable, Coroutine, Sequence
from decimal import Decimal
from pathlib import Path
from typing import Any, TypeVar
from unittest.mock import MagicMock

import pytest
from openpyxl import load_workbook

from invoice_insights.config.settings import Settings
from invoice_insights.export.archive_exporter import WORKBOOK_ENTRY
from invoice_insights.extraction.base import BaseExtractor
from invoice_insights.extraction.exceptions import ExtractionNetworkError
from invoice_insights.extraction.extractor import InvoiceExtractor
from invoice_insights.extraction.models import FieldValue
from invoice_insights.ingestion import media_types
from invoice_insights.ingestion.document_decoder import DocumentDecoder
from invoice_insights.ingestion.exceptions import ArchiveCorruptError, InvalidInputError
from invoice_insights.processor.events import ProcessingListener
from invoice_insights.processor.exceptions import QueueStateError
from invoice_insights.processor.models import UnitStatus
from invoice_insights.processor.session import InvoiceSession, build_session

MakeZip = Callable[[dict[str, bytes]], bytes]
T = TypeVar("T")


class BytesExtractor(BaseExtractor):
    """Answers by the decoded document bytes; unknown bytes yield one entry."""

    def __init__(self, outcomes: dict[bytes, list[dict[str, FieldValue]] | Exception]) -> None:
        self._outcomes = outcomes
        self._decoder = DocumentDecoder()
        self.calls = 0

    async def extract(
        self,
        encoded_document: str,
        columns: Sequence[str],
    ) -> list[dict[str, FieldValue]]:
        self.calls += 1
        raw, _ = self._decoder.decode(encoded_document)
        outcome = self._outcomes.get(raw, [{"invoice_no": raw.decode()}])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _run(coro_fn: Callable[[], Coroutine[Any, Any, T]]) -> T:
    return asyncio.run(coro_fn())


class TestUploads:
    def test_single_upload_is_processed(self) -> None:
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        assert [u.status for u in session.units] == [UnitStatus.DONE]
        assert session.records[0].fields["invoice_no"] == "A"
        assert session.records[0].source_file_name == "a.pdf"

    def test_zip_upload_is_expanded_and_processed_in_order(self, make_zip: MakeZip) -> None:
        session = InvoiceSession(BytesExtractor({}))
        archive = make_zip({"one.pdf": b"1", "notes.txt": b"x", "two.docx": b"2"})

        async def scenario() -> None:
            await session.add_upload("bundle.zip", archive, media_types.ZIP)
            await session.wait_idle()

        _run(scenario)

        assert [u.name for u in session.units] == ["one.pdf", "two.docx"]
        assert [r.fields["invoice_no"] for r in session.records] == ["1", "2"]

    def test_rejected_upload_notifies_and_raises(self) -> None:
        listener = MagicMock(spec=ProcessingListener)
        session = InvoiceSession(BytesExtractor({}), listener=listener)

        with pytest.raises(InvalidInputError):
            _run(lambda: session.add_upload("photo.png", b"x", "image/png"))

        assert session.units == []
        listener.on_ingestion_rejected.assert_called_once()
        assert listener.on_ingestion_rejected.call_args.args[0] == "photo.png"

    def test_corrupt_archive_enqueues_nothing(self) -> None:
        session = InvoiceSession(BytesExtractor({}))
        with pytest.raises(ArchiveCorruptError):
            _run(lambda: session.add_upload("bad.zip", b"junk", media_types.ZIP))
        assert session.units == []

    def test_password_protected_archive_is_rejected(
        self, make_encrypted_zip: Callable[[str], bytes]
    ) -> None:
        listener = MagicMock(spec=ProcessingListener)
        session = InvoiceSession(BytesExtractor({}), listener=listener)
        archive = make_encrypted_zip("secret.pdf")

        with pytest.raises(ArchiveCorruptError):
            _run(lambda: session.add_upload("bundle.zip", archive, media_types.ZIP))

        assert session.units == []
        listener.on_ingestion_rejected.assert_called_once()
        assert listener.on_ingestion_rejected.call_args.args[0] == "bundle.zip"

    def test_add_path(self, tmp_path: Path) -> None:
        path = tmp_path / "inv.pdf"
        path.write_bytes(b"P")
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_path(path)
            await session.wait_idle()

        _run(scenario)

        assert session.records[0].source_file_name == "inv.pdf"

    def test_ingestion_listener_hook(self) -> None:
        listener = MagicMock(spec=ProcessingListener)
        session = InvoiceSession(BytesExtractor({}), listener=listener)

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        listener.on_ingested.assert_called_once_with("a.pdf", session.units)
        listener.on_unit_completed.assert_called_once()


class TestFailuresAndRetry:
    def test_failure_then_retry_succeeds(self) -> None:
        outcomes: dict[bytes, list[dict[str, FieldValue]] | Exception] = {
            b"B": ExtractionNetworkError("AI provider network error: down"),
        }
        session = InvoiceSession(BytesExtractor(outcomes))

        async def first_pass() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.add_upload("b.pdf", b"B", media_types.PDF)
            await session.wait_idle()

        _run(first_pass)
        failed = session.units[1]
        assert failed.status is UnitStatus.FAILED
        assert failed.error_message == "AI provider network error: down"
        assert len(session.records) == 1

        outcomes[b"B"] = [{"invoice_no": "B-1"}, {"invoice_no": "B-2"}]

        async def retry() -> None:
            session.retry(failed.id)
            await session.wait_idle()

        _run(retry)

        assert failed.status is UnitStatus.DONE
        assert failed.error_message is None
        assert failed.attempts == 2
        assert [r.fields["invoice_no"] for r in session.records] == ["A", "B-1", "B-2"]

    def test_empty_result_fails_by_default(self) -> None:
        session = InvoiceSession(BytesExtractor({b"E": []}))

        async def scenario() -> None:
            await session.add_upload("e.pdf", b"E", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        assert session.units[0].status is UnitStatus.FAILED
        assert session.records == []

    def test_empty_result_can_count_as_done(self) -> None:
        session = InvoiceSession(BytesExtractor({b"E": []}), treat_empty_as_failure=False)

        async def scenario() -> None:
            await session.add_upload("e.pdf", b"E", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        assert session.units[0].status is UnitStatus.DONE

    def test_retry_of_done_unit_is_rejected(self) -> None:
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.wait_idle()
            session.retry(session.units[0].id)

        with pytest.raises(QueueStateError):
            _run(scenario)


class TestEditingAndClearing:
    def _processed_session(self) -> InvoiceSession:
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.add_upload("b.pdf", b"B", media_types.PDF)
            await session.wait_idle()

        _run(scenario)
        return session

    def test_update_record(self) -> None:
        session = self._processed_session()
        record = session.records[0]

        session.update_record(record.id, {"status": "Paid", "total_incl_gst": Decimal("5")})

        assert session.records[0].fields["status"] == "Paid"
        assert session.records[0].fields["total_incl_gst"] == Decimal("5")

    def test_remove_record_renumbers_export(self) -> None:
        session = self._processed_session()

        session.remove_record(session.records[0].id)

        lines = session.export_csv().decode("utf-8").splitlines()
        assert len(lines) == 2
        assert lines[1].startswith("1,")
        assert lines[1].endswith(",b.pdf")

    def test_remove_record_keeps_unit_statuses(self) -> None:
        session = self._processed_session()
        statuses_before = [u.status for u in session.units]

        removed = session.remove_record(session.records[0].id)

        assert [u.status for u in session.units] == statuses_before
        assert len(session.records) == 1
        assert removed.id not in [r.id for r in session.records]

    def test_clear_queue_keeps_records(self) -> None:
        session = self._processed_session()
        session.clear_queue()
        assert session.units == []
        assert len(session.records) == 2

    def test_clear_all(self) -> None:
        session = self._processed_session()
        session.clear_all()
        assert session.units == []
        assert session.records == []


class TestExports:
    def test_source_documents_are_done_units_only(self) -> None:
        session = InvoiceSession(BytesExtractor({b"B": ExtractionNetworkError("down")}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.add_upload("b.pdf", b"B", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        assert session.source_documents() == [("a.pdf", b"A")]

    def test_export_archive(self) -> None:
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        with zipfile.ZipFile(io.BytesIO(session.export_archive())) as archive:
            assert archive.namelist() == [WORKBOOK_ENTRY, "a.pdf"]

    def test_export_xlsx(self) -> None:
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        ws = load_workbook(io.BytesIO(session.export_xlsx())).active
        assert ws["D2"].value == "A"

    def test_write_exports(self, tmp_path: Path) -> None:
        session = InvoiceSession(BytesExtractor({}))

        async def scenario() -> None:
            await session.add_upload("a.pdf", b"A", media_types.PDF)
            await session.wait_idle()

        _run(scenario)

        written = session.write_exports(tmp_path, csv=True, xlsx=False, archive=True)

        assert [p.suffix for p in written] == [".csv", ".zip"]
        assert all(p.parent == tmp_path and p.exists() for p in written)
        assert written[0].name.startswith("invoice_insights_export_")
        assert written[1].name.startswith("invoice_insights_archive_")


class TestBuildSession:
    def test_uses_configured_extractor(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            extraction_provider="example",
            treat_empty_extraction_as_failure=False,
        )

        session = build_session(settings)

        assert isinstance(session.dispatcher._extractor, InvoiceExtractor)
        assert session.dispatcher._treat_empty_as_failure is False
