import asyncio
from pathlib import Path

from invoice_insights.ingestion.archive_expander import ArchiveExpander
from invoice_insights.ingestion.document_decoder import DocumentDecoder
from invoice_insights.ingestion.exceptions import DecodeFailedError, InvalidInputError
from invoice_insights.ingestion.media_types import (
    UPLOAD_MEDIA_TYPES,
    guess_upload_media_type,
    is_archive,
)
from invoice_insights.processor.models import DocumentUnit


class Ingestor:
    """Turns uploads (files or ZIP archives) into document units ready to queue.

    Nothing is returned unless the whole upload could be read: a corrupt
    archive yields no units at all.
    """

    def __init__(
        self,
        decoder: DocumentDecoder | None = None,
        expander: ArchiveExpander | None = None,
    ) -> None:
        self._decoder = decoder if decoder is not None else DocumentDecoder()
        self._expander = expander if expander is not None else ArchiveExpander()

    async def ingest_path(self, path: Path) -> list[DocumentUnit]:
        """Read a local file and ingest it under its file name.

        Raises:
            InvalidInputError: if the extension is not pdf, doc, docx or zip.
            DecodeFailedError: if the file cannot be read.
            ArchiveCorruptError: if a ZIP upload cannot be opened.
        """
        media_type = guess_upload_media_type(path.name)
        if media_type is None:
            raise InvalidInputError(
                f"'{path.name}' is not a PDF, Word or ZIP document"
            )
        raw_bytes = await asyncio.to_thread(self._read_file, path)
        return await self.ingest_bytes(path.name, raw_bytes, media_type)

    async def ingest_bytes(
        self,
        name: str,
        raw_bytes: bytes,
        media_type: str,
    ) -> list[DocumentUnit]:
        """Ingest an upload whose media type was declared by the caller."""
        if media_type not in UPLOAD_MEDIA_TYPES:
            raise InvalidInputError(
                f"'{name}' has type '{media_type}'; upload a PDF, Word or ZIP document"
            )
        if is_archive(media_type):
            return await asyncio.to_thread(self._expand, raw_bytes)
        content = self._decoder.encode(raw_bytes, media_type)
        return [DocumentUnit(name=name, content=content)]

    def _expand(self, archive_bytes: bytes) -> list[DocumentUnit]:
        return [
            DocumentUnit(
                name=entry.path,
                content=self._decoder.encode(entry.raw_bytes, entry.media_type),
            )
            for entry in self._expander.expand(archive_bytes)
        ]

    @staticmethod
    def _read_file(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise DecodeFailedError(f"Could not read '{path}': {exc}") from exc
