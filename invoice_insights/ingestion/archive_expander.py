"""Expands an uploaded ZIP container into standalone document entries."""

import io
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass

from invoice_insights.ingestion.exceptions import ArchiveCorruptError
from invoice_insights.ingestion.media_types import document_media_type
from invoice_insights.logging.logger import Log

_ENCRYPTED_FLAG = 0x1


@dataclass(frozen=True)
class ArchiveEntry:
    """One qualifying document found inside an archive."""

    path: str
    media_type: str
    raw_bytes: bytes


class ArchiveExpander:
    """Lazily enumerates pdf/doc/docx entries of a ZIP archive.

    Directory entries and files with any other extension (including nested
    archives) are dropped without error.
    """

    def expand(self, archive_bytes: bytes) -> Iterator[ArchiveEntry]:
        """Open the archive eagerly and return a lazy iterator over its documents.

        Raises:
            ArchiveCorruptError: if the bytes are not a readable ZIP archive,
                either on open or while reading an entry.
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(archive_bytes))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as exc:
            raise ArchiveCorruptError(f"Could not open ZIP archive: {exc}") from exc
        return self._iter_entries(archive)

    def _iter_entries(self, archive: zipfile.ZipFile) -> Iterator[ArchiveEntry]:
        with archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                media_type = document_media_type(info.filename)
                if media_type is None:
                    Log.debug(f"Skipping unsupported archive entry {info.filename}")
                    continue
                yield ArchiveEntry(
                    path=info.filename,
                    media_type=media_type,
                    raw_bytes=self._read(archive, info),
                )

    @staticmethod
    def _read(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        if info.flag_bits & _ENCRYPTED_FLAG:
            raise ArchiveCorruptError(
                f"Archive entry '{info.filename}' is password protected"
            )
        try:
            return archive.read(info)
        except (zipfile.BadZipFile, EOFError, OSError, NotImplementedError, RuntimeError) as exc:
            raise ArchiveCorruptError(
                f"Could not read archive entry '{info.filename}': {exc}"
            ) from exc
