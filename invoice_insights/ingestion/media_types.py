from pathlib import PurePosixPath

PDF = "application/pdf"
DOC = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ZIP = "application/zip"

DOCUMENT_MEDIA_TYPES: dict[str, str] = {
    "pdf": PDF,
    "doc": DOC,
    "docx": DOCX,
}

# Browsers and OSes report ZIP archives under several names.
ARCHIVE_MEDIA_TYPES = frozenset({ZIP, "application/x-zip-compressed", "application/x-zip"})

ENCODABLE_MEDIA_TYPES = frozenset({PDF, DOC, DOCX, ZIP})
UPLOAD_MEDIA_TYPES = frozenset({PDF, DOC, DOCX}) | ARCHIVE_MEDIA_TYPES


def extension_of(name: str) -> str:
    """Lower-cased extension without the dot, '' when there is none."""
    return PurePosixPath(name).suffix.lower().lstrip(".")


def document_media_type(name: str) -> str | None:
    """Media type for a document file name, None for anything not pdf/doc/docx."""
    return DOCUMENT_MEDIA_TYPES.get(extension_of(name))


def guess_upload_media_type(name: str) -> str | None:
    """Media type of a top-level upload judged by its extension."""
    if extension_of(name) == "zip":
        return ZIP
    return document_media_type(name)


def is_archive(media_type: str) -> bool:
    return media_type in ARCHIVE_MEDIA_TYPES
