"""Converts raw document bytes to and from a self-describing data URI."""

import base64
import binascii
import re

from invoice_insights.ingestion.exceptions import (
    DecodeFailedError,
    UnsupportedMediaTypeError,
)
from invoice_insights.ingestion.media_types import ENCODABLE_MEDIA_TYPES

_DATA_URI_RE = re.compile(r"^data:(?P<media_type>[^;,]+);base64,(?P<payload>.*)$", re.DOTALL)


class DocumentDecoder:
    """Encodes documents as ``data:<media type>;base64,<payload>`` strings."""

    def encode(self, raw_bytes: bytes, media_type: str) -> str:
        """Build the data URI for a document.

        Raises:
            UnsupportedMediaTypeError: if media_type is not pdf, doc, docx or zip.
        """
        self._require_supported(media_type)
        payload = base64.b64encode(raw_bytes).decode("ascii")
        return f"data:{media_type};base64,{payload}"

    def decode(self, data_uri: str) -> tuple[bytes, str]:
        """Recover the original bytes and media type from a data URI.

        Raises:
            DecodeFailedError: if the string is not a base64 data URI.
            UnsupportedMediaTypeError: if the embedded media type is not allowed.
        """
        match = _DATA_URI_RE.match(data_uri)
        if match is None:
            raise DecodeFailedError("Document is not a base64 data URI")
        media_type = match.group("media_type")
        self._require_supported(media_type)
        try:
            raw_bytes = base64.b64decode(match.group("payload"), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeFailedError(f"Invalid base64 payload: {exc}") from exc
        return raw_bytes, media_type

    @staticmethod
    def media_type_of(data_uri: str) -> str | None:
        match = _DATA_URI_RE.match(data_uri)
        return match.group("media_type") if match else None

    @staticmethod
    def _require_supported(media_type: str) -> None:
        if media_type not in ENCODABLE_MEDIA_TYPES:
            raise UnsupportedMediaTypeError(f"Media type '{media_type}' is not supported")
