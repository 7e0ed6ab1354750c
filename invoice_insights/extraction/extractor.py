"""AI-powered invoice extractor."""

import asyncio
import json
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

from invoice_insights.documents.base import BaseTextReader
from invoice_insights.documents.exceptions import DocumentTextError
from invoice_insights.extraction.base import BaseExtractor
from invoice_insights.extraction.client_base import Attachment, BaseExtractionClient
from invoice_insights.extraction.exceptions import ExtractionError
from invoice_insights.extraction.models import FieldValue
from invoice_insights.extraction.prompt_loader import load_json_schema, load_prompt_template
from invoice_insights.extraction.validator import validate_entries
from invoice_insights.ingestion.document_decoder import DocumentDecoder
from invoice_insights.ingestion.exceptions import IngestionError
from invoice_insights.ingestion.media_types import DOCUMENT_MEDIA_TYPES
from invoice_insights.logging.logger import Log

_EXTENSION_BY_MEDIA_TYPE = {media_type: ext for ext, media_type in DOCUMENT_MEDIA_TYPES.items()}
_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


class InvoiceExtractor(BaseExtractor):
    """Extracts invoice entries from an encoded document using an AI provider.

    Documents with a registered text reader are sent as plain text; others
    (and documents whose text comes back empty, e.g. scanned PDFs) are
    attached to the request as files.
    """

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.0,
        text_readers: Mapping[str, BaseTextReader] | None = None,
        decoder: DocumentDecoder | None = None,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "You extract structured invoice data and answer only with JSON.",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._text_readers = dict(text_readers or {})
        self._decoder = decoder if decoder is not None else DocumentDecoder()
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    async def extract(
        self,
        encoded_document: str,
        columns: Sequence[str],
    ) -> list[dict[str, FieldValue]]:
        if not encoded_document or not encoded_document.startswith("data:"):
            raise ExtractionError("Invalid document data URI provided.")
        try:
            raw_bytes, media_type = self._decoder.decode(encoded_document)
        except IngestionError as exc:
            raise ExtractionError(f"Could not decode document: {exc}") from exc

        document_text = await self._read_text(raw_bytes, media_type)
        attachments: tuple[Attachment, ...] = ()
        if not document_text:
            extension = _EXTENSION_BY_MEDIA_TYPE.get(media_type, "bin")
            attachments = (Attachment(f"document.{extension}", encoded_document),)

        prompt = self._build_prompt(columns, document_text)
        Log.debug(f"Extraction prompt:\n{prompt}")

        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
            attachments=attachments,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        entries = validate_entries(parse_response(raw_response))
        Log.info(f"Extraction complete: {len(entries)} invoice entries")
        return entries

    async def _read_text(self, raw_bytes: bytes, media_type: str) -> str:
        reader = self._text_readers.get(media_type)
        if reader is None:
            return ""
        try:
            return await asyncio.to_thread(reader.read, raw_bytes)
        except DocumentTextError as exc:
            raise ExtractionError(f"Could not read document text: {exc}") from exc

    def _build_prompt(self, columns: Sequence[str], document_text: str) -> str:
        return self._prompt_template.format(
            columns=", ".join(columns),
            document_text=document_text,
            json_schema=self._json_schema,
        )


def parse_response(raw: str) -> dict[str, object]:
    """Decode the model answer, tolerating a markdown code fence around it.

    Raises:
        ExtractionError: if the answer is not a JSON object or array.
    """
    fenced = _FENCE_RE.match(raw.strip())
    payload = fenced.group(1) if fenced else raw
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"Invalid JSON response: {exc}") from exc

    # Some providers answer with the bare array despite the schema.
    if isinstance(parsed, list):
        return {"invoices": parsed}
    if not isinstance(parsed, dict):
        raise ExtractionError("JSON response must be an object")
    return parsed
