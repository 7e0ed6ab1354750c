"""Offline extraction client.

Returns one placeholder invoice entry for every document. Useful for local
runs without an API key and as a template for new provider adapters:
implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import ClassVar

from invoice_insights.extraction.client_base import Attachment, BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Adapter that answers every request with a fixed, schema-valid payload."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "invoices": [
            {
                "client_name": "N/A",
                "client_id": None,
                "invoice_no": "N/A",
                "invoice_date": "N/A",
                "period": None,
                "purpose": "N/A",
                "amount_excl_gst": 0,
                "gst_percentage": 18,
                "total_incl_gst": 0,
                "status": "Unpaid",
                "link": None,
            }
        ]
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE
        self.calls = 0

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        attachments: tuple[Attachment, ...] = (),
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema, attachments
        self.calls += 1
        return json.dumps(self._response)
