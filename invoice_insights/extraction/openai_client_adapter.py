import httpx
import openai

from invoice_insights.extraction.client_base import Attachment, BaseExtractionClient
from invoice_insights.extraction.exceptions import ExtractionError, ExtractionNetworkError

RESPONSE_SCHEMA_NAME = "invoice_entries"

_NETWORK_ERRORS = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    httpx.ConnectError,
    httpx.TimeoutException,
)


class OpenAIClientAdapter(BaseExtractionClient):
    """Chat client for OpenAI and OpenAI-compatible hosts.

    Documents without a text layer travel as ``file`` content parts next to
    the prompt, so the model reads them directly.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

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
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": self._user_content(user_prompt, attachments)},
        ]
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format=self._response_format(json_schema),
                messages=messages,
            )
        except _NETWORK_ERRORS as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ExtractionError("AI returned empty response")
        return content

    @staticmethod
    def _response_format(json_schema: dict[str, object]) -> dict[str, object]:
        return {
            "type": "json_schema",
            "json_schema": {
                "name": RESPONSE_SCHEMA_NAME,
                "strict": True,
                "schema": json_schema,
            },
        }

    @staticmethod
    def _user_content(
        user_prompt: str,
        attachments: tuple[Attachment, ...],
    ) -> str | list[dict[str, object]]:
        if not attachments:
            return user_prompt
        file_parts = [
            {
                "type": "file",
                "file": {"filename": a.filename, "file_data": a.data_uri},
            }
            for a in attachments
        ]
        return [{"type": "text", "text": user_prompt}, *file_parts]
