from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Attachment:
    """A document sent alongside the prompt when no text could be read from it."""

    filename: str
    data_uri: str


class BaseExtractionClient(ABC):
    """Contract for provider-specific extraction AI clients."""

    @abstractmethod
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
        """Return provider response as plain text."""
