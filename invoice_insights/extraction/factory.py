from typing import ClassVar

from invoice_insights.config.settings import Settings
from invoice_insights.documents.factory import TextReaderFactory
from invoice_insights.extraction.base import BaseExtractor
from invoice_insights.extraction.example_client_adapter import ExampleClientAdapter
from invoice_insights.extraction.extractor import InvoiceExtractor
from invoice_insights.extraction.openai_client_adapter import OpenAIClientAdapter


class ExtractorFactory:
    """Creates the configured invoice extractor."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseExtractor:
        """Create a configured extractor from application settings."""
        provider = settings.extraction_provider.lower()
        text_readers = TextReaderFactory.create(settings)
        if provider == "example":
            return InvoiceExtractor(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                text_readers=text_readers,
            )
        client = OpenAIClientAdapter(
            api_key=settings.extraction_api_key,
            timeout_seconds=settings.extraction_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return InvoiceExtractor(
            client=client,
            model=settings.extraction_model_name,
            temperature=settings.extraction_temperature,
            text_readers=text_readers,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = (settings.extraction_base_url or "").strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "extraction_base_url is required for extraction_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        raise ValueError(
            f"Unknown extraction provider '{provider}'. "
            f"Choose from: {cls.supported_providers()}"
        )
