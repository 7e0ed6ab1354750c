from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    document_engine: str = "pdfplumber"

    extraction_provider: str = "openai"
    extraction_api_key: str = ""
    extraction_model_name: str = "gpt-4o-mini"
    extraction_base_url: str | None = None
    extraction_temperature: float = 0.0
    extraction_timeout_seconds: int = 60

    treat_empty_extraction_as_failure: bool = True

    export_dir: str = "exports"
