"""Configuration management for the report extractor."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from docextract.models.usage import Pricing


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Locations
    schemas_directory: str = "./schemas"
    output_base_directory: str = "./extraction"
    schema_file: Optional[str] = None

    # Pricing (USD per 1M tokens)
    input_cost_per_million: float = 2.0
    output_cost_per_million: float = 8.0

    # Logging
    log_level: str = "INFO"

    @property
    def pricing(self) -> Pricing:
        """Per-million token rates used for cost estimates."""
        return Pricing(
            input_per_million=self.input_cost_per_million,
            output_per_million=self.output_cost_per_million,
        )


settings = Settings()
