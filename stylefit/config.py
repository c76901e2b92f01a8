"""Configuration management for the StyleFit try-on app."""

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class ModelConfig(BaseModel):
    """Generative model settings."""
    name: str = "gemini-2.5-flash-image-preview"


class ServerConfig(BaseModel):
    """HTTP server settings."""
    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseSettings):
    """Main application configuration."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
        protected_namespaces=(),
    )
    
    # Gemini credential (loaded from .env or the process environment)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    
    # Sub-configs
    model: ModelConfig = Field(default_factory=ModelConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    
    download_filename: str = "stylefit-try-on.png"
    max_upload_mb: int = 20
    log_level: str = "INFO"
    
    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_config() -> AppConfig:
    """Load configuration from environment and defaults.
    
    Raises:
        ConfigurationError: If no Gemini API key is configured.
    """
    config = AppConfig()
    if not config.gemini_api_key:
        raise ConfigurationError(
            "GEMINI_API_KEY environment variable not set"
        )
    return config
