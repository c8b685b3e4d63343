from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseSettings):
    """Generative Language API configuration."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="GEMINI_API_KEY",
    )
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias="GEMINI_BASE_URL",
    )
    model: str = Field(
        default="gemini-2.0-flash",
        validation_alias="GEMINI_MODEL",
    )
    api_key_header: str = Field(
        default="X-goog-api-key",
        validation_alias="GEMINI_API_KEY_HEADER",
    )

    @property
    def generate_content_url(self) -> str:
        """Full URL of the ``generateContent`` method for the configured model."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class SpeechConfig(BaseSettings):
    """Cloud Text-to-Speech configuration."""

    url: str = "https://texttospeech.googleapis.com/v1/text:synthesize"
    language_code: str = "te-IN"
    sample_rate_hertz: int = Field(default=24000, ge=8000, le=48000)

    model_config = SettingsConfigDict(
        env_prefix="TTS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class RetryConfig(BaseSettings):
    """Retry/backoff policy for outbound API calls."""

    max_attempts: int = Field(default=4, ge=1, le=10)
    base_delay_ms: int = Field(default=500, ge=0)
    max_jitter_ms: int = Field(default=100, ge=0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="RETRY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Sheeter Counsel AI Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    flow_log_file: str = "logs/flows.log"

    # Generative Language API
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    # Text-to-Speech
    speech: SpeechConfig = Field(default_factory=SpeechConfig)

    # Outbound retry policy
    retry: RetryConfig = Field(default_factory=RetryConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
