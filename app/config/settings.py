from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseSettings):
    """Google Gemini configuration."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="GEMINI_API_KEY",
    )
    model: str = Field(
        default="gemini-2.5-flash-lite",
        validation_alias="GEMINI_MODEL",
    )
    temperature: float = Field(
        default=0.3,
        validation_alias="GEMINI_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    thinking_budget: int = Field(
        default=0,
        validation_alias="GEMINI_THINKING_BUDGET",
        ge=0,
    )
    inline_size_limit_bytes: int = Field(
        default=18 * 1024 * 1024,
        validation_alias="GEMINI_INLINE_SIZE_LIMIT_BYTES",
        ge=1,
        description="Payloads strictly below this size are embedded in the request.",
    )
    poll_interval_seconds: float = Field(
        default=0.5,
        validation_alias="GEMINI_POLL_INTERVAL_SECONDS",
        ge=0.5,
        le=2.0,
    )
    poll_timeout_seconds: float = Field(
        default=300.0,
        validation_alias="GEMINI_POLL_TIMEOUT_SECONDS",
        gt=0.0,
    )
    upload_display_name: str = Field(
        default="Audio Upload",
        validation_alias="GEMINI_UPLOAD_DISPLAY_NAME",
    )
    default_media_type: str = Field(
        default="audio/webm",
        validation_alias="GEMINI_DEFAULT_MEDIA_TYPE",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Audio Study Notes Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/audio_pipeline.log"

    # Hard ceiling on accepted uploads, enforced before any remote call.
    max_upload_bytes: int = Field(default=50 * 1024 * 1024, ge=1)

    # Gemini
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

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
