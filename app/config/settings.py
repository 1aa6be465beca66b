from typing import List, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


_DEFAULT_TRANSCRIPTION_MODELS = [
    "zai-org/GLM-ASR-Nano-2512",
    "facebook/wav2vec2-base-960h",
    "jonatasgrosman/wav2vec2-large-xlsr-53-english",
    "openai/whisper-small",
    "openai/whisper-base",
    "openai/whisper-medium",
]

_DEFAULT_COMPLETION_MODELS = [
    "meta-llama/Llama-3.1-8B-Instruct",
    "meta-llama/Meta-Llama-3.1-8B-Instruct",
    "mistralai/Mistral-7B-Instruct-v0.2",
    "mistralai/Mixtral-8x7B-Instruct-v0.1",
    "google/gemma-2-2b-it",
]


class HuggingFaceConfig(BaseSettings):
    """Hugging Face inference configuration."""

    token: Optional[SecretStr] = None
    inference_base_url: str = "https://api-inference.huggingface.co"
    chat_completions_url: str = "https://router.huggingface.co/v1/chat/completions"
    transcription_models: List[str] = Field(
        default_factory=lambda: list(_DEFAULT_TRANSCRIPTION_MODELS),
        description="Speech-to-text models, best first.",
    )
    completion_models: List[str] = Field(
        default_factory=lambda: list(_DEFAULT_COMPLETION_MODELS),
        description="Chat-completion models, best first.",
    )
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_tokens: int = Field(default=150, ge=1, le=4096)
    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    loading_retry_seconds: int = Field(
        default=20,
        ge=1,
        description="Retry hint used when a warming model gives no estimate.",
    )

    model_config = SettingsConfigDict(
        env_prefix="HF_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def credential(self) -> str | None:
        """Return the raw bearer token, or None when unset or blank."""
        if self.token is None:
            return None
        value = self.token.get_secret_value().strip()
        return value or None


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Animal Translator Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/translation_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"
    max_upload_bytes: int = Field(default=10_000_000, ge=1)

    # Hugging Face
    huggingface: HuggingFaceConfig = Field(default_factory=HuggingFaceConfig)

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
